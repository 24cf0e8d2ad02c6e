"""
Platform Runner
---------------
- Gravity with jump + one double jump, fast fall while holding down
- Static and moving platforms, patrolling enemies, coins
- Stomp an enemy from above for points, touch it from the side and die
- Reach the top-right corner to finish a level; finish the last level to win
"""

from __future__ import annotations

import random
from typing import Dict, Optional, Sequence, Tuple

import numpy as np

from ..configs.game_config import PLATFORM_LEVELS
from ..engine.collision import CollisionRule
from ..engine.entities import Entity
from ..engine.input import InputState
from ..engine.rules import GameRules
from ..engine.session import Outcome, Session
from ..engine.utils import clamp

PLATFORM_COLOR = (6, 255, 165)
MOVING_PLATFORM_COLOR = (255, 0, 110)


class PlatformRunnerRules(GameRules):
    name = "platform_runner"
    actions = ("left", "right", "down", "jump")
    observation_size = 11

    def __init__(
        self,
        width: int = 800,
        height: int = 600,
        gravity: float = 0.6,
        fast_fall: float = 0.8,
        jump_force: float = -14,
        stomp_bounce: float = 0.6,
        player_speed: float = 5,
        player_size: float = 30,
        spawn: Tuple[float, float] = (50, 100),
        enemy_size: float = 25,
        enemy_speed: float = 1.5,
        coin_size: float = 15,
        coin_points: int = 10,
        stomp_points: int = 50,
        platform_move_speed: float = 2,
        platform_move_range: float = 100,
        goal_margin: float = 100,
        lives: int = 3,
        levels: Optional[Dict[int, dict]] = None,
        best_key: Optional[str] = None,
    ):
        super().__init__(width=width, height=height, best_key=best_key)
        self.gravity = gravity
        self.fast_fall = fast_fall
        self.jump_force = jump_force
        self.stomp_bounce = stomp_bounce
        self.player_speed = player_speed
        self.player_size = player_size
        self.spawn_point = spawn
        self.enemy_size = enemy_size
        self.enemy_speed = enemy_speed
        self.coin_size = coin_size
        self.coin_points = coin_points
        self.stomp_points = stomp_points
        self.platform_move_speed = platform_move_speed
        self.platform_move_range = platform_move_range
        self.goal_margin = goal_margin
        self.lives = lives
        self.levels = levels if levels is not None else PLATFORM_LEVELS
        assert 1 in self.levels, "Level table must start at level 1"

    # ----------------------------
    # Setup
    # ----------------------------

    def new_session(self, rng: random.Random) -> Session:
        player = Entity(kind="player", x=0.0, y=0.0, width=self.player_size,
                        height=self.player_size, color=(58, 134, 255))
        player.data.update(on_ground=False, can_double_jump=True, direction=1)
        session = Session(entities=[player], lives=self.lives, rng=rng)
        session.extra["last_death_tick"] = -1
        self.respawn(player)
        session.entities.extend(self.build_level(session, 1))
        return session

    def build_level(self, session: Session, level: int):
        layout = self.levels[level]
        entities = []
        for x, y, w, h, moving in layout["platforms"]:
            p = Entity(kind="platform", x=x, y=y, width=w, height=h,
                       vx=self.platform_move_speed if moving else 0.0,
                       color=MOVING_PLATFORM_COLOR if moving else PLATFORM_COLOR)
            p.data["start_x"] = x
            entities.append(p)
        for x, y, patrol in layout["enemies"]:
            e = Entity(kind="enemy", x=x, y=y, width=self.enemy_size, height=self.enemy_size,
                       vx=self.enemy_speed, color=(255, 0, 110))
            e.data.update(start_x=x, range=patrol, stomped=False)
            entities.append(e)
        for x, y in layout["coins"]:
            entities.append(Entity(kind="coin", x=x, y=y, width=self.coin_size,
                                   height=self.coin_size, points=self.coin_points,
                                   color=(255, 190, 11)))
        session.extra["coins_total"] = len(layout["coins"])
        session.extra["coins_collected"] = 0
        return entities

    def respawn(self, player: Entity):
        player.x, player.y = self.spawn_point
        player.prev_x, player.prev_y = player.x, player.y
        player.vx = 0.0
        player.vy = 0.0

    def lose_life(self, session: Session):
        """One life per tick at most; respawn while lives remain"""
        if session.extra["last_death_tick"] == session.tick_count:
            return
        session.extra["last_death_tick"] = session.tick_count
        session.lives -= 1
        if session.lives > 0:
            self.respawn(session.first("player"))

    # ----------------------------
    # Tick pipeline
    # ----------------------------

    def apply_input(self, session: Session, inputs: InputState, scale: float):
        player = session.first("player")
        if inputs.is_held("left"):
            player.vx = -self.player_speed
            player.data["direction"] = -1
        elif inputs.is_held("right"):
            player.vx = self.player_speed
            player.data["direction"] = 1
        else:
            player.vx = 0.0

        if inputs.was_pressed("jump"):
            if player.data["on_ground"]:
                player.vy = self.jump_force
                player.data["on_ground"] = False
            elif player.data["can_double_jump"]:
                player.vy = self.jump_force
                player.data["can_double_jump"] = False

        # Gravity goes in before the position update
        player.vy += self.gravity * scale
        if inputs.is_held("down") and not player.data["on_ground"]:
            player.vy += self.gravity * self.fast_fall * scale

    def apply_forces(self, session: Session, scale: float):
        # Patrol turnarounds for moving platforms and enemies
        for p in session.live("platform"):
            if p.vx == 0:
                continue
            start = p.data["start_x"]
            if p.x > start + self.platform_move_range or p.x < start - self.platform_move_range:
                p.vx = -p.vx

        platforms = list(session.live("platform"))
        for enemy in session.live("enemy"):
            near_edge = False
            for p in platforms:
                standing = (enemy.x + enemy.width > p.x and enemy.x < p.x + p.width
                            and p.y - 2 <= enemy.y + enemy.height <= p.y + 10)
                if not standing:
                    continue
                if enemy.vx < 0 and enemy.x - 5 < p.x:
                    near_edge = True
                if enemy.vx > 0 and enemy.x + enemy.width + 5 > p.x + p.width:
                    near_edge = True
            start = enemy.data["start_x"]
            patrol = enemy.data["range"]
            if near_edge or enemy.x > start + patrol or enemy.x < start - patrol:
                enemy.vx = -enemy.vx

    def collide(self, session: Session):
        player = session.first("player")
        player.data["on_ground"] = False
        pairs = super().collide(session)
        player.x = clamp(player.x, 0, self.width - player.width)
        return pairs

    def collision_rules(self, session: Session) -> Sequence[CollisionRule]:
        return (
            CollisionRule("player", "platform", resolve=self._platform_contact),
            CollisionRule("player", "enemy", resolve=self._enemy_contact, effect=self._enemy_effect),
            CollisionRule("player", "coin", effect=_collect_coin),
        )

    def _platform_contact(self, session: Session, player: Entity, platform: Entity):
        if player.vy > 0 and player.prev_y + player.height <= platform.y:
            # Landing
            player.y = platform.y - player.height
            player.vy = 0.0
            player.data["on_ground"] = True
            player.data["can_double_jump"] = True
        elif player.vy < 0 and player.prev_y >= platform.y + platform.height:
            # Head bump
            player.y = platform.y + platform.height
            player.vy = 0.0
        elif player.vx > 0:
            player.x = platform.x - player.width
        elif player.vx < 0:
            player.x = platform.x + platform.width

    def _enemy_contact(self, session: Session, player: Entity, enemy: Entity):
        if player.vy > 0 and player.prev_y + player.height <= enemy.y + 5:
            enemy.data["stomped"] = True
            player.vy = self.jump_force * self.stomp_bounce

    def _enemy_effect(self, session: Session, player: Entity, enemy: Entity):
        if enemy.data["stomped"]:
            if enemy.alive:
                enemy.alive = False
                session.add_score(self.stomp_points)
        else:
            self.lose_life(session)

    def check_terminal(self, session: Session) -> Optional[Outcome]:
        player = session.first("player")
        if player.y > self.height:
            self.lose_life(session)
        if session.lives <= 0:
            return Outcome(won=False, score=session.score, message="Game Over")

        if player.x > self.width - self.goal_margin and player.y < self.goal_margin:
            if session.level + 1 not in self.levels:
                return Outcome(won=True, score=session.score, message="All levels complete!")
            self.next_level(session)
        return None

    def next_level(self, session: Session):
        session.level += 1
        for e in session.entities:
            if e.kind != "player":
                e.alive = False
        for e in self.build_level(session, session.level):
            session.spawn(e)
        player = session.first("player")
        self.respawn(player)
        player.data["can_double_jump"] = True

    # ----------------------------
    # Outer surfaces
    # ----------------------------

    def hud(self, session: Session) -> Dict[str, str]:
        return {
            "level": str(session.level),
            "score": str(session.score),
            "coins": f"{session.extra['coins_collected']}/{session.extra['coins_total']}",
            "lives": str(session.lives),
        }

    def render_entities(self, session: Session):
        for kind in ("platform", "coin", "enemy", "player"):
            yield from session.live(kind)

    def observe(self, session: Session) -> np.ndarray:
        player = session.first("player")
        px, py = player.center()

        def nearest(kind):
            found = min(session.live(kind), default=None,
                        key=lambda e: abs(e.center()[0] - px) + abs(e.center()[1] - py))
            if found is None:
                return 0.0, 0.0
            cx, cy = found.center()
            return clamp((cx - px) / self.width, -1, 1), clamp((cy - py) / self.height, -1, 1)

        enemy_dx, enemy_dy = nearest("enemy")
        coin_dx, coin_dy = nearest("coin")
        return np.array([
            self.norm_x(px),
            self.norm_y(py),
            clamp(player.vx / self.player_speed, -1, 1),
            clamp(player.vy / abs(self.jump_force), -1, 1),
            1.0 if player.data["on_ground"] else -1.0,
            enemy_dx,
            enemy_dy,
            coin_dx,
            coin_dy,
            clamp(session.lives / max(1, self.lives), 0, 1) * 2 - 1,
            clamp(session.level / max(1, len(self.levels)), 0, 1) * 2 - 1,
        ], dtype=np.float32)


def _collect_coin(session: Session, player: Entity, coin: Entity):
    if not coin.alive:
        return
    coin.alive = False
    session.extra["coins_collected"] += 1
    session.add_score(coin.points)
