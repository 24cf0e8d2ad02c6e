"""
Space Invaders
--------------
- Alien grid marches sideways on a countdown, dropping a row at each edge
- Aliens fire on a second countdown; the player holds at most max_bullets shots
- Clearing the grid advances the level and speeds up the march
"""

from __future__ import annotations

import random
from typing import Dict, Optional, Sequence, Tuple

import numpy as np

from ..engine.collision import CollisionRule
from ..engine.entities import Entity
from ..engine.input import InputState
from ..engine.rules import GameRules
from ..engine.session import Outcome, Session
from ..engine.utils import clamp

ALIEN_COLORS = [(255, 0, 110), (251, 86, 7), (255, 190, 11), (6, 255, 165)]


class SpaceInvadersRules(GameRules):
    name = "space_invaders"
    actions = ("left", "right", "fire")
    observation_size = 10

    def __init__(
        self,
        width: int = 800,
        height: int = 600,
        player_width: float = 50,
        player_height: float = 35,
        player_y_offset: float = 80,
        player_speed: float = 6,
        alien_rows: int = 4,
        alien_cols: int = 10,
        alien_width: float = 40,
        alien_height: float = 30,
        alien_gap: float = 15,
        alien_start: Tuple[float, float] = (100, 80),
        alien_step: float = 10,
        alien_drop: float = 10,
        alien_speed: float = 1.0,
        alien_speed_increment: float = 0.5,
        march_base_ticks: int = 20,
        march_min_ticks: int = 5,
        fire_every_ticks: int = 60,
        fire_chance: float = 0.3,
        bullet_width: float = 4,
        bullet_height: float = 15,
        bullet_speed: float = 8,
        max_bullets: int = 3,
        alien_bullet_height: float = 10,
        alien_bullet_speed: float = 4,
        lives: int = 3,
        best_key: Optional[str] = "spaceInvadersHighScore",
    ):
        super().__init__(width=width, height=height, best_key=best_key)
        self.player_width = player_width
        self.player_height = player_height
        self.player_y = height - player_y_offset
        self.player_speed = player_speed
        self.alien_rows = alien_rows
        self.alien_cols = alien_cols
        self.alien_width = alien_width
        self.alien_height = alien_height
        self.alien_gap = alien_gap
        self.alien_start = alien_start
        self.alien_step = alien_step
        self.alien_drop = alien_drop
        self.alien_speed = alien_speed
        self.alien_speed_increment = alien_speed_increment
        self.march_base_ticks = march_base_ticks
        self.march_min_ticks = march_min_ticks
        self.fire_every_ticks = fire_every_ticks
        self.fire_chance = fire_chance
        self.bullet_width = bullet_width
        self.bullet_height = bullet_height
        self.bullet_speed = bullet_speed
        self.max_bullets = max_bullets
        self.alien_bullet_height = alien_bullet_height
        self.alien_bullet_speed = alien_bullet_speed
        self.lives = lives

    def new_session(self, rng: random.Random) -> Session:
        player = Entity(kind="player", x=self.width / 2 - self.player_width / 2, y=self.player_y,
                        width=self.player_width, height=self.player_height, color=(6, 255, 165))
        session = Session(entities=[player], lives=self.lives, rng=rng)
        session.extra["alien_speed"] = float(self.alien_speed)
        session.extra["alien_direction"] = 1
        session.extra["march_counter"] = 0
        session.extra["fire_counter"] = 0
        session.extra["invaded"] = False
        session.entities.extend(self.create_aliens())
        return session

    def create_aliens(self):
        sx, sy = self.alien_start
        aliens = []
        for row in range(self.alien_rows):
            for col in range(self.alien_cols):
                aliens.append(Entity(
                    kind="alien",
                    x=sx + col * (self.alien_width + self.alien_gap),
                    y=sy + row * (self.alien_height + self.alien_gap),
                    width=self.alien_width,
                    height=self.alien_height,
                    points=(self.alien_rows - row) * 10,
                    color=ALIEN_COLORS[row % len(ALIEN_COLORS)],
                ))
        return aliens

    def march_ticks(self, level: int) -> int:
        return max(self.march_base_ticks - level * 2, self.march_min_ticks)

    # ----------------------------
    # Tick pipeline
    # ----------------------------

    def apply_input(self, session: Session, inputs: InputState, scale: float):
        player = session.first("player")
        if inputs.is_held("left"):
            player.x = max(0.0, player.x - self.player_speed * scale)
        if inputs.is_held("right"):
            player.x = min(self.width - player.width, player.x + self.player_speed * scale)
        if inputs.was_pressed("fire") and session.count("bullet") < self.max_bullets:
            session.spawn(Entity(
                kind="bullet",
                x=player.x + player.width / 2 - self.bullet_width / 2,
                y=player.y,
                vy=-self.bullet_speed,
                width=self.bullet_width,
                height=self.bullet_height,
                color=(255, 190, 11),
            ))

    def apply_forces(self, session: Session, scale: float):
        # Not physics: the alien march and fire countdowns
        for bullet in session.live("bullet"):
            if bullet.y < 0:
                bullet.alive = False
        for bullet in session.live("alien_bullet"):
            if bullet.y > self.height:
                bullet.alive = False

        session.extra["march_counter"] += 1
        if session.extra["march_counter"] >= self.march_ticks(session.level):
            session.extra["march_counter"] = 0
            self.march(session)

        session.extra["fire_counter"] += 1
        if session.extra["fire_counter"] >= self.fire_every_ticks:
            session.extra["fire_counter"] = 0
            shooters = list(session.live("alien"))
            if shooters and session.rng.random() < self.fire_chance:
                alien = session.rng.choice(shooters)
                session.spawn(Entity(
                    kind="alien_bullet",
                    x=alien.x + alien.width / 2,
                    y=alien.y + alien.height,
                    vy=self.alien_bullet_speed,
                    width=self.bullet_width,
                    height=self.alien_bullet_height,
                    color=(255, 0, 110),
                ))

    def march(self, session: Session):
        player = session.first("player")
        direction = session.extra["alien_direction"]
        step = direction * session.extra["alien_speed"] * self.alien_step
        hit_edge = False
        for alien in session.live("alien"):
            alien.x += step
            if alien.x <= 0 or alien.x + alien.width >= self.width:
                hit_edge = True
            if alien.y + alien.height >= player.y:
                session.extra["invaded"] = True
        if hit_edge:
            session.extra["alien_direction"] = -direction
            for alien in session.live("alien"):
                alien.y += self.alien_drop

    def collision_rules(self, session: Session) -> Sequence[CollisionRule]:
        return (
            CollisionRule("bullet", "alien", effect=_alien_shot),
            CollisionRule("alien_bullet", "player", effect=_player_hit),
        )

    def check_terminal(self, session: Session) -> Optional[Outcome]:
        if session.extra["invaded"] or session.lives <= 0:
            return Outcome(won=False, score=session.score, message="Game Over")
        if session.count("alien") == 0:
            self.next_level(session)
        return None

    def next_level(self, session: Session):
        session.level += 1
        session.extra["alien_speed"] += self.alien_speed_increment
        session.extra["alien_direction"] = 1
        for e in session.entities:
            if e.kind in ("bullet", "alien_bullet"):
                e.alive = False
        for alien in self.create_aliens():
            session.spawn(alien)

    # ----------------------------
    # Outer surfaces
    # ----------------------------

    def hud(self, session: Session) -> Dict[str, str]:
        return {
            "score": str(session.score),
            "level": str(session.level),
            "lives": str(session.lives),
        }

    def observe(self, session: Session) -> np.ndarray:
        player = session.first("player")
        aliens = list(session.live("alien"))
        total = self.alien_rows * self.alien_cols
        lowest = max((a.y + a.height for a in aliens), default=0.0)
        threats = [b for b in session.live("alien_bullet")]
        nearest = min(threats, key=lambda b: abs(b.x - player.x) + abs(b.y - player.y), default=None)
        left = min((a.x for a in aliens), default=0.0)
        right = max((a.x + a.width for a in aliens), default=0.0)
        return np.array([
            self.norm_x(player.x + player.width / 2),
            len(aliens) / total * 2 - 1,
            self.norm_y(lowest),
            self.norm_x(left),
            self.norm_x(right),
            float(session.extra["alien_direction"]),
            self.norm_x(nearest.x) if nearest else 0.0,
            self.norm_y(nearest.y) if nearest else 0.0,
            session.count("bullet") / self.max_bullets * 2 - 1,
            clamp(session.lives / max(1, self.lives), 0, 1) * 2 - 1,
        ], dtype=np.float32)


def _alien_shot(session: Session, bullet: Entity, alien: Entity):
    # A bullet keeps scoring against every alien it overlaps this tick
    bullet.alive = False
    alien.alive = False
    session.add_score(alien.points)


def _player_hit(session: Session, bullet: Entity, player: Entity):
    bullet.alive = False
    session.lives -= 1
