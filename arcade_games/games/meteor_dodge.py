"""
Meteor Dodge
------------
- Circular ship steered by keyboard or by following the pointer
- Meteors enter from a random side; every meteor that leaves the field scores
- Everything speeds up with time: mult = min(1 + rate * tick, max)
"""

from __future__ import annotations

import math
import random
from typing import Dict, Optional, Sequence, Tuple

import numpy as np

from ..engine.collision import CollisionRule
from ..engine.entities import Entity
from ..engine.input import InputState
from ..engine.rules import GameRules
from ..engine.session import Outcome, Session
from ..engine.utils import clamp, vec_len

MOVES = {
    "up": (0, -1),
    "down": (0, 1),
    "left": (-1, 0),
    "right": (1, 0),
}


class MeteorDodgeRules(GameRules):
    name = "meteor_dodge"
    actions = ("up", "down", "left", "right")
    observation_size = 12

    def __init__(
        self,
        width: int = 800,
        height: int = 600,
        player_radius: float = 25,
        player_speed: float = 5,
        follow_rate: float = 0.15,
        base_spawn_ticks: float = 60,
        min_spawn_ticks: float = 15,
        base_meteor_speed: float = 2,
        meteor_speed_range: float = 2,
        meteor_radius_range: Tuple[float, float] = (15, 30),
        max_speed_multiplier: float = 5,
        difficulty_rate: float = 0.001,
        despawn_margin: float = 50,
        spawn_margin: float = 30,
        dodge_points: int = 10,
        best_key: Optional[str] = "meteorDodgeHighScore",
    ):
        super().__init__(width=width, height=height, best_key=best_key)
        self.player_radius = player_radius
        self.player_speed = player_speed
        self.follow_rate = follow_rate
        self.base_spawn_ticks = base_spawn_ticks
        self.min_spawn_ticks = min_spawn_ticks
        self.base_meteor_speed = base_meteor_speed
        self.meteor_speed_range = meteor_speed_range
        self.meteor_radius_range = meteor_radius_range
        self.max_speed_multiplier = max_speed_multiplier
        self.difficulty_rate = difficulty_rate
        self.despawn_margin = despawn_margin
        self.spawn_margin = spawn_margin
        self.dodge_points = dodge_points

    def new_session(self, rng: random.Random) -> Session:
        player = Entity(kind="player", x=self.width / 2, y=self.height / 2,
                        radius=self.player_radius, color=(0, 212, 255))
        session = Session(entities=[player], lives=1, rng=rng)
        session.extra["multiplier"] = 1.0
        session.extra["spawn_counter"] = 0
        session.extra["dodged"] = 0
        session.extra["pointer_mode"] = True
        session.extra["target"] = (self.width / 2, self.height / 2)
        session.extra["hit"] = False
        return session

    def spawn_threshold(self, multiplier: float) -> float:
        return max(self.min_spawn_ticks, self.base_spawn_ticks / multiplier)

    def make_meteor(self, rng: random.Random) -> Entity:
        side = rng.randrange(4)  # 0=top, 1=right, 2=bottom, 3=left
        speed = self.base_meteor_speed + rng.random() * self.meteor_speed_range
        lo, hi = self.meteor_radius_range
        radius = lo + rng.random() * (hi - lo)
        drift = (rng.random() - 0.5) * 4
        m = self.spawn_margin
        if side == 0:
            x, y, vx, vy = rng.random() * self.width, -m, drift, speed
        elif side == 1:
            x, y, vx, vy = self.width + m, rng.random() * self.height, -speed, drift
        elif side == 2:
            x, y, vx, vy = rng.random() * self.width, self.height + m, drift, -speed
        else:
            x, y, vx, vy = -m, rng.random() * self.height, speed, drift
        return Entity(kind="meteor", x=x, y=y, vx=vx, vy=vy, radius=radius, color=(255, 69, 0))

    # ----------------------------
    # Tick pipeline
    # ----------------------------

    def apply_input(self, session: Session, inputs: InputState, scale: float):
        session.extra["multiplier"] = min(
            1 + session.tick_count * self.difficulty_rate, self.max_speed_multiplier)

        if inputs.pointer_moved and inputs.pointer is not None:
            session.extra["pointer_mode"] = True
            session.extra["target"] = inputs.pointer
        if inputs.is_held(*MOVES):
            session.extra["pointer_mode"] = False

        player = session.first("player")
        if session.extra["pointer_mode"]:
            tx, ty = session.extra["target"]
            player.x += (tx - player.x) * self.follow_rate
            player.y += (ty - player.y) * self.follow_rate
        else:
            for action, (dx, dy) in MOVES.items():
                if inputs.is_held(action):
                    player.x += dx * self.player_speed * scale
                    player.y += dy * self.player_speed * scale
        self.clamp_circle(player)

    def integrate(self, session: Session, scale: float):
        mult = session.extra["multiplier"]
        for meteor in session.live("meteor"):
            meteor.prev_x, meteor.prev_y = meteor.x, meteor.y
            meteor.x += meteor.vx * mult * scale
            meteor.y += meteor.vy * mult * scale

    def apply_forces(self, session: Session, scale: float):
        # Spawning and despawning, no forces as such
        mult = session.extra["multiplier"]
        session.extra["spawn_counter"] += 1
        if session.extra["spawn_counter"] >= self.spawn_threshold(mult):
            session.extra["spawn_counter"] = 0
            session.spawn(self.make_meteor(session.rng))

        margin = self.despawn_margin
        for meteor in session.live("meteor"):
            if (meteor.x < -margin or meteor.x > self.width + margin
                    or meteor.y < -margin or meteor.y > self.height + margin):
                meteor.alive = False
                session.extra["dodged"] += 1
                session.add_score(math.floor(self.dodge_points * mult))

    def collision_rules(self, session: Session) -> Sequence[CollisionRule]:
        return (CollisionRule("player", "meteor", effect=_struck),)

    def check_terminal(self, session: Session) -> Optional[Outcome]:
        if session.extra["hit"]:
            return Outcome(won=False, score=session.score, message="Game Over")
        return None

    # ----------------------------
    # Outer surfaces
    # ----------------------------

    def hud(self, session: Session) -> Dict[str, str]:
        return {
            "score": str(session.score),
            "time": f"{session.tick_count / self.tick_rate:.1f}s",
            "meteors-dodged": str(session.extra["dodged"]),
            "speed-mult": f"{session.extra['multiplier']:.1f}x",
        }

    def observe(self, session: Session) -> np.ndarray:
        player = session.first("player")
        meteors = sorted(session.live("meteor"),
                         key=lambda m: vec_len(m.x - player.x, m.y - player.y))
        obs = [self.norm_x(player.x), self.norm_y(player.y)]
        top = (self.base_meteor_speed + self.meteor_speed_range) * self.max_speed_multiplier
        for i in range(2):
            if i < len(meteors):
                m = meteors[i]
                obs += [
                    clamp((m.x - player.x) / self.width, -1, 1),
                    clamp((m.y - player.y) / self.height, -1, 1),
                    clamp(m.vx * session.extra["multiplier"] / top, -1, 1),
                    clamp(m.vy * session.extra["multiplier"] / top, -1, 1),
                ]
            else:
                obs += [0.0, 0.0, 0.0, 0.0]
        obs.append(session.extra["multiplier"] / self.max_speed_multiplier * 2 - 1)
        obs.append(clamp(len(meteors) / 20.0, 0, 1) * 2 - 1)
        return np.array(obs, dtype=np.float32)


def _struck(session: Session, player: Entity, meteor: Entity):
    session.extra["hit"] = True
