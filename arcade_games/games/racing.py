"""
Two-player racing on a rectangular ring track
---------------------------------------------
Both cars share one keyboard (p1_* / p2_* actions). A lap counts when a car
passes the bottom checkpoint band and then crosses the finish line at the top.
Player 1 reaching total_laps first is a win; player 2 first is a loss.
"""

from __future__ import annotations

import math
import random
from typing import Dict, Optional, Tuple

import numpy as np

from ..engine.entities import Entity
from ..engine.input import InputState
from ..engine.rules import GameRules
from ..engine.session import Outcome, Session
from ..engine.utils import clamp

CAR_COLORS = {1: (255, 51, 102), 2: (51, 136, 255)}


class RacingRules(GameRules):
    name = "racing"
    actions = ("p1_up", "p1_down", "p1_left", "p1_right",
               "p2_up", "p2_down", "p2_left", "p2_right")
    observation_size = 10

    def __init__(
        self,
        width: int = 800,
        height: int = 600,
        car_width: float = 30,
        car_height: float = 50,
        max_speed: float = 5,
        acceleration: float = 0.3,
        reverse_factor: float = 0.6,
        friction: float = 0.95,
        turn_speed: float = 0.08,
        off_track_factor: float = 0.5,
        total_laps: int = 3,
        track_outer: Tuple[float, float] = (700, 500),
        track_inner: Tuple[float, float] = (400, 250),
        finish_line_width: float = 80,
        checkpoint_band: float = 50,
        best_key: Optional[str] = None,
    ):
        super().__init__(width=width, height=height, best_key=best_key)
        assert track_inner[0] < track_outer[0] and track_inner[1] < track_outer[1], \
            "Inner track must fit inside the outer track"
        self.car_width = car_width
        self.car_height = car_height
        self.max_speed = max_speed
        self.acceleration = acceleration
        self.reverse_factor = reverse_factor
        self.friction = friction
        self.turn_speed = turn_speed
        self.off_track_factor = off_track_factor
        self.total_laps = total_laps
        self.finish_line_width = finish_line_width
        self.checkpoint_band = checkpoint_band

        ow, oh = track_outer
        iw, ih = track_inner
        self.outer = ((width - ow) / 2, (height - oh) / 2, ow, oh)
        self.inner = (self.outer[0] + (ow - iw) / 2, self.outer[1] + (oh - ih) / 2, iw, ih)
        self.finish_x = self.outer[0] + ow / 2
        self.finish_y = self.outer[1]

    def new_session(self, rng: random.Random) -> Session:
        cars = [self._make_car(1, self.finish_x - 40), self._make_car(2, self.finish_x + 40)]
        session = Session(entities=cars, lives=0, rng=rng)
        session.extra["winner"] = None
        return session

    def _make_car(self, player: int, cx: float) -> Entity:
        car = Entity(kind="car", x=cx - self.car_width / 2,
                     y=self.finish_y + 30 - self.car_height / 2,
                     width=self.car_width, height=self.car_height, color=CAR_COLORS[player])
        car.data.update(player=player, angle=math.pi / 2, speed=0.0, laps=0, checkpoint=False)
        return car

    def car(self, session: Session, player: int) -> Entity:
        return next(c for c in session.live("car") if c.data["player"] == player)

    def on_track(self, cx: float, cy: float) -> bool:
        ox, oy, ow, oh = self.outer
        ix, iy, iw, ih = self.inner
        outside = cx < ox or cx > ox + ow or cy < oy or cy > oy + oh
        infield = ix < cx < ix + iw and iy < cy < iy + ih
        return not (outside or infield)

    # ----------------------------
    # Tick pipeline
    # ----------------------------

    def apply_input(self, session: Session, inputs: InputState, scale: float):
        for car in session.live("car"):
            prefix = f"p{car.data['player']}_"
            speed = car.data["speed"]
            if inputs.is_held(prefix + "up"):
                speed += self.acceleration
            if inputs.is_held(prefix + "down"):
                speed -= self.acceleration * self.reverse_factor
            speed *= self.friction
            speed = clamp(speed, -self.max_speed * 0.5, self.max_speed)
            car.data["speed"] = speed

            if speed != 0:
                turn = self.turn_speed * (speed / self.max_speed)
                if inputs.is_held(prefix + "left"):
                    car.data["angle"] -= turn
                if inputs.is_held(prefix + "right"):
                    car.data["angle"] += turn

            car.vx = math.cos(car.data["angle"]) * speed
            car.vy = math.sin(car.data["angle"]) * speed

    def apply_forces(self, session: Session, scale: float):
        for car in session.live("car"):
            cx, cy = car.center()
            if not self.on_track(cx, cy):
                car.data["speed"] *= self.off_track_factor
            # Cars stay on the canvas even when they leave the track
            self.clamp_rect(car)

    def apply_effects(self, session: Session, pairs):
        super().apply_effects(session, pairs)
        checkpoint_y = self.outer[1] + self.outer[3] - self.checkpoint_band
        half = self.finish_line_width / 2
        for car in session.live("car"):
            cx, cy = car.center()
            if cy > checkpoint_y and not car.data["checkpoint"]:
                car.data["checkpoint"] = True
            if (car.data["checkpoint"] and cy < self.finish_y + self.checkpoint_band
                    and self.finish_x - half < cx < self.finish_x + half):
                car.data["laps"] += 1
                car.data["checkpoint"] = False
                if car.data["player"] == 1:
                    session.add_score(1)

    def check_terminal(self, session: Session) -> Optional[Outcome]:
        for player in (1, 2):
            if self.car(session, player).data["laps"] >= self.total_laps:
                session.extra["winner"] = player
                return Outcome(won=player == 1, score=session.score,
                               message=f"Player {player} wins!")
        return None

    # ----------------------------
    # Outer surfaces
    # ----------------------------

    def hud(self, session: Session) -> Dict[str, str]:
        return {
            f"player{p}-laps": f"{self.car(session, p).data['laps']} / {self.total_laps}"
            for p in (1, 2)
        }

    def observe(self, session: Session) -> np.ndarray:
        me = self.car(session, 1)
        other = self.car(session, 2)
        mx, my = me.center()
        ox, oy = other.center()
        return np.array([
            self.norm_x(mx),
            self.norm_y(my),
            math.cos(me.data["angle"]),
            math.sin(me.data["angle"]),
            clamp(me.data["speed"] / self.max_speed, -1, 1),
            1.0 if me.data["checkpoint"] else -1.0,
            1.0 if self.on_track(mx, my) else -1.0,
            self.norm_x(ox),
            self.norm_y(oy),
            (me.data["laps"] - other.data["laps"]) / self.total_laps,
        ], dtype=np.float32)
