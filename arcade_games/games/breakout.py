"""
Breakout - paddle, ball and a 6x10 brick wall
---------------------------------------------
- Ball rides the paddle until launched
- Paddle hit position sets the bounce angle
- Clearing the wall advances the level: faster ball, narrower paddle
"""

from __future__ import annotations

import math
import random
from typing import Dict, Optional, Sequence, Tuple

import numpy as np

from ..engine.collision import CollisionRule, overlaps, reflect
from ..engine.entities import Entity
from ..engine.input import InputState
from ..engine.rules import GameRules
from ..engine.session import Outcome, Session
from ..engine.utils import clamp

BRICK_COLORS = [
    (255, 0, 110),
    (251, 86, 7),
    (255, 190, 11),
    (6, 255, 165),
    (58, 134, 255),
    (131, 56, 236),
]


class BreakoutRules(GameRules):
    name = "breakout"
    actions = ("left", "right", "launch")
    observation_size = 8

    def __init__(
        self,
        width: int = 800,
        height: int = 600,
        paddle_width: float = 120,
        paddle_height: float = 20,
        paddle_speed: float = 8,
        paddle_y_offset: float = 50,
        min_paddle_width: float = 80,
        paddle_shrink: float = 10,
        ball_radius: float = 8,
        ball_speed: float = 5,
        ball_speed_increment: float = 1,
        brick_rows: int = 6,
        brick_cols: int = 10,
        brick_width: float = 65,
        brick_height: float = 22,
        brick_padding: float = 10,
        brick_offset_top: float = 80,
        brick_offset_left: float = 28,
        brick_points: Tuple[int, ...] = (60, 50, 40, 30, 20, 10),
        lives: int = 3,
        best_key: Optional[str] = None,
    ):
        super().__init__(width=width, height=height, best_key=best_key)
        assert len(brick_points) >= brick_rows, "Need a point value per brick row"

        self.paddle_width = paddle_width
        self.paddle_height = paddle_height
        self.paddle_speed = paddle_speed
        self.paddle_y = height - paddle_y_offset
        self.min_paddle_width = min_paddle_width
        self.paddle_shrink = paddle_shrink
        self.ball_radius = ball_radius
        self.ball_speed = ball_speed
        self.ball_speed_increment = ball_speed_increment
        self.brick_rows = brick_rows
        self.brick_cols = brick_cols
        self.brick_width = brick_width
        self.brick_height = brick_height
        self.brick_padding = brick_padding
        self.brick_offset_top = brick_offset_top
        self.brick_offset_left = brick_offset_left
        self.brick_points = brick_points
        self.lives = lives

    # ----------------------------
    # Setup
    # ----------------------------

    def new_session(self, rng: random.Random) -> Session:
        paddle = Entity(
            kind="paddle",
            x=self.width / 2 - self.paddle_width / 2,
            y=self.paddle_y,
            width=self.paddle_width,
            height=self.paddle_height,
            color=(255, 190, 11),
        )
        ball = Entity(kind="ball", x=0.0, y=0.0, radius=self.ball_radius, color=(255, 255, 255))
        session = Session(entities=[paddle, ball], lives=self.lives, rng=rng)
        session.extra["launched"] = False
        session.extra["ball_speed"] = float(self.ball_speed)
        self._serve(session)
        session.entities.extend(self.create_bricks())
        return session

    def create_bricks(self):
        bricks = []
        for row in range(self.brick_rows):
            for col in range(self.brick_cols):
                bricks.append(Entity(
                    kind="brick",
                    x=col * (self.brick_width + self.brick_padding) + self.brick_offset_left,
                    y=row * (self.brick_height + self.brick_padding) + self.brick_offset_top,
                    width=self.brick_width,
                    height=self.brick_height,
                    points=self.brick_points[row],
                    color=BRICK_COLORS[row % len(BRICK_COLORS)],
                ))
        return bricks

    def _serve(self, session: Session):
        """Put the ball back on the paddle, not launched"""
        paddle = session.first("paddle")
        ball = session.first("ball")
        session.extra["launched"] = False
        ball.vx = 0.0
        ball.vy = 0.0
        ball.x = paddle.x + paddle.width / 2
        ball.y = paddle.y - ball.radius

    def launch(self, session: Session):
        ball = session.first("ball")
        speed = session.extra["ball_speed"]
        angle = (session.rng.random() * 0.6 - 0.3) * math.pi
        ball.vx = speed * math.sin(angle)
        ball.vy = -speed * math.cos(angle)
        session.extra["launched"] = True

    # ----------------------------
    # Tick pipeline
    # ----------------------------

    def apply_input(self, session: Session, inputs: InputState, scale: float):
        paddle = session.first("paddle")
        if inputs.is_held("left"):
            paddle.x = max(0.0, paddle.x - self.paddle_speed * scale)
        if inputs.is_held("right"):
            paddle.x = min(self.width - paddle.width, paddle.x + self.paddle_speed * scale)
        if inputs.was_pressed("launch") and not session.extra["launched"]:
            self.launch(session)

    def integrate(self, session: Session, scale: float):
        super().integrate(session, scale)
        if not session.extra["launched"]:
            paddle = session.first("paddle")
            ball = session.first("ball")
            ball.x = paddle.x + paddle.width / 2
            ball.y = paddle.y - ball.radius

    def collide(self, session: Session):
        ball = session.first("ball")
        if session.extra["launched"]:
            if ball.x - ball.radius <= 0 or ball.x + ball.radius >= self.width:
                reflect(ball, "x")
            if ball.y - ball.radius <= 0:
                reflect(ball, "y")
        return super().collide(session)

    def collision_rules(self, session: Session) -> Sequence[CollisionRule]:
        if not session.extra["launched"]:
            return ()
        return (
            CollisionRule("ball", "paddle", resolve=self._paddle_bounce, test=_falling_onto),
            CollisionRule("ball", "brick", resolve=_brick_bounce, effect=_brick_broken),
        )

    def _paddle_bounce(self, session: Session, ball: Entity, paddle: Entity):
        speed = session.extra["ball_speed"]
        hit_pos = (ball.x - paddle.x) / paddle.width
        angle = (hit_pos - 0.5) * math.pi * 0.6
        ball.vx = speed * math.sin(angle)
        ball.vy = -speed * math.cos(angle)

    def check_terminal(self, session: Session) -> Optional[Outcome]:
        if session.count("brick") == 0:
            self.next_level(session)
            return None

        ball = session.first("ball")
        if session.extra["launched"] and ball.y - ball.radius > self.height:
            session.lives -= 1
            if session.lives <= 0:
                return Outcome(won=False, score=session.score, message="Game Over")
            self._serve(session)
        return None

    def next_level(self, session: Session):
        session.level += 1
        session.extra["ball_speed"] += self.ball_speed_increment
        paddle = session.first("paddle")
        paddle.width = max(self.min_paddle_width, paddle.width - self.paddle_shrink)
        self._serve(session)
        for brick in self.create_bricks():
            session.spawn(brick)

    # ----------------------------
    # Outer surfaces
    # ----------------------------

    def hud(self, session: Session) -> Dict[str, str]:
        return {
            "score": str(session.score),
            "level": str(session.level),
            "lives": str(session.lives),
            "blocks-remaining": str(session.count("brick") + len(session.pending_spawns)),
        }

    def observe(self, session: Session) -> np.ndarray:
        paddle = session.first("paddle")
        ball = session.first("ball")
        speed = max(1e-6, session.extra["ball_speed"])
        total = self.brick_rows * self.brick_cols
        return np.array([
            self.norm_x(paddle.x + paddle.width / 2),
            self.norm_x(ball.x),
            self.norm_y(ball.y),
            clamp(ball.vx / speed, -1, 1),
            clamp(ball.vy / speed, -1, 1),
            1.0 if session.extra["launched"] else -1.0,
            session.count("brick") / total * 2 - 1,
            clamp(session.lives / max(1, self.lives), 0, 1) * 2 - 1,
        ], dtype=np.float32)


def _falling_onto(ball: Entity, paddle: Entity) -> bool:
    return ball.vy > 0 and overlaps(ball, paddle)


def _brick_bounce(session: Session, ball: Entity, brick: Entity):
    # One flip per brick touched; two bricks in one tick cancel out
    reflect(ball, "y")


def _brick_broken(session: Session, ball: Entity, brick: Entity):
    brick.alive = False
    session.add_score(brick.points)
