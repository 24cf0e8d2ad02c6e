"""
Pong - player vs CPU paddle
---------------------------
- Player paddle on the left (up/down), CPU on the right tracking the nearest ball
- Hard difficulty serves three balls at once
- Every paddle hit speeds the ball up by 5% and adds spin from the hit position
- First to winning_score points wins
"""

from __future__ import annotations

import random
from typing import Dict, Optional, Sequence

import numpy as np

from ..configs.game_config import PONG_DIFFICULTY
from ..engine.collision import CollisionRule, reflect
from ..engine.entities import Entity
from ..engine.input import InputState
from ..engine.rules import GameRules
from ..engine.session import Outcome, Session
from ..engine.utils import clamp


class PongRules(GameRules):
    name = "pong"
    actions = ("up", "down")
    observation_size = 8

    def __init__(
        self,
        width: int = 800,
        height: int = 600,
        difficulty: str = "medium",
        paddle_width: float = 15,
        paddle_height: float = 100,
        paddle_margin: float = 30,
        player_speed: float = 6,
        ball_size: float = 15,
        winning_score: int = 5,
        speed_up: float = 1.05,
        spin: float = 10,
        cpu_dead_zone: float = 10,
        cpu_jitter: float = 0.0,
        serve_delay_ticks: int = 30,
        best_key: Optional[str] = None,
    ):
        super().__init__(width=width, height=height, best_key=best_key)
        assert difficulty in PONG_DIFFICULTY, f"Unknown difficulty: {difficulty}"

        self.difficulty = difficulty
        self.ball_speed = PONG_DIFFICULTY[difficulty]["speed"]
        self.cpu_speed = PONG_DIFFICULTY[difficulty]["cpu_speed"]
        self.num_balls = PONG_DIFFICULTY[difficulty]["balls"]

        self.paddle_width = paddle_width
        self.paddle_height = paddle_height
        self.paddle_margin = paddle_margin
        self.player_speed = player_speed
        self.ball_size = ball_size
        self.winning_score = winning_score
        self.speed_up = speed_up
        self.spin = spin
        self.cpu_dead_zone = cpu_dead_zone
        self.cpu_jitter = cpu_jitter
        self.serve_delay_ticks = serve_delay_ticks

    def new_session(self, rng: random.Random) -> Session:
        mid_y = self.height / 2 - self.paddle_height / 2
        player = Entity(kind="player", x=self.paddle_margin, y=mid_y,
                        width=self.paddle_width, height=self.paddle_height,
                        color=(251, 86, 7))
        cpu = Entity(kind="cpu", x=self.width - self.paddle_margin - self.paddle_width, y=mid_y,
                     width=self.paddle_width, height=self.paddle_height,
                     color=(251, 86, 7))
        session = Session(entities=[player, cpu], lives=0, rng=rng)
        session.extra["cpu_score"] = 0
        session.extra["serve_timer"] = 0
        for ball in self.serve(rng):
            session.entities.append(ball)
        return session

    def serve(self, rng: random.Random):
        balls = []
        for i in range(self.num_balls):
            vx = self.ball_speed * (1 if rng.random() > 0.5 else -1)
            vy = self.ball_speed * (rng.random() * 0.5 + 0.5) * (1 if rng.random() > 0.5 else -1)
            balls.append(Entity(
                kind="ball",
                x=self.width / 2,
                y=self.height / 2 + i * 50 - 50,
                vx=vx,
                vy=vy,
                width=self.ball_size,
                height=self.ball_size,
                color=(255, 190, 11),
            ))
        return balls

    # ----------------------------
    # Tick pipeline
    # ----------------------------

    def apply_input(self, session: Session, inputs: InputState, scale: float):
        player = session.first("player")
        if inputs.is_held("up"):
            player.y -= self.player_speed * scale
        if inputs.is_held("down"):
            player.y += self.player_speed * scale
        self.clamp_rect(player)

        self._move_cpu(session, scale)

        if session.extra["serve_timer"] > 0:
            session.extra["serve_timer"] -= 1
            if session.extra["serve_timer"] == 0:
                for ball in self.serve(session.rng):
                    session.spawn(ball)

    def _move_cpu(self, session: Session, scale: float):
        cpu = session.first("cpu")
        balls = list(session.live("ball"))
        if not balls:
            return
        closest = min(balls, key=lambda b: abs(b.x - cpu.x))
        target = closest.y + closest.height / 2
        if self.cpu_jitter > 0:
            target += session.rng.uniform(-self.cpu_jitter, self.cpu_jitter)
        center = cpu.y + cpu.height / 2
        if center < target - self.cpu_dead_zone:
            cpu.y += self.cpu_speed * scale
        elif center > target + self.cpu_dead_zone:
            cpu.y -= self.cpu_speed * scale
        self.clamp_rect(cpu)

    def collide(self, session: Session):
        for ball in session.live("ball"):
            if ball.y <= 0 or ball.y + ball.height >= self.height:
                reflect(ball, "y")
        return super().collide(session)

    def collision_rules(self, session: Session) -> Sequence[CollisionRule]:
        return (
            CollisionRule("ball", "player", resolve=self._paddle_hit),
            CollisionRule("ball", "cpu", resolve=self._paddle_hit),
        )

    def _paddle_hit(self, session: Session, ball: Entity, paddle: Entity):
        # Compounds while the ball stays inside the paddle
        ball.vx *= -self.speed_up
        hit_pos = (ball.y - paddle.y) / paddle.height
        ball.vy = (hit_pos - 0.5) * self.spin

    def apply_effects(self, session: Session, pairs):
        super().apply_effects(session, pairs)
        for ball in session.live("ball"):
            if ball.x < 0:
                session.extra["cpu_score"] += 1
                ball.alive = False
            elif ball.x > self.width:
                session.add_score(1)
                ball.alive = False
        if session.count("ball") == 0 and session.extra["serve_timer"] == 0 and not session.pending_spawns:
            session.extra["serve_timer"] = self.serve_delay_ticks

    def check_terminal(self, session: Session) -> Optional[Outcome]:
        if session.score >= self.winning_score:
            return Outcome(won=True, score=session.score, message="You Win!")
        if session.extra["cpu_score"] >= self.winning_score:
            return Outcome(won=False, score=session.score, message="CPU Wins!")
        return None

    # ----------------------------
    # Outer surfaces
    # ----------------------------

    def hud(self, session: Session) -> Dict[str, str]:
        return {
            "player-score": str(session.score),
            "cpu-score": str(session.extra["cpu_score"]),
        }

    def observe(self, session: Session) -> np.ndarray:
        player = session.first("player")
        cpu = session.first("cpu")
        balls = sorted(session.live("ball"), key=lambda b: b.x)
        ball = balls[0] if balls else None
        top = max(1e-6, self.ball_speed * 3)
        return np.array([
            self.norm_y(player.y + player.height / 2),
            self.norm_y(cpu.y + cpu.height / 2),
            self.norm_x(ball.x) if ball else 0.0,
            self.norm_y(ball.y) if ball else 0.0,
            clamp(ball.vx / top, -1, 1) if ball else 0.0,
            clamp(ball.vy / top, -1, 1) if ball else 0.0,
            session.score / self.winning_score * 2 - 1,
            session.extra["cpu_score"] / self.winning_score * 2 - 1,
        ], dtype=np.float32)
