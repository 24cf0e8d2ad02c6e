"""
Snake on a square grid
----------------------
Positions are grid cells, not pixels. The head moves one cell per tick; eating
food grows the body by one segment and every speed_up_every points the tick
interval shrinks (the loop reschedules itself when tick_interval changes).
"""

from __future__ import annotations

import random
from typing import Dict, List, Optional

import numpy as np

from ..engine.collision import CollisionPair
from ..engine.entities import Entity
from ..engine.input import InputState
from ..engine.rules import GameRules
from ..engine.session import Outcome, Session

DIRECTIONS = {
    "up": (0, -1),
    "down": (0, 1),
    "left": (-1, 0),
    "right": (1, 0),
}

SNAKE_COLOR = (6, 255, 165)
HEAD_COLOR = (0, 255, 136)
FOOD_COLOR = (255, 0, 110)


class SnakeRules(GameRules):
    name = "snake"
    actions = ("up", "down", "left", "right")
    observation_size = 12

    def __init__(
        self,
        grid_size: int = 30,
        cell_size: int = 20,
        initial_length: int = 3,
        initial_interval_ms: float = 150,
        speed_increment_ms: float = 5,
        min_interval_ms: float = 50,
        food_points: int = 10,
        speed_up_every: int = 50,
        best_key: Optional[str] = "snakeHighScore",
    ):
        super().__init__(width=grid_size * cell_size, height=grid_size * cell_size,
                         tick_rate=1000.0 / initial_interval_ms, best_key=best_key)
        assert 0 < initial_length <= grid_size // 2 + 1, "Snake does not fit on the grid"
        self.grid_size = grid_size
        self.cell_size = cell_size
        self.initial_length = initial_length
        self.initial_interval_ms = initial_interval_ms
        self.speed_increment_ms = speed_increment_ms
        self.min_interval_ms = min_interval_ms
        self.food_points = food_points
        self.speed_up_every = speed_up_every

    def new_session(self, rng: random.Random) -> Session:
        mid = self.grid_size // 2
        body = [Entity(kind="segment", x=mid - i, y=mid, color=HEAD_COLOR if i == 0 else SNAKE_COLOR)
                for i in range(self.initial_length)]
        session = Session(entities=body, lives=1, rng=rng)
        session.extra["direction"] = DIRECTIONS["right"]
        session.extra["next_direction"] = DIRECTIONS["right"]
        session.extra["interval_ms"] = float(self.initial_interval_ms)
        session.extra["crashed"] = False
        session.extra["board_full"] = False
        food = Entity(kind="food", x=0, y=0, color=FOOD_COLOR)
        session.entities.append(food)
        self.place_food(session, food, occupied=self._occupied(session))
        return session

    def tick_interval(self, session: Session) -> float:
        return session.extra["interval_ms"] / 1000.0

    # ----------------------------
    # Helpers
    # ----------------------------

    def body(self, session: Session) -> List[Entity]:
        return list(session.live("segment"))

    def _occupied(self, session: Session):
        return {(int(s.x), int(s.y)) for s in session.live("segment")}

    def place_food(self, session: Session, food: Entity, occupied) -> bool:
        free = [(x, y) for y in range(self.grid_size) for x in range(self.grid_size)
                if (x, y) not in occupied]
        if not free:
            food.alive = False
            return False
        food.x, food.y = session.rng.choice(free)
        return True

    def _in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.grid_size and 0 <= y < self.grid_size

    # ----------------------------
    # Tick pipeline
    # ----------------------------

    def apply_input(self, session: Session, inputs: InputState, scale: float):
        current = session.extra["direction"]
        for action, vec in DIRECTIONS.items():
            if not (inputs.was_pressed(action) or inputs.is_held(action)):
                continue
            # No reversing onto the neck
            if (vec[0] + current[0], vec[1] + current[1]) == (0, 0):
                continue
            session.extra["next_direction"] = vec

    def integrate(self, session: Session, scale: float):
        session.extra["direction"] = session.extra["next_direction"]
        head = self.body(session)[0]
        dx, dy = session.extra["direction"]
        session.extra["next_head"] = (int(head.x) + dx, int(head.y) + dy)

    def collide(self, session: Session) -> List[CollisionPair]:
        nx, ny = session.extra["next_head"]
        body = self.body(session)

        # The tail still counts: it has not moved out of the way yet
        if not self._in_bounds(nx, ny) or (nx, ny) in self._occupied(session):
            session.extra["crashed"] = True
            return []

        body[0].color = SNAKE_COLOR
        head = Entity(kind="segment", x=nx, y=ny, color=HEAD_COLOR)
        session.spawn(head, front=True)

        food = session.first("food")
        if food is not None and (int(food.x), int(food.y)) == (nx, ny):
            return [CollisionPair(head, food, self._eat)]

        body[-1].alive = False
        return []

    def _eat(self, session: Session, head: Entity, food: Entity):
        session.add_score(self.food_points)
        occupied = self._occupied(session) | {(int(head.x), int(head.y))}
        if not self.place_food(session, food, occupied):
            session.extra["board_full"] = True

        interval = session.extra["interval_ms"]
        if session.score % self.speed_up_every == 0 and interval > self.min_interval_ms:
            session.extra["interval_ms"] = max(self.min_interval_ms, interval - self.speed_increment_ms)

    def check_terminal(self, session: Session) -> Optional[Outcome]:
        if session.extra["crashed"]:
            return Outcome(won=False, score=session.score, message="Game Over")
        if session.extra["board_full"]:
            return Outcome(won=True, score=session.score, message="Board cleared!")
        return None

    # ----------------------------
    # Outer surfaces
    # ----------------------------

    def speed_multiplier(self, session: Session) -> float:
        return (self.initial_interval_ms - session.extra["interval_ms"]) / self.speed_increment_ms + 1

    def hud(self, session: Session) -> Dict[str, str]:
        return {
            "score": str(session.score),
            "length": str(session.count("segment") + len(session.pending_spawns)),
            "speed": f"{self.speed_multiplier(session):.1f}x",
        }

    def render_entities(self, session: Session):
        c = self.cell_size
        for e in session.live():
            if e.kind == "food":
                yield Entity(kind="food", x=e.x * c + c / 2, y=e.y * c + c / 2,
                             radius=c / 2 - 2, color=e.color)
            else:
                yield Entity(kind=e.kind, x=e.x * c + 1, y=e.y * c + 1,
                             width=c - 2, height=c - 2, color=e.color)

    def observe(self, session: Session) -> np.ndarray:
        body = self.body(session)
        head = body[0]
        food = session.first("food")
        n = float(self.grid_size)
        dx, dy = session.extra["direction"]
        occupied = self._occupied(session)

        def blocked(x, y) -> float:
            return 1.0 if not self._in_bounds(x, y) or (x, y) in occupied else -1.0

        hx, hy = int(head.x), int(head.y)
        return np.array([
            hx / n * 2 - 1,
            hy / n * 2 - 1,
            (food.x - head.x) / n if food is not None else 0.0,
            (food.y - head.y) / n if food is not None else 0.0,
            float(dx),
            float(dy),
            blocked(hx, hy - 1),
            blocked(hx, hy + 1),
            blocked(hx - 1, hy),
            blocked(hx + 1, hy),
            len(body) / (n * n) * 2 - 1,
            self.speed_multiplier(session) / 21.0 * 2 - 1,
        ], dtype=np.float32)
