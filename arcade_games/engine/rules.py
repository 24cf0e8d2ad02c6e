"""
GameRules - the capability set a game plugs into the loop
---------------------------------------------------------
A game supplies entities, a collision table, scoring and terminal conditions.
The loop calls the hooks below in a fixed order every tick:

    apply_input -> integrate -> apply_forces -> collide -> apply_effects
    -> check_terminal -> purge

Defaults cover the common case (plain Euler motion, table-driven
collisions), so most games only override a handful of hooks.
"""

from __future__ import annotations

import random
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

import numpy as np

from .collision import CollisionPair, CollisionRule, apply_effects, resolve_collisions
from .entities import Entity
from .input import InputState
from .session import Outcome, Session
from .utils import clamp


class GameRules:
    name: str = "game"
    actions: Tuple[str, ...] = ()
    higher_is_better: bool = True
    observation_size: int = 4

    def __init__(
        self,
        width: int = 800,
        height: int = 600,
        tick_rate: float = 60.0,
        variable_delta: bool = False,
        best_key: Optional[str] = None,
    ):
        assert width > 0 and height > 0, "Playfield must have a positive size"
        assert tick_rate > 0, "tick_rate must be positive"
        self.width = width
        self.height = height
        self.tick_rate = tick_rate
        self.variable_delta = variable_delta
        self.best_key = best_key

    # ----------------------------
    # Session lifecycle
    # ----------------------------

    def new_session(self, rng: random.Random) -> Session:
        raise NotImplementedError

    def tick_interval(self, session: Session) -> float:
        return 1.0 / self.tick_rate

    # ----------------------------
    # Tick pipeline
    # ----------------------------

    def apply_input(self, session: Session, inputs: InputState, scale: float):
        pass

    def integrate(self, session: Session, scale: float):
        for e in session.live():
            e.prev_x, e.prev_y = e.x, e.y
            if e.moving:
                e.x += e.vx * scale
                e.y += e.vy * scale

    def apply_forces(self, session: Session, scale: float):
        pass

    def collision_rules(self, session: Session) -> Sequence[CollisionRule]:
        return ()

    def collide(self, session: Session) -> List[CollisionPair]:
        return resolve_collisions(session, self.collision_rules(session))

    def apply_effects(self, session: Session, pairs: Sequence[CollisionPair]):
        apply_effects(session, pairs)

    def check_terminal(self, session: Session) -> Optional[Outcome]:
        return None

    # ----------------------------
    # Outer surfaces
    # ----------------------------

    def hud(self, session: Session) -> Dict[str, str]:
        return {"score": str(session.score)}

    def best_storage_key(self, session: Session) -> Optional[str]:
        return self.best_key

    def best_candidate(self, session: Session) -> Optional[float]:
        if self.higher_is_better:
            return session.score
        return None

    def format_best(self, value: Optional[float]) -> str:
        return "--" if value is None else str(int(value))

    def render_entities(self, session: Session) -> Iterable[Entity]:
        return session.live()

    def observe(self, session: Session) -> np.ndarray:
        return np.array([
            clamp(session.score / 1000.0, 0, 1) * 2 - 1,
            clamp(session.lives / 5.0, 0, 1) * 2 - 1,
            clamp(session.level / 10.0, 0, 1) * 2 - 1,
            clamp(session.elapsed / 600.0, 0, 1) * 2 - 1,
        ], dtype=np.float32)

    # ----------------------------
    # Helpers shared by games
    # ----------------------------

    def norm_x(self, x: float) -> float:
        """Map a playfield x to [-1, 1]"""
        return clamp(x / self.width * 2 - 1, -1, 1)

    def norm_y(self, y: float) -> float:
        return clamp(y / self.height * 2 - 1, -1, 1)

    def clamp_rect(self, e: Entity):
        """Keep a rectangle inside the playfield"""
        e.x = clamp(e.x, 0, self.width - e.width)
        e.y = clamp(e.y, 0, self.height - e.height)

    def clamp_circle(self, e: Entity):
        e.x = clamp(e.x, e.radius, self.width - e.radius)
        e.y = clamp(e.y, e.radius, self.height - e.radius)
