"""
Session record and session state
"""

from __future__ import annotations

import copy
import random
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterator, List, Optional, Tuple

from .entities import Entity


class SessionState(str, Enum):
    NOT_STARTED = "not_started"
    RUNNING = "running"
    PAUSED = "paused"
    ENDED = "ended"


@dataclass(frozen=True)
class Outcome:
    """Terminal result of a playthrough"""
    won: bool
    score: int
    message: str = ""


@dataclass(frozen=True)
class SessionSnapshot:
    """Read-only view handed to render surfaces"""
    entities: Tuple[Entity, ...]
    score: int
    lives: int
    level: int
    elapsed: float
    tick_count: int
    state: SessionState
    outcome: Optional[Outcome]
    extra: Dict[str, Any]


@dataclass
class Session:
    """All state for one playthrough. Replaced wholesale on reset."""
    entities: List[Entity] = field(default_factory=list)
    score: int = 0
    lives: int = 3
    level: int = 1
    elapsed: float = 0.0
    tick_count: int = 0
    state: SessionState = SessionState.NOT_STARTED
    outcome: Optional[Outcome] = None
    rng: random.Random = field(default_factory=random.Random)
    extra: Dict[str, Any] = field(default_factory=dict)

    # Spawns queued during a tick, applied by purge()
    _spawn_front: List[Entity] = field(default_factory=list, repr=False)
    _spawn_back: List[Entity] = field(default_factory=list, repr=False)

    def spawn(self, entity: Entity, front: bool = False):
        if front:
            self._spawn_front.append(entity)
        else:
            self._spawn_back.append(entity)

    @property
    def pending_spawns(self) -> List[Entity]:
        return list(self._spawn_front) + list(self._spawn_back)

    def live(self, kind: Optional[str] = None) -> Iterator[Entity]:
        for e in self.entities:
            if e.alive and (kind is None or e.kind == kind):
                yield e

    def first(self, kind: str) -> Optional[Entity]:
        return next(self.live(kind), None)

    def count(self, kind: str) -> int:
        return sum(1 for _ in self.live(kind))

    def add_score(self, points: int):
        if points < 0:
            raise ValueError(f"Score can only increase, got {points}")
        self.score += points

    def purge(self):
        """Drop not-live entities and apply queued spawns"""
        live = [e for e in self.entities if e.alive]
        self.entities = self._spawn_front[::-1] + live + self._spawn_back
        self._spawn_front = []
        self._spawn_back = []

    def snapshot(self) -> SessionSnapshot:
        return SessionSnapshot(
            entities=tuple(copy.deepcopy(e) for e in self.entities if e.alive),
            score=self.score,
            lives=self.lives,
            level=self.level,
            elapsed=self.elapsed,
            tick_count=self.tick_count,
            state=self.state,
            outcome=self.outcome,
            extra=copy.deepcopy(self.extra),
        )
