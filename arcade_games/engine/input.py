"""
Input state produced by the input collaborator and read by the update step
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import FrozenSet, Optional, Set, Tuple


@dataclass(frozen=True)
class InputState:
    held: FrozenSet[str] = frozenset()
    pressed: FrozenSet[str] = frozenset()
    pointer: Optional[Tuple[float, float]] = None
    pointer_moved: bool = False

    def is_held(self, *actions: str) -> bool:
        return any(a in self.held for a in actions)

    def was_pressed(self, *actions: str) -> bool:
        return any(a in self.pressed for a in actions)


@dataclass
class InputTracker:
    """Accumulates key/pointer events between ticks"""
    actions: Tuple[str, ...] = ()
    _held: Set[str] = field(default_factory=set)
    _pressed: Set[str] = field(default_factory=set)
    _pointer: Optional[Tuple[float, float]] = None
    _pointer_moved: bool = False

    def _check(self, action: str):
        if self.actions and action not in self.actions:
            raise KeyError(f"Unknown action: {action}")

    def press(self, action: str):
        self._check(action)
        if action not in self._held:
            self._pressed.add(action)
        self._held.add(action)

    def release(self, action: str):
        self._check(action)
        self._held.discard(action)

    def release_all(self):
        self._held.clear()
        self._pressed.clear()

    def move_pointer(self, x: float, y: float):
        self._pointer = (x, y)
        self._pointer_moved = True

    def click(self, x: float, y: float, action: str = "select"):
        self.move_pointer(x, y)
        self._check(action)
        self._pressed.add(action)

    def snapshot(self) -> InputState:
        """Current state; edge-triggered presses are consumed"""
        state = InputState(frozenset(self._held), frozenset(self._pressed),
                           self._pointer, self._pointer_moved)
        self._pressed = set()
        self._pointer_moved = False
        return state
