"""Generic 2D arcade simulation engine"""

from .collision import CollisionPair, CollisionRule, apply_effects, overlaps, reflect, resolve_collisions
from .entities import Entity
from .input import InputState, InputTracker
from .loop import GameLoop
from .persistence import BestStore, JsonFileStore, MemoryStore, is_better, record_best
from .rules import GameRules
from .scheduler import ManualScheduler, Scheduler
from .session import Outcome, Session, SessionSnapshot, SessionState
from .ui import NullUi, RecordingUi, UiSink

__all__ = [
    "CollisionPair",
    "CollisionRule",
    "apply_effects",
    "overlaps",
    "reflect",
    "resolve_collisions",
    "Entity",
    "InputState",
    "InputTracker",
    "GameLoop",
    "BestStore",
    "JsonFileStore",
    "MemoryStore",
    "is_better",
    "record_best",
    "GameRules",
    "ManualScheduler",
    "Scheduler",
    "Outcome",
    "Session",
    "SessionSnapshot",
    "SessionState",
    "NullUi",
    "RecordingUi",
    "UiSink",
]
