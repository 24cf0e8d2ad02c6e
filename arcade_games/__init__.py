"""Arcade games collection on a shared 2D simulation engine"""

from .engine import GameLoop, GameRules, Session, SessionState
from .games import GAMES, make_game

__version__ = "0.1.0"

__all__ = ["GameLoop", "GameRules", "Session", "SessionState", "GAMES", "make_game"]
