"""Game rule sets and the name -> rules registry"""

from ..configs.game_config import GAME_CONFIGS
from ..engine.rules import GameRules
from .breakout import BreakoutRules
from .memory import MemoryRules
from .meteor_dodge import MeteorDodgeRules
from .platform_runner import PlatformRunnerRules
from .pong import PongRules
from .racing import RacingRules
from .snake import SnakeRules
from .space_invaders import SpaceInvadersRules
from .tetris import TetrisRules

GAMES = {
    "breakout": BreakoutRules,
    "memory": MemoryRules,
    "meteor_dodge": MeteorDodgeRules,
    "platform_runner": PlatformRunnerRules,
    "pong": PongRules,
    "racing": RacingRules,
    "snake": SnakeRules,
    "space_invaders": SpaceInvadersRules,
    "tetris": TetrisRules,
}


def make_game(name: str, **overrides) -> GameRules:
    """Build a game's rules from its config table plus keyword overrides"""
    if name not in GAMES:
        raise ValueError(f"Unknown game: {name}. Choose from {sorted(GAMES)}")
    kwargs = dict(GAME_CONFIGS[name])
    kwargs.update(overrides)
    return GAMES[name](**kwargs)


__all__ = [
    "GAMES",
    "make_game",
    "BreakoutRules",
    "MemoryRules",
    "MeteorDodgeRules",
    "PlatformRunnerRules",
    "PongRules",
    "RacingRules",
    "SnakeRules",
    "SpaceInvadersRules",
    "TetrisRules",
]
