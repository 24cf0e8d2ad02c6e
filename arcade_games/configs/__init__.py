from .game_config import GAME_CONFIGS, KEY_BINDINGS
