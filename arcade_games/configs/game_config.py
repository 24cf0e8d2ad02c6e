"""
Game configuration tables
Every tunable constant of every game, one dict per game
"""

# ==============================================================================
# BREAKOUT
# ==============================================================================

BREAKOUT_CONFIG = {
    "width": 800,
    "height": 600,
    "paddle_width": 120,
    "paddle_height": 20,
    "paddle_speed": 8,
    "paddle_y_offset": 50,      # paddle top = height - offset
    "min_paddle_width": 80,
    "paddle_shrink": 10,        # per level
    "ball_radius": 8,
    "ball_speed": 5,
    "ball_speed_increment": 1,  # per level
    "brick_rows": 6,
    "brick_cols": 10,
    "brick_width": 65,
    "brick_height": 22,
    "brick_padding": 10,
    "brick_offset_top": 80,
    "brick_offset_left": 28,
    "brick_points": (60, 50, 40, 30, 20, 10),
    "lives": 3,
}

# ==============================================================================
# PONG
# ==============================================================================

PONG_DIFFICULTY = {
    "easy": {"speed": 3, "cpu_speed": 2, "balls": 1},
    "medium": {"speed": 5, "cpu_speed": 3.5, "balls": 1},
    "hard": {"speed": 7, "cpu_speed": 5, "balls": 3},
}

PONG_CONFIG = {
    "width": 800,
    "height": 600,
    "difficulty": "medium",
    "paddle_width": 15,
    "paddle_height": 100,
    "paddle_margin": 30,
    "player_speed": 6,
    "ball_size": 15,
    "winning_score": 5,
    "speed_up": 1.05,           # |vx| multiplier on every paddle hit
    "spin": 10,                 # vy = (hit - 0.5) * spin
    "cpu_dead_zone": 10,
    "cpu_jitter": 0.0,          # px of random noise on the CPU target
    "serve_delay_ticks": 30,    # ~500 ms at 60 FPS
}

# ==============================================================================
# SNAKE
# ==============================================================================

SNAKE_CONFIG = {
    "grid_size": 30,
    "cell_size": 20,
    "initial_length": 3,
    "initial_interval_ms": 150,
    "speed_increment_ms": 5,
    "min_interval_ms": 50,
    "food_points": 10,
    "speed_up_every": 50,       # points
    "best_key": "snakeHighScore",
}

# ==============================================================================
# SPACE INVADERS
# ==============================================================================

SPACE_INVADERS_CONFIG = {
    "width": 800,
    "height": 600,
    "player_width": 50,
    "player_height": 35,
    "player_y_offset": 80,
    "player_speed": 6,
    "alien_rows": 4,
    "alien_cols": 10,
    "alien_width": 40,
    "alien_height": 30,
    "alien_gap": 15,
    "alien_start": (100, 80),
    "alien_step": 10,           # px per march, times alien speed
    "alien_drop": 10,
    "alien_speed": 1.0,
    "alien_speed_increment": 0.5,
    "march_base_ticks": 20,
    "march_min_ticks": 5,
    "fire_every_ticks": 60,
    "fire_chance": 0.3,
    "bullet_width": 4,
    "bullet_height": 15,
    "bullet_speed": 8,
    "max_bullets": 3,
    "alien_bullet_height": 10,
    "alien_bullet_speed": 4,
    "lives": 3,
    "best_key": "spaceInvadersHighScore",
}

# ==============================================================================
# METEOR DODGE
# ==============================================================================

METEOR_DODGE_CONFIG = {
    "width": 800,
    "height": 600,
    "player_radius": 25,
    "player_speed": 5,
    "follow_rate": 0.15,        # pointer-follow lerp per tick
    "base_spawn_ticks": 60,
    "min_spawn_ticks": 15,
    "base_meteor_speed": 2,
    "meteor_speed_range": 2,
    "meteor_radius_range": (15, 30),
    "max_speed_multiplier": 5,
    "difficulty_rate": 0.001,   # multiplier gain per tick
    "despawn_margin": 50,
    "spawn_margin": 30,
    "dodge_points": 10,
    "best_key": "meteorDodgeHighScore",
}

# ==============================================================================
# PLATFORM RUNNER
# ==============================================================================

PLATFORM_RUNNER_CONFIG = {
    "width": 800,
    "height": 600,
    "gravity": 0.6,
    "fast_fall": 0.8,           # extra gravity fraction while holding down
    "jump_force": -14,
    "stomp_bounce": 0.6,
    "player_speed": 5,
    "player_size": 30,
    "spawn": (50, 100),
    "enemy_size": 25,
    "enemy_speed": 1.5,
    "coin_size": 15,
    "coin_points": 10,
    "stomp_points": 50,
    "platform_move_speed": 2,
    "platform_move_range": 100,
    "goal_margin": 100,
    "lives": 3,
}

# (x, y, width, height, moving)
PLATFORM_LEVELS = {
    1: {
        "platforms": [
            (0, 550, 800, 50, False),
            (200, 450, 150, 20, False),
            (450, 350, 150, 20, False),
            (150, 250, 120, 20, False),
            (400, 150, 150, 20, False),
            (650, 100, 100, 20, False),
        ],
        "enemies": [(220, 425, 100), (460, 325, 80)],
        "coins": [(280, 410), (520, 310), (200, 210), (470, 110), (700, 60)],
    },
    2: {
        "platforms": [
            (0, 550, 200, 50, False),
            (600, 550, 200, 50, False),
            (200, 450, 100, 20, True),
            (400, 350, 100, 20, True),
            (200, 250, 100, 20, True),
            (550, 200, 120, 20, False),
            (100, 150, 120, 20, False),
            (650, 80, 100, 20, False),
        ],
        "enemies": [(50, 525, 120), (620, 525, 140), (560, 175, 90)],
        "coins": [(250, 410), (450, 310), (250, 210), (600, 160), (700, 40)],
    },
    3: {
        "platforms": [
            (0, 550, 150, 50, False),
            (650, 550, 150, 50, False),
            (200, 500, 80, 20, False),
            (300, 450, 80, 20, False),
            (400, 400, 80, 20, False),
            (500, 350, 80, 20, False),
            (150, 300, 100, 20, True),
            (450, 200, 100, 20, True),
            (100, 100, 100, 20, False),
            (600, 50, 150, 20, False),
        ],
        "enemies": [(20, 525, 100), (670, 525, 100), (210, 475, 50), (420, 375, 40)],
        "coins": [(240, 460), (340, 410), (440, 360), (200, 260), (500, 160), (150, 60), (675, 10)],
    },
}

# ==============================================================================
# RACING
# ==============================================================================

RACING_CONFIG = {
    "width": 800,
    "height": 600,
    "car_width": 30,
    "car_height": 50,
    "max_speed": 5,
    "acceleration": 0.3,
    "reverse_factor": 0.6,
    "friction": 0.95,
    "turn_speed": 0.08,
    "off_track_factor": 0.5,
    "total_laps": 3,
    "track_outer": (700, 500),
    "track_inner": (400, 250),
    "finish_line_width": 80,
    "checkpoint_band": 50,
}

# ==============================================================================
# TETRIS
# ==============================================================================

TETRIS_CONFIG = {
    "cols": 10,
    "rows": 20,
    "block_size": 30,
    "base_drop_ms": 1000,
    "drop_step_ms": 100,        # per level
    "min_drop_ms": 100,
    "lines_per_level": 10,
    "line_points": (0, 100, 300, 500, 800),
    "soft_drop_points": 1,
    "hard_drop_points": 2,
}

# ==============================================================================
# MEMORY
# ==============================================================================

MEMORY_SYMBOLS = {
    "easy": ["gamepad", "target", "dice", "tent", "palette", "masks", "clapper", "guitar"],
    "medium": ["gamepad", "target", "dice", "tent", "palette", "masks", "clapper", "guitar",
               "keys", "trumpet", "violin", "mic"],
    "hard": ["gamepad", "target", "dice", "tent", "palette", "masks", "clapper", "guitar",
             "keys", "trumpet", "violin", "mic", "headphones", "score", "note", "notes",
             "basketball", "soccer"],
}

MEMORY_COLUMNS = {"easy": 4, "medium": 6, "hard": 6}

MEMORY_CONFIG = {
    "width": 800,
    "height": 600,
    "difficulty": "easy",
    "card_width": 90,
    "card_height": 90,
    "card_gap": 12,
    "reveal_seconds": 0.8,
    "win_delay_seconds": 0.5,
    "best_key_prefix": "memoryBestTime_",
}

# ==============================================================================
# REGISTRY
# ==============================================================================

GAME_CONFIGS = {
    "breakout": BREAKOUT_CONFIG,
    "pong": PONG_CONFIG,
    "snake": SNAKE_CONFIG,
    "space_invaders": SPACE_INVADERS_CONFIG,
    "meteor_dodge": METEOR_DODGE_CONFIG,
    "platform_runner": PLATFORM_RUNNER_CONFIG,
    "racing": RACING_CONFIG,
    "tetris": TETRIS_CONFIG,
    "memory": MEMORY_CONFIG,
}

# ==============================================================================
# KEY BINDINGS
# arcade.key names -> logical actions. SPACE/ENTER start, P pauses, R resets;
# the window handles those before consulting this table.
# ==============================================================================

KEY_BINDINGS = {
    "breakout": {"LEFT": "left", "A": "left", "RIGHT": "right", "D": "right", "SPACE": "launch"},
    "pong": {"W": "up", "UP": "up", "S": "down", "DOWN": "down"},
    "snake": {"UP": "up", "W": "up", "DOWN": "down", "S": "down",
              "LEFT": "left", "A": "left", "RIGHT": "right", "D": "right"},
    "space_invaders": {"LEFT": "left", "A": "left", "RIGHT": "right", "D": "right", "SPACE": "fire"},
    "meteor_dodge": {"UP": "up", "W": "up", "DOWN": "down", "S": "down",
                     "LEFT": "left", "A": "left", "RIGHT": "right", "D": "right"},
    "platform_runner": {"LEFT": "left", "A": "left", "RIGHT": "right", "D": "right",
                        "DOWN": "down", "S": "down", "SPACE": "jump", "UP": "jump", "W": "jump"},
    "racing": {"UP": "p1_up", "DOWN": "p1_down", "LEFT": "p1_left", "RIGHT": "p1_right",
               "W": "p2_up", "S": "p2_down", "A": "p2_left", "D": "p2_right"},
    "tetris": {"LEFT": "left", "A": "left", "RIGHT": "right", "D": "right",
               "DOWN": "soft_drop", "S": "soft_drop", "UP": "rotate", "W": "rotate",
               "SPACE": "hard_drop"},
    "memory": {"LEFT": "left", "RIGHT": "right", "UP": "up", "DOWN": "down", "SPACE": "select"},
}
