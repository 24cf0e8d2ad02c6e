"""
Utility functions for game mechanics
"""

from __future__ import annotations
import math
import random
from typing import Optional


def clamp(x: float, lo: float, hi: float) -> float:
    """Clamp value between low and high bounds"""
    return lo if x < lo else hi if x > hi else x


def vec_len(x: float, y: float) -> float:
    """Calculate vector length (magnitude)"""
    return math.hypot(x, y)


def circle_collide(x1, y1, r1, x2, y2, r2) -> bool:
    """Check if two circles overlap (touching circles do not)"""
    return math.hypot(x1 - x2, y1 - y2) < r1 + r2


def rect_overlap(ax, ay, aw, ah, bx, by, bw, bh) -> bool:
    """Check if two axis-aligned rectangles overlap on both axes"""
    return ax < bx + bw and ax + aw > bx and ay < by + bh and ay + ah > by


def make_rng(seed: Optional[int] = None) -> random.Random:
    """Create the random source injected into a session"""
    return random.Random(seed)
