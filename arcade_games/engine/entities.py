"""
Game entity dataclasses
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Tuple


@dataclass
class Entity:
    """Any simulated object: paddle, ball, brick, meteor, platform, segment...

    Circles (radius > 0) are positioned by their center, rectangles by their
    top-left corner.
    """
    kind: str
    x: float
    y: float
    vx: float = 0.0
    vy: float = 0.0
    width: float = 0.0
    height: float = 0.0
    radius: float = 0.0
    alive: bool = True
    points: int = 0
    color: Tuple[int, int, int] = (255, 255, 255)
    prev_x: float = 0.0
    prev_y: float = 0.0
    data: Dict[str, Any] = field(default_factory=dict)

    @property
    def shape(self) -> str:
        return "circle" if self.radius > 0 else "rect"

    def bounds(self) -> Tuple[float, float, float, float]:
        """Axis-aligned bounding box as (left, top, width, height)"""
        if self.radius > 0:
            return (self.x - self.radius, self.y - self.radius,
                    self.radius * 2, self.radius * 2)
        return (self.x, self.y, self.width, self.height)

    def center(self) -> Tuple[float, float]:
        if self.radius > 0:
            return (self.x, self.y)
        return (self.x + self.width / 2, self.y + self.height / 2)

    @property
    def moving(self) -> bool:
        return self.vx != 0.0 or self.vy != 0.0
