"""Transform data structures for coordinate and offset representation."""
from dataclasses import dataclass


@dataclass(frozen=True)
class Vec2:
    """2D vector for coordinate pairs.

    Used for any x/y pair across the editor's spaces:
    - Page pixels (1080x1620 logical page, top-left origin)
    - Screen pixels (viewport, after scale and pan)
    - Translate offsets carried by style patches
    """
    x: float = 0.0
    y: float = 0.0

    def __iter__(self):
        """Allow tuple unpacking: x, y = vec2"""
        return iter((self.x, self.y))

    def __add__(self, other: 'Vec2') -> 'Vec2':
        return Vec2(self.x + other.x, self.y + other.y)

    def __sub__(self, other: 'Vec2') -> 'Vec2':
        return Vec2(self.x - other.x, self.y - other.y)

    def scaled(self, factor: float) -> 'Vec2':
        return Vec2(self.x * factor, self.y * factor)


@dataclass(frozen=True)
class Rect:
    """Axis-aligned box in page pixels (top-left origin)."""
    x: float
    y: float
    width: float
    height: float

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def bottom(self) -> float:
        return self.y + self.height

    def contains(self, point: Vec2) -> bool:
        return self.x <= point.x <= self.right and self.y <= point.y <= self.bottom

    def translated(self, offset: Vec2) -> 'Rect':
        return Rect(self.x + offset.x, self.y + offset.y, self.width, self.height)
