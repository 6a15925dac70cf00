"""
Screen rectangles.

A Zone is the unit of observation: every snapshot is tagged with the Zone it
was captured from, and every diff compares two snapshots of the same Zone.
Coordinates are screen-absolute physical pixels, top-left origin.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple

from ...core.constants import RectAnchor

Point = Tuple[int, int]


class ZoneError(ValueError):
    """Zone with non-positive size, or outside the screen bounds."""


@dataclass(frozen=True)
class Zone:
    x: int
    y: int
    w: int
    h: int

    def __post_init__(self) -> None:
        if self.w <= 0 or self.h <= 0:
            raise ZoneError(f"Zone size must be positive, got {self.w}x{self.h}")

    @classmethod
    def from_corners(cls, x1: int, y1: int, x2: int, y2: int) -> "Zone":
        """Build from (left, top) and exclusive (right, bottom)."""
        return cls(int(x1), int(y1), int(x2) - int(x1), int(y2) - int(y1))

    @classmethod
    def from_anchor(
        cls,
        point: Point,
        w: int,
        h: int,
        anchor: RectAnchor,
        bounds: "Zone",
    ) -> "Zone":
        """Build a w x h rectangle anchored at ``point``, clipped to ``bounds``.

        ``anchor`` says which point of the rectangle ``point`` represents.
        Sides that would cross the bounds are cut off rather than shifted. A
        side that would vanish entirely collapses to the 1 px line through
        ``point``, so the result is never empty.
        """
        px, py = int(point[0]), int(point[1])
        if not bounds.contains_point((px, py)):
            raise ZoneError(f"Anchor point {point} outside {bounds}")

        if anchor == RectAnchor.TOP_LEFT:
            x1, y1 = px, py
        elif anchor == RectAnchor.TOP_RIGHT:
            x1, y1 = px - w, py
        elif anchor == RectAnchor.BOTTOM_LEFT:
            x1, y1 = px, py - h
        elif anchor == RectAnchor.BOTTOM_RIGHT:
            x1, y1 = px - w, py - h
        else:
            x1, y1 = px - w // 2, py - h // 2
        x2, y2 = x1 + w, y1 + h

        x1, y1 = max(x1, bounds.x), max(y1, bounds.y)
        x2, y2 = min(x2, bounds.right), min(y2, bounds.bottom)
        if x2 <= x1:
            x1, x2 = px, px + 1
        if y2 <= y1:
            y1, y2 = py, py + 1
        return cls.from_corners(x1, y1, x2, y2)

    @property
    def right(self) -> int:
        return self.x + self.w

    @property
    def bottom(self) -> int:
        return self.y + self.h

    @property
    def center(self) -> Point:
        return (self.x + self.w // 2, self.y + self.h // 2)

    @property
    def area(self) -> int:
        return self.w * self.h

    def as_tuple(self) -> Tuple[int, int, int, int]:
        return (self.x, self.y, self.w, self.h)

    def contains_point(self, point: Point) -> bool:
        x, y = point
        return self.x <= x < self.right and self.y <= y < self.bottom

    def contains(self, other: "Zone") -> bool:
        return (
            self.x <= other.x
            and self.y <= other.y
            and other.right <= self.right
            and other.bottom <= self.bottom
        )

    def intersect(self, other: "Zone") -> Optional["Zone"]:
        x1, y1 = max(self.x, other.x), max(self.y, other.y)
        x2, y2 = min(self.right, other.right), min(self.bottom, other.bottom)
        if x2 <= x1 or y2 <= y1:
            return None
        return Zone.from_corners(x1, y1, x2, y2)

    def clip_to(self, bounds: "Zone") -> "Zone":
        clipped = self.intersect(bounds)
        if clipped is None:
            raise ZoneError(f"{self} lies entirely outside {bounds}")
        return clipped

    def expand(self, margin: int, bounds: Optional["Zone"] = None) -> "Zone":
        grown = Zone(self.x - margin, self.y - margin, self.w + 2 * margin, self.h + 2 * margin)
        return grown.clip_to(bounds) if bounds is not None else grown

    def translate(self, dx: int, dy: int) -> "Zone":
        return Zone(self.x + dx, self.y + dy, self.w, self.h)

    def local_to(self, outer: "Zone") -> "Zone":
        """This zone expressed in ``outer``'s pixel coordinates."""
        if not outer.contains(self):
            raise ZoneError(f"{self} is not inside {outer}")
        return Zone(self.x - outer.x, self.y - outer.y, self.w, self.h)

    def __str__(self) -> str:
        return f"Zone(x={self.x}, y={self.y}, w={self.w}, h={self.h})"


__all__ = ["Point", "Zone", "ZoneError"]
