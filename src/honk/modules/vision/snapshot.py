"""
Snapshot: a pixel buffer tagged with the Zone it came from.
"""
from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from .utils import crop
from .zone import Zone


@dataclass(frozen=True)
class Snapshot:
    """Ephemeral capture of one Zone.

    ``pixels`` is a BGR uint8 array of shape (zone.h, zone.w, 3).
    ``captured_at`` is the engine clock reading (monotonic seconds).
    """

    pixels: np.ndarray
    zone: Zone
    captured_at: float

    def __post_init__(self) -> None:
        h, w = self.pixels.shape[:2]
        if (w, h) != (self.zone.w, self.zone.h):
            raise ValueError(
                f"Pixel buffer {w}x{h} does not match {self.zone}"
            )

    def sub(self, zone: Zone) -> "Snapshot":
        """View of a sub-zone (screen coordinates) of this snapshot."""
        local = zone.local_to(self.zone)
        return Snapshot(crop(self.pixels, local), zone, self.captured_at)


__all__ = ["Snapshot"]
