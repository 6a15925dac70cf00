"""
Screen sampler base class
"""
from abc import ABC, abstractmethod
from typing import Optional

import numpy as np

from ...core.timeutils import Clock, system_clock
from ..vision.snapshot import Snapshot
from ..vision.utils import to_bgr
from ..vision.zone import Zone, ZoneError


class CaptureError(RuntimeError):
    """Display unreadable (locked session, lost display, backend failure)."""


class BaseCapture(ABC):
    """Screen sampler: the only component that reads the physical display.

    Failures are raised as ``CaptureError`` and never retried here; retrying
    is the verb's decision.
    """

    def __init__(self, clock: Clock = system_clock):
        self.clock = clock

    @abstractmethod
    def _grab(self, zone: Zone) -> np.ndarray:
        """
        Raw capture of ``zone``.

        Returns:
            BGR or BGRA array of shape (zone.h, zone.w, C)

        Raises:
            CaptureError: display unreadable
        """

    @abstractmethod
    def screen_zone(self) -> Zone:
        """Bounds of the capturable screen."""

    def capture(self, zone: Optional[Zone] = None) -> Snapshot:
        """
        Capture the full screen, or ``zone`` if given.

        Raises:
            ZoneError: zone not inside the screen
            CaptureError: capture failed
        """
        screen = self.screen_zone()
        target = zone or screen
        if not screen.contains(target):
            raise ZoneError(f"{target} is outside screen {screen}")

        try:
            raw = self._grab(target)
        except CaptureError:
            raise
        except Exception as e:
            raise CaptureError(f"Screen capture failed: {e}") from e

        if raw is None:
            raise CaptureError("Screen capture returned no data")
        pixels = to_bgr(np.asarray(raw))
        if pixels.shape[:2] != (target.h, target.w):
            raise CaptureError(
                f"Capture returned {pixels.shape[1]}x{pixels.shape[0]} for {target}"
            )
        return Snapshot(pixels=pixels, zone=target, captured_at=self.clock.now())

    def is_available(self) -> bool:
        """Whether the display can currently be read."""
        try:
            screen = self.screen_zone()
            self._grab(Zone(screen.x, screen.y, 1, 1))
            return True
        except Exception:
            return False

    def close(self) -> None:
        """Release backend resources."""
