"""
Desktop capture via mss
"""
from typing import Optional

import mss
import mss.exception
import numpy as np

from ...core.config import settings
from ...core.logger import logger
from ...core.timeutils import Clock, system_clock
from ..vision.zone import Zone
from .base import BaseCapture, CaptureError


class MssCapture(BaseCapture):
    """Captures one monitor of the local desktop.

    Zones are in the virtual-screen coordinate space mss reports, which is
    physical pixels on HiDPI displays.
    """

    def __init__(self, monitor: Optional[int] = None, clock: Clock = system_clock):
        super().__init__(clock)
        self.monitor_index = settings.capture_monitor if monitor is None else monitor
        self._sct: Optional["mss.base.MSSBase"] = None
        self._screen: Optional[Zone] = None
        self.logger = logger.bind(module="MssCapture")

    def _session(self):
        if self._sct is None:
            try:
                self._sct = mss.mss()
            except mss.exception.ScreenShotError as e:
                raise CaptureError(f"Cannot open display: {e}") from e
        return self._sct

    def screen_zone(self) -> Zone:
        if self._screen is None:
            monitors = self._session().monitors
            if self.monitor_index >= len(monitors):
                raise CaptureError(
                    f"Monitor {self.monitor_index} not present ({len(monitors) - 1} available)"
                )
            mon = monitors[self.monitor_index]
            self._screen = Zone(mon["left"], mon["top"], mon["width"], mon["height"])
            self.logger.debug(f"Screen bounds: {self._screen}")
        return self._screen

    def _grab(self, zone: Zone) -> np.ndarray:
        region = {"left": zone.x, "top": zone.y, "width": zone.w, "height": zone.h}
        try:
            shot = self._session().grab(region)
        except mss.exception.ScreenShotError as e:
            self.logger.error(f"Screen capture failed: {e}")
            raise CaptureError(f"Screen capture failed: {e}") from e
        # BGRA
        return np.asarray(shot)

    def close(self) -> None:
        if self._sct is not None:
            self._sct.close()
            self._sct = None
