"""
Desktop input via pyautogui
"""
from __future__ import annotations

from typing import Optional, Tuple

from ...core.config import settings
from ...core.constants import MouseButton, ScrollDirection
from ...core.logger import logger
from .base import BaseInput, InputError


class PyAutoGuiInput(BaseInput):
    """Mouse and keyboard through pyautogui.

    pyautogui works in logical (DPI-scaled) coordinates while captures are in
    physical pixels, so every coordinate is divided by ``scale``.
    """

    def __init__(self, scale: Optional[float] = None, type_interval: Optional[float] = None) -> None:
        # Imported lazily: pyautogui needs a display at import time
        import pyautogui  # type: ignore

        self._gui = pyautogui
        # Moving the pointer into a screen corner aborts the script
        pyautogui.FAILSAFE = True
        pyautogui.PAUSE = 0.0
        self.scale = settings.screen_scale if scale is None else scale
        self.type_interval = settings.type_interval if type_interval is None else type_interval
        self.logger = logger.bind(module="PyAutoGuiInput")

    def _logical(self, x: int, y: int) -> Tuple[int, int]:
        return int(round(x / self.scale)), int(round(y / self.scale))

    def _call(self, func, *args, **kwargs) -> None:
        try:
            func(*args, **kwargs)
        except self._gui.FailSafeException as e:
            raise InputError("Fail-safe triggered: pointer moved to a screen corner") from e
        except Exception as e:
            self.logger.error(f"Input injection failed: {e}")
            raise InputError(str(e)) from e

    def move_to(self, x: int, y: int) -> None:
        lx, ly = self._logical(x, y)
        self._call(self._gui.moveTo, lx, ly)

    def click(self, x: int, y: int, button: MouseButton = MouseButton.LEFT, clicks: int = 1) -> None:
        lx, ly = self._logical(x, y)
        self._call(self._gui.click, lx, ly, clicks=clicks, button=MouseButton(button).value)

    def scroll(self, x: int, y: int, direction: ScrollDirection, clicks: int) -> None:
        lx, ly = self._logical(x, y)
        direction = ScrollDirection(direction)
        if direction in (ScrollDirection.UP, ScrollDirection.DOWN):
            amount = clicks if direction == ScrollDirection.UP else -clicks
            self._call(self._gui.scroll, amount, x=lx, y=ly)
        else:
            amount = clicks if direction == ScrollDirection.RIGHT else -clicks
            self._call(self._gui.hscroll, amount, x=lx, y=ly)

    def type_text(self, text: str) -> None:
        self._call(self._gui.write, text, interval=self.type_interval)

    def press_key(self, key: str) -> None:
        self._call(self._gui.press, key)
