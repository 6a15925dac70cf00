"""
Input injection base class
"""
from abc import ABC, abstractmethod

from ...core.constants import MouseButton, ScrollDirection


class InputError(RuntimeError):
    """The input backend refused or failed to inject an event."""


class BaseInput(ABC):
    """Physical input injection.

    Coordinates are screen-absolute capture pixels; implementations convert
    to whatever space their backend expects.
    """

    @abstractmethod
    def move_to(self, x: int, y: int) -> None:
        ...

    @abstractmethod
    def click(self, x: int, y: int, button: MouseButton = MouseButton.LEFT, clicks: int = 1) -> None:
        ...

    @abstractmethod
    def scroll(self, x: int, y: int, direction: ScrollDirection, clicks: int) -> None:
        """Scroll ``clicks`` wheel notches with the pointer at (x, y)."""

    @abstractmethod
    def type_text(self, text: str) -> None:
        """Transmit ``text`` literally, character by character."""

    @abstractmethod
    def press_key(self, key: str) -> None:
        ...
