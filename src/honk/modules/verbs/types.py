"""
Verb request/result types: the engine's uniform contract with the interpreter.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, Union

from ...core.constants import FAILURE_OUTCOMES, MouseButton, Outcome, ScrollDirection, VerbKind
from ..vision.snapshot import Snapshot
from ..vision.template import MatchResult
from ..vision.zone import Point, Zone


@dataclass(frozen=True)
class ClickPayload:
    button: MouseButton = MouseButton.LEFT
    double: bool = False


@dataclass(frozen=True)
class ScrollPayload:
    direction: ScrollDirection = ScrollDirection.DOWN
    clicks: Optional[int] = None          # wheel notches per step, None uses settings
    max_steps: Optional[int] = None
    seek_template: Optional[str] = None   # stop as soon as this template is in the viewport


@dataclass(frozen=True)
class InputPayload:
    text: str
    submit: bool = False                  # send the end-of-entry key after the text


@dataclass(frozen=True)
class HoverPayload:
    pass


@dataclass(frozen=True)
class CheckPayload:
    condition: Optional[str] = None
    # zone relative to the matched template's top-left corner
    relative_zone: Optional[Zone] = None


Payload = Union[ClickPayload, ScrollPayload, InputPayload, HoverPayload, CheckPayload]

_PAYLOAD_TYPES = {
    VerbKind.CLICK: ClickPayload,
    VerbKind.SCROLL: ScrollPayload,
    VerbKind.INPUT: InputPayload,
    VerbKind.HOVER: HoverPayload,
    VerbKind.CHECK: CheckPayload,
}


@dataclass(frozen=True)
class VerbRequest:
    """One scripted verb.

    A target is either a template name or an absolute screen point.
    ``check_zone`` is the explicit observation zone (the scroll viewport for
    Scroll, the read zone for Check). Timeouts and intervals are in seconds;
    ``None`` falls back to settings.
    """

    kind: VerbKind
    template: Optional[str] = None
    point: Optional[Point] = None
    search_zone: Optional[Zone] = None
    check_zone: Optional[Zone] = None
    payload: Optional[Payload] = None
    timeout: Optional[float] = None
    poll_interval: Optional[float] = None
    noise_threshold: Optional[float] = None
    pixel_tolerance: Optional[int] = None

    def __post_init__(self) -> None:
        kind = VerbKind(self.kind)
        object.__setattr__(self, "kind", kind)

        expected = _PAYLOAD_TYPES[kind]
        if self.payload is None:
            if kind == VerbKind.INPUT:
                raise ValueError("Input verb requires an InputPayload with the text to type")
            object.__setattr__(self, "payload", expected())
        elif not isinstance(self.payload, expected):
            raise TypeError(f"{kind.value} verb expects {expected.__name__}, got {type(self.payload).__name__}")

        if self.template is not None and self.point is not None:
            raise ValueError("Give either a template or a point, not both")
        has_target = self.template is not None or self.point is not None
        if kind in (VerbKind.CLICK, VerbKind.INPUT, VerbKind.HOVER) and not has_target:
            raise ValueError(f"{kind.value} verb needs a template or point target")
        if kind in (VerbKind.SCROLL, VerbKind.CHECK) and not (has_target or self.check_zone):
            raise ValueError(f"{kind.value} verb needs a check_zone or a target to derive one from")
        if self.timeout is not None and self.timeout <= 0:
            raise ValueError("timeout must be positive")
        if self.poll_interval is not None and self.poll_interval <= 0:
            raise ValueError("poll_interval must be positive")
        if self.noise_threshold is not None and not 0.0 <= self.noise_threshold <= 1.0:
            raise ValueError("noise_threshold must be in [0, 1]")
        if self.pixel_tolerance is not None and not 0 <= self.pixel_tolerance <= 255:
            raise ValueError("pixel_tolerance must be in [0, 255]")

    @classmethod
    def click(cls, template: Optional[str] = None, **kwargs) -> "VerbRequest":
        button = kwargs.pop("button", MouseButton.LEFT)
        double = kwargs.pop("double", False)
        return cls(VerbKind.CLICK, template=template, payload=ClickPayload(button, double), **kwargs)

    @classmethod
    def scroll(cls, viewport: Optional[Zone] = None, **kwargs) -> "VerbRequest":
        payload = ScrollPayload(
            direction=kwargs.pop("direction", ScrollDirection.DOWN),
            clicks=kwargs.pop("clicks", None),
            max_steps=kwargs.pop("max_steps", None),
            seek_template=kwargs.pop("seek_template", None),
        )
        return cls(VerbKind.SCROLL, check_zone=viewport, payload=payload, **kwargs)

    @classmethod
    def input(cls, template: Optional[str], text: str, submit: bool = False, **kwargs) -> "VerbRequest":
        return cls(VerbKind.INPUT, template=template, payload=InputPayload(text, submit), **kwargs)

    @classmethod
    def hover(cls, template: Optional[str] = None, **kwargs) -> "VerbRequest":
        return cls(VerbKind.HOVER, template=template, payload=HoverPayload(), **kwargs)

    @classmethod
    def check(cls, template: Optional[str] = None, condition: Optional[str] = None, **kwargs) -> "VerbRequest":
        relative_zone = kwargs.pop("relative_zone", None)
        return cls(VerbKind.CHECK, template=template, payload=CheckPayload(condition, relative_zone), **kwargs)

    @property
    def target_label(self) -> str:
        if self.template is not None:
            return self.template
        if self.point is not None:
            return f"point{tuple(self.point)}"
        return str(self.check_zone)


@dataclass
class VerbResult:
    """Terminal verdict plus the last observation, owned by the interpreter."""

    kind: VerbKind
    outcome: Outcome
    zone: Optional[Zone] = None
    snapshot: Optional[Snapshot] = field(default=None, repr=False)
    match: Optional[MatchResult] = None
    value: Optional[str] = None       # extracted text (Check)
    verdict: Optional[bool] = None    # condition result (Check)
    steps: int = 0                    # actions performed (scroll steps, clicks)
    elapsed: float = 0.0
    detail: str = ""

    @property
    def ok(self) -> bool:
        return self.outcome not in FAILURE_OUTCOMES


__all__ = [
    "ClickPayload",
    "ScrollPayload",
    "InputPayload",
    "HoverPayload",
    "CheckPayload",
    "Payload",
    "VerbRequest",
    "VerbResult",
]
