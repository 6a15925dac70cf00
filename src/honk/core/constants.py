"""
Constants and enums
"""
from enum import Enum


class VerbKind(str, Enum):
    """Scripted UI action"""
    CLICK = "click"
    SCROLL = "scroll"
    INPUT = "input"
    HOVER = "hover"
    CHECK = "check"


class Outcome(str, Enum):
    """Terminal verdict of one verb invocation"""
    SUCCEEDED = "succeeded"
    CONVERGED = "converged"
    TIMED_OUT = "timed_out"
    TARGET_NOT_FOUND = "target_not_found"
    NO_STATE_CHANGE = "no_state_change"  # acted, but the zone did not visibly respond


class VerbState(str, Enum):
    """Per-invocation state machine"""
    LOCATING = "locating"
    ACTING = "acting"
    OBSERVING = "observing"
    DECIDING = "deciding"
    TERMINAL = "terminal"


class MouseButton(str, Enum):
    LEFT = "left"
    RIGHT = "right"
    MIDDLE = "middle"


class ScrollDirection(str, Enum):
    UP = "up"
    DOWN = "down"
    LEFT = "left"
    RIGHT = "right"


class RectAnchor(str, Enum):
    """Which point of a rectangle a coordinate represents"""
    TOP_LEFT = "top_left"
    TOP_RIGHT = "top_right"
    BOTTOM_LEFT = "bottom_left"
    BOTTOM_RIGHT = "bottom_right"
    CENTER = "center"


# Outcomes the interpreter may treat as a failed step
FAILURE_OUTCOMES = frozenset({Outcome.TIMED_OUT, Outcome.TARGET_NOT_FOUND})
