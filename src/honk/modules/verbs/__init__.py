from .types import (
    CheckPayload,
    ClickPayload,
    HoverPayload,
    InputPayload,
    ScrollPayload,
    VerbRequest,
    VerbResult,
)
from .policies import ChangeWatch, Decision, ScrollConvergence, ScrollPolicy, WatchPolicy
from .base import BaseVerb, VerbContext
from .engine import VERB_TYPES, VerbEngine

__all__ = [
    "CheckPayload",
    "ClickPayload",
    "HoverPayload",
    "InputPayload",
    "ScrollPayload",
    "VerbRequest",
    "VerbResult",
    "ChangeWatch",
    "Decision",
    "ScrollConvergence",
    "ScrollPolicy",
    "WatchPolicy",
    "BaseVerb",
    "VerbContext",
    "VERB_TYPES",
    "VerbEngine",
]
