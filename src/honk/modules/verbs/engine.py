"""
Verb execution engine: the single entry point the script interpreter calls.
"""
from __future__ import annotations

from typing import Dict, Optional, Type

from ...core.config import Settings, settings as default_settings
from ...core.constants import VerbKind
from ...core.logger import logger
from ...core.timeutils import Clock, system_clock
from ..capture.base import BaseCapture, CaptureError
from ..desktop.base import BaseInput, InputError
from ..ocr.backend import TextAnalysisBackend
from ..templates.registry import TemplateRegistry
from ..vision.template import LocationStrategy, TemplateMatchingStrategy
from .base import BaseVerb, VerbContext
from .check import CheckVerb
from .click import ClickVerb
from .hover import HoverVerb
from .input import InputVerb
from .scroll import ScrollVerb
from .types import VerbRequest, VerbResult

VERB_TYPES: Dict[VerbKind, Type[BaseVerb]] = {
    VerbKind.CLICK: ClickVerb,
    VerbKind.SCROLL: ScrollVerb,
    VerbKind.INPUT: InputVerb,
    VerbKind.HOVER: HoverVerb,
    VerbKind.CHECK: CheckVerb,
}


class VerbEngine:
    """Executes one verb at a time, synchronously, and returns its terminal result.

    Recoverable failures (not found, timed out, no state change) come back as
    ``VerbResult`` outcomes. Capture and input failures, unknown template
    names and invalid zones are raised.
    """

    def __init__(
        self,
        capture: BaseCapture,
        input: BaseInput,
        templates: TemplateRegistry,
        strategy: Optional[LocationStrategy] = None,
        text_backend: Optional[TextAnalysisBackend] = None,
        settings: Optional[Settings] = None,
        clock: Clock = system_clock,
    ):
        settings = settings or default_settings
        if strategy is None:
            strategy = TemplateMatchingStrategy(
                threshold=settings.match_threshold,
                scale_steps=settings.match_scale_steps,
            )
        self.ctx = VerbContext(
            capture=capture,
            input=input,
            templates=templates,
            strategy=strategy,
            settings=settings,
            clock=clock,
            text_backend=text_backend,
        )
        self.logger = logger.bind(module="VerbEngine")

    @classmethod
    def for_desktop(
        cls,
        templates_dir: Optional[str] = None,
        text_backend: Optional[TextAnalysisBackend] = None,
    ) -> "VerbEngine":
        """Engine wired to the real display (mss) and input devices (pyautogui)."""
        from ..capture.mss_capture import MssCapture
        from ..desktop.pyautogui_input import PyAutoGuiInput

        registry = TemplateRegistry()
        registry.load_dir(templates_dir or default_settings.templates_dir)
        return cls(MssCapture(), PyAutoGuiInput(), registry, text_backend=text_backend)

    @property
    def settings(self) -> Settings:
        return self.ctx.settings

    def _validate(self, request: VerbRequest) -> None:
        # unknown names are script errors: fail before touching the screen
        if request.template is not None:
            self.ctx.templates.get(request.template)
        seek = getattr(request.payload, "seek_template", None)
        if seek is not None:
            self.ctx.templates.get(seek)

    def execute(self, request: VerbRequest) -> VerbResult:
        self._validate(request)
        verb = VERB_TYPES[request.kind](self.ctx, request)
        self.logger.info(f"{request.kind.value} {request.target_label}")
        try:
            return verb.run()
        except (CaptureError, InputError) as e:
            self.logger.error(f"{request.kind.value} {request.target_label} aborted: {e}")
            raise

    def close(self) -> None:
        self.ctx.capture.close()


__all__ = ["VERB_TYPES", "VerbEngine"]
