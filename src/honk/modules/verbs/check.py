"""
Check verb: read the text in a zone and evaluate a script condition on it.
"""
from __future__ import annotations

from typing import Optional

from ...core.constants import Outcome, VerbKind, VerbState
from ...core.thread_pool import CallTimeout, run_with_timeout
from ..ocr.backend import TextBackendError
from ..vision.zone import Zone
from .base import BaseVerb
from .types import VerbResult


class CheckVerb(BaseVerb):
    """Resolve the read zone, capture it, hand it to the text-analysis backend.

    Zone resolution, first that applies:
      1. ``relative_zone`` offset from the matched template's top-left corner
      2. the explicit ``check_zone``
      3. the target's default observation zone (match box plus margin)

    Backend calls are bounded by ``check_timeout``; a timeout is a TIMED_OUT
    outcome, any other backend failure propagates.
    """

    kind = VerbKind.CHECK

    @property
    def timeout(self) -> float:
        # locating and reading are budgeted separately by default
        if self.request.timeout is not None:
            return self.request.timeout
        return self.settings.verb_timeout + self.settings.check_timeout

    def _read_zone(self) -> Optional[Zone]:
        if self.request.template is None and self.request.point is None:
            return self.request.check_zone

        point, box = self._resolve_target()
        if point is None:
            return None
        relative = self.request.payload.relative_zone
        if relative is not None and self.match is not None:
            x, y = self.match.location
            return relative.translate(x, y).clip_to(self._screen())
        return self._check_zone(point, box)

    def execute(self) -> VerbResult:
        backend = self.ctx.text_backend
        if backend is None:
            raise TextBackendError("Check verb needs a text-analysis backend")

        zone = self._read_zone()
        if zone is None:
            return self._not_found()
        self.zone = zone

        self._enter(VerbState.OBSERVING)
        snap = self._capture(zone)
        condition = self.request.payload.condition
        try:
            text = run_with_timeout(backend.extract_text, snap, timeout=self._call_budget())
            verdict = None
            if condition is not None:
                verdict = bool(
                    run_with_timeout(backend.evaluate_condition, text, condition, timeout=self._call_budget())
                )
        except CallTimeout as e:
            return self._result(Outcome.TIMED_OUT, str(e))

        self.steps = 1
        self.logger.info(f"Read {text!r} from {zone}" + (f", {condition!r} -> {verdict}" if condition else ""))
        return self._result(Outcome.SUCCEEDED, "", value=text, verdict=verdict)

    def _call_budget(self) -> float:
        return max(0.0, min(self.settings.check_timeout, self.deadline.remaining))
