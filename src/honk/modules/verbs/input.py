"""
Input verb: focus a field and type literal text into it.
"""
from __future__ import annotations

from ...core.constants import Outcome, VerbKind, VerbState
from .base import BaseVerb
from .policies import Decision
from .types import VerbResult


class InputVerb(BaseVerb):
    """Locate the field, click it for focus, type, optionally submit.

    Without an explicit check zone the keystrokes themselves are the
    postcondition and the verb succeeds once they are sent. With one, the
    zone must change within the verification window.
    """

    kind = VerbKind.INPUT

    def execute(self) -> VerbResult:
        payload = self.request.payload
        point, box = self._resolve_target()
        if point is None:
            return self._not_found()

        watch_zone = self.request.check_zone
        self.zone = watch_zone or self._default_zone(point, box)

        self._enter(VerbState.ACTING)
        self.ctx.input.click(*point)
        before = self._capture(watch_zone) if watch_zone is not None else None

        self.ctx.input.type_text(payload.text)
        if payload.submit:
            self.ctx.input.press_key(self.settings.submit_key)
        self.steps = 1
        self.logger.debug(f"Typed {len(payload.text)} chars into {self.request.target_label}")

        if before is None:
            return self._result(Outcome.SUCCEEDED, f"typed {len(payload.text)} chars")

        decision, diff = self._watch(watch_zone, before, self.verify_policy)
        if decision == Decision.CHANGED:
            return self._result(Outcome.SUCCEEDED, f"zone changed (magnitude={diff.magnitude:.4f})")
        return self._result(
            Outcome.NO_STATE_CHANGE,
            f"typed {len(payload.text)} chars, zone unchanged after {self.settings.verify_window:.2f}s",
        )
