"""
Click verb: press the target, then confirm the check zone reacted.
"""
from __future__ import annotations

from ...core.constants import Outcome, VerbKind, VerbState
from .base import BaseVerb
from .policies import Decision
from .types import VerbResult


class ClickVerb(BaseVerb):
    """Locate -> move pointer -> snapshot -> click -> watch the check zone.

    The pointer is parked on the target before the baseline snapshot so a
    hover highlight does not count as the click's effect.
    """

    kind = VerbKind.CLICK

    def execute(self) -> VerbResult:
        point, box = self._resolve_target()
        if point is None:
            return self._not_found()

        zone = self._check_zone(point, box)
        self.zone = zone
        payload = self.request.payload

        self._enter(VerbState.ACTING)
        self.ctx.input.move_to(*point)
        before = self._capture(zone)
        self.ctx.input.click(*point, button=payload.button, clicks=2 if payload.double else 1)
        self.steps = 1

        decision, diff = self._watch(zone, before, self.verify_policy)
        if decision == Decision.CHANGED:
            return self._result(Outcome.SUCCEEDED, f"zone changed (magnitude={diff.magnitude:.4f})")
        return self._result(
            Outcome.NO_STATE_CHANGE,
            f"clicked {point}, zone unchanged after {self.settings.verify_window:.2f}s",
        )
