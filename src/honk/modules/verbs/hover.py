"""
Hover verb: rest the pointer on a target and wait for a reaction.
"""
from __future__ import annotations

from ...core.constants import Outcome, VerbKind, VerbState
from .base import BaseVerb
from .policies import Decision, WatchPolicy
from .types import VerbResult


class HoverVerb(BaseVerb):
    """Snapshot the observation zone, move onto the target, poll until change or timeout.

    The observation window is whatever the verb deadline has left after
    locating, so a hover never reports TIMED_OUT before its timeout.
    """

    kind = VerbKind.HOVER

    @property
    def hover_interval(self) -> float:
        if self.request.poll_interval is not None:
            return self.request.poll_interval
        return self.settings.hover_poll

    def execute(self) -> VerbResult:
        point, box = self._resolve_target()
        if point is None:
            return self._not_found()

        zone = self._check_zone(point, box)
        self.zone = zone
        before = self._capture(zone)

        self._enter(VerbState.ACTING)
        self.ctx.input.move_to(*point)
        self.steps = 1

        policy = WatchPolicy(window=self.deadline.remaining, interval=self.hover_interval)
        decision, diff = self._watch(zone, before, policy)
        if decision == Decision.CHANGED:
            return self._result(Outcome.SUCCEEDED, f"zone reacted (magnitude={diff.magnitude:.4f})")
        return self._result(Outcome.TIMED_OUT, f"no reaction within {self.timeout:.2f}s")
