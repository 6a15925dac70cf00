"""
Scroll verb: wheel-scroll a viewport until its content stops moving.
"""
from __future__ import annotations

from typing import Optional

from ...core.constants import Outcome, VerbKind, VerbState
from ..vision.snapshot import Snapshot
from ..vision.template import MatchResult, Template
from ..vision.zone import Zone
from .base import BaseVerb
from .policies import Decision, ScrollConvergence, ScrollPolicy
from .types import VerbResult


class ScrollVerb(BaseVerb):
    """Repeat scroll -> settle -> compare until the viewport is stable.

    The viewport is resolved once, from the explicit check zone or from the
    target, and reused for every step. With a seek template the verb stops
    as soon as that template appears inside the viewport.
    """

    kind = VerbKind.SCROLL

    def _viewport(self) -> Optional[Zone]:
        if self.request.template is None and self.request.point is None:
            return self.request.check_zone
        point, box = self._resolve_target()
        if point is None:
            return None
        return self._check_zone(point, box)

    def _seek(self, template: Template, snap: Snapshot) -> Optional[MatchResult]:
        match = self.ctx.strategy.locate(template, snap, search_zone=snap.zone)
        if match is not None:
            self.match = match
        return match

    def execute(self) -> VerbResult:
        payload = self.request.payload
        viewport = self._viewport()
        if viewport is None:
            return self._not_found()
        self.zone = viewport

        seek = self._template(payload.seek_template) if payload.seek_template else None
        clicks = payload.clicks or self.settings.scroll_clicks
        policy = ScrollPolicy(
            stable_observations=self.settings.scroll_stable_observations,
            max_steps=payload.max_steps or self.settings.scroll_max_steps,
        )
        convergence = ScrollConvergence(policy)
        anchor = viewport.center

        self._enter(VerbState.ACTING)
        self.ctx.input.move_to(*anchor)
        before = self._capture(viewport)
        if seek is not None and self._seek(seek, before):
            return self._result(Outcome.SUCCEEDED, f"{seek.name} already visible")

        while True:
            if self.deadline.expired():
                return self._result(Outcome.TIMED_OUT, f"viewport still moving after {convergence.steps} steps")

            self._enter(VerbState.ACTING)
            self.ctx.input.scroll(*anchor, direction=payload.direction, clicks=clicks)
            decision, diff = self._watch(viewport, before, self.verify_policy)
            changed = decision == Decision.CHANGED
            if not changed and self.deadline.expired():
                # the window was cut short, an unchanged sample proves nothing
                self.steps = convergence.steps + 1
                return self._result(Outcome.TIMED_OUT, f"deadline passed during step {self.steps}")

            verdict = convergence.record(changed)
            self.steps = convergence.steps
            before = self.last_snapshot
            self.logger.debug(
                f"Step {convergence.steps}: changed={changed} magnitude={diff.magnitude:.4f} "
                f"stable={convergence.stable}"
            )

            if seek is not None and changed and self._seek(seek, before):
                return self._result(Outcome.SUCCEEDED, f"{seek.name} visible after {self.steps} steps")

            if verdict == Decision.CONVERGED:
                if seek is not None:
                    return self._result(
                        Outcome.TARGET_NOT_FOUND,
                        f"reached the end of the list without seeing {seek.name}",
                    )
                return self._result(Outcome.CONVERGED, f"viewport stable after {self.steps} steps")
            if verdict == Decision.EXHAUSTED:
                return self._result(
                    Outcome.TIMED_OUT,
                    f"viewport still moving after {policy.max_steps} steps",
                )
