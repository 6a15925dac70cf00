"""
Verb base class: shared locate / observe machinery for every verb.
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Optional, Tuple

from ...core.config import Settings
from ...core.constants import FAILURE_OUTCOMES, Outcome, RectAnchor, VerbKind, VerbState
from ...core.logger import logger
from ...core.timeutils import Clock, Deadline
from ..capture.base import BaseCapture
from ..desktop.base import BaseInput
from ..ocr.backend import TextAnalysisBackend
from ..templates.registry import TemplateRegistry
from ..vision.debug import save_match_heatmap, save_zone_overlay
from ..vision.diff import DiffResult, compute_frame_fingerprint, diff_snapshots
from ..vision.snapshot import Snapshot
from ..vision.template import LocationStrategy, MatchResult, Template
from ..vision.zone import Point, Zone, ZoneError
from .policies import ChangeWatch, Decision, WatchPolicy
from .types import VerbRequest, VerbResult


@dataclass
class VerbContext:
    """Collaborators shared by every verb of a script run."""

    capture: BaseCapture
    input: BaseInput
    templates: TemplateRegistry
    strategy: LocationStrategy
    settings: Settings
    clock: Clock
    text_backend: Optional[TextAnalysisBackend] = None


class BaseVerb(ABC):
    """One verb invocation: Locating -> Acting -> Observing -> Deciding -> Terminal.

    Subclasses implement ``execute``; ``run`` wraps it with the deadline,
    logging and failure diagnostics. Capture and input errors propagate.
    """

    kind: VerbKind

    def __init__(self, ctx: VerbContext, request: VerbRequest):
        self.ctx = ctx
        self.request = request
        self.settings = ctx.settings
        self.clock = ctx.clock
        self.state: Optional[VerbState] = None
        self.deadline: Optional[Deadline] = None
        self.zone: Optional[Zone] = None
        self.last_snapshot: Optional[Snapshot] = None
        self.match: Optional[MatchResult] = None
        self.steps = 0
        self.logger = logger.bind(module="Verb", verb=self.kind.value, target=request.target_label)

    # ── tunables (request override, else settings) ──

    @property
    def timeout(self) -> float:
        return self.request.timeout if self.request.timeout is not None else self.settings.verb_timeout

    @property
    def poll_interval(self) -> float:
        if self.request.poll_interval is not None:
            return self.request.poll_interval
        return self.settings.poll_interval

    @property
    def noise_threshold(self) -> float:
        if self.request.noise_threshold is not None:
            return self.request.noise_threshold
        return self.settings.diff_noise_threshold

    @property
    def pixel_tolerance(self) -> int:
        if self.request.pixel_tolerance is not None:
            return self.request.pixel_tolerance
        return self.settings.diff_pixel_tolerance

    @property
    def verify_policy(self) -> WatchPolicy:
        return WatchPolicy(window=self.settings.verify_window, interval=self.poll_interval)

    # ── lifecycle ──

    def run(self) -> VerbResult:
        check_zone = self.request.check_zone
        if check_zone is not None and not self._screen().contains(check_zone):
            # reject before any input
            raise ZoneError(f"Check zone {check_zone} is outside screen {self._screen()}")
        self.deadline = Deadline(self.clock, self.timeout)
        self.logger.debug(f"Start (timeout={self.timeout:.2f}s)")
        result = self.execute()
        self._enter(VerbState.TERMINAL)

        result.elapsed = self.deadline.elapsed
        result.steps = result.steps or self.steps
        if result.zone is None:
            result.zone = self.zone
        if result.snapshot is None:
            result.snapshot = self.last_snapshot
        if result.match is None:
            result.match = self.match

        if result.outcome in FAILURE_OUTCOMES:
            self.logger.warning(
                f"{result.outcome.value} after {result.elapsed:.2f}s: {result.detail} (zone={result.zone})"
            )
            if self.settings.save_debug_images:
                self._save_debug(result)
        else:
            self.logger.info(f"{result.outcome.value} after {result.elapsed:.2f}s, steps={result.steps}")
        return result

    @abstractmethod
    def execute(self) -> VerbResult:
        """Drive the verb to a terminal outcome."""

    def _enter(self, state: VerbState) -> None:
        if state != self.state:
            self.logger.debug(f"{self.state.value if self.state else '-'} -> {state.value}")
        self.state = state

    def _result(self, outcome: Outcome, detail: str = "", **kwargs) -> VerbResult:
        self._enter(VerbState.DECIDING)
        return VerbResult(kind=self.kind, outcome=outcome, detail=detail, **kwargs)

    # ── sampling ──

    def _capture(self, zone: Optional[Zone] = None) -> Snapshot:
        snap = self.ctx.capture.capture(zone)
        self.last_snapshot = snap
        return snap

    def _diff(self, before: Snapshot, after: Snapshot) -> DiffResult:
        return diff_snapshots(
            before,
            after,
            noise_threshold=self.noise_threshold,
            pixel_tolerance=self.pixel_tolerance,
        )

    def _screen(self) -> Zone:
        return self.ctx.capture.screen_zone()

    # ── locating ──

    def _template(self, name: str) -> Template:
        return self.ctx.templates.get(name)

    def _locate(self, template: Template, search_zone: Optional[Zone] = None) -> Optional[MatchResult]:
        """Poll the screen until ``template`` is found or the verb deadline passes.

        An unchanged frame is re-matched only every (skip_max + 1) polls; the
        poll at the deadline is always matched.
        """
        zone = search_zone or self.request.search_zone or template.search_zone
        skip_max = self.settings.locate_unchanged_skip_max
        last_fp: Optional[int] = None
        miss_streak = 0

        while True:
            snap = self._capture(zone)
            fp = compute_frame_fingerprint(snap.pixels)
            same_frame = fp == last_fp
            last_fp = fp
            final = self.deadline.expired()
            if same_frame and not final and skip_max > 0 and miss_streak % (skip_max + 1) != 0:
                miss_streak += 1
            else:
                match = self.ctx.strategy.locate(template, snap, search_zone=zone)
                if match is not None:
                    self.logger.debug(
                        f"Found {template.name} at {match.location} (score={match.confidence:.3f})"
                    )
                    self.match = match
                    return match
                miss_streak += 1

            if final:
                return None
            self.deadline.sleep(self.poll_interval)

    def _resolve_target(self) -> Tuple[Optional[Point], Optional[Zone]]:
        """Locate the request target.

        Returns:
            (action point, target box); (None, None) if the template was not found.
            Point targets have no box.
        """
        self._enter(VerbState.LOCATING)
        if self.request.point is not None:
            point = (int(self.request.point[0]), int(self.request.point[1]))
            if not self._screen().contains_point(point):
                raise ZoneError(f"Target point {point} is outside screen {self._screen()}")
            return point, None

        match = self._locate(self._template(self.request.template))
        if match is None:
            return None, None
        return match.center, match.box

    def _default_zone(self, point: Point, box: Optional[Zone]) -> Zone:
        """Observation zone around a target: match box plus margin, or a square around a point."""
        screen = self._screen()
        if box is not None:
            return box.expand(self.settings.check_zone_margin, screen)
        size = self.settings.absolute_check_size
        return Zone.from_anchor(point, size, size, RectAnchor.CENTER, screen)

    def _check_zone(self, point: Point, box: Optional[Zone]) -> Zone:
        if self.request.check_zone is not None:
            return self.request.check_zone
        return self._default_zone(point, box)

    def _not_found(self) -> VerbResult:
        return self._result(
            Outcome.TARGET_NOT_FOUND,
            f"{self.request.target_label} not found within {self.timeout:.2f}s",
            zone=self.last_snapshot.zone if self.last_snapshot else None,
        )

    # ── observing ──

    def _watch(self, zone: Zone, before: Snapshot, policy: WatchPolicy) -> Tuple[Decision, DiffResult]:
        """Poll ``zone`` against ``before`` until it changes, the window closes, or the deadline passes."""
        self._enter(VerbState.OBSERVING)
        watch = ChangeWatch(policy, self.clock.now())
        while True:
            after = self._capture(zone)
            diff = self._diff(before, after)
            decision = watch.observe(diff.changed, self.clock.now())
            if decision != Decision.CONTINUE:
                if diff.changed:
                    self.logger.debug(f"Change in {zone}: magnitude={diff.magnitude:.4f} box={diff.changed_box}")
                return decision, diff
            if self.deadline.expired():
                return watch.expire(), diff
            self.deadline.sleep(policy.interval)

    # ── diagnostics ──

    def _save_debug(self, result: VerbResult) -> None:
        snap = result.snapshot
        if snap is None:
            return
        stamp = datetime.now().strftime("%Y%m%d_%H%M%S_%f")
        label = "".join(c if c.isalnum() or c in "-_" else "_" for c in self.request.target_label)
        base = Path(self.settings.debug_dir) / f"{stamp}_{self.kind.value}_{label}"
        try:
            save_zone_overlay(snap, result.zone or snap.zone, base.with_suffix(".png"), match=result.match)
            if result.outcome == Outcome.TARGET_NOT_FOUND and self.request.template:
                save_match_heatmap(
                    snap,
                    self._template(self.request.template),
                    base.with_name(base.name + "_heatmap.png"),
                )
        except OSError as e:
            self.logger.warning(f"Could not write debug image {base}: {e}")
