"""
Convergence policies.

Each looping verb is driven by a small state machine that only sees
observations (changed / not changed, and the current time). The verbs feed
it; the policy decides. This keeps termination rules testable without any
screen or input device.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class Decision(str, Enum):
    CONTINUE = "continue"
    CHANGED = "changed"        # the observed zone responded
    CONVERGED = "converged"    # repeated action stopped having an effect
    TIMED_OUT = "timed_out"    # observation window elapsed without change
    EXHAUSTED = "exhausted"    # step budget used up while still changing


@dataclass(frozen=True)
class WatchPolicy:
    """Poll a zone for change for up to ``window`` seconds, every ``interval`` seconds."""

    window: float
    interval: float

    def __post_init__(self) -> None:
        if self.window < 0:
            raise ValueError("window must be >= 0")
        if self.interval <= 0:
            raise ValueError("interval must be positive")


class ChangeWatch:
    """Waits for the first observed change within a time window.

    Used after a click or keystroke (verification) and by Hover (observation).
    The window is inclusive: an unchanged observation made exactly at the
    window end times out, so a watch never gives up early.
    """

    def __init__(self, policy: WatchPolicy, started: float) -> None:
        self.policy = policy
        self.started = started
        self.observations = 0
        self.decision = Decision.CONTINUE

    def observe(self, changed: bool, now: float) -> Decision:
        if self.decision != Decision.CONTINUE:
            return self.decision
        self.observations += 1
        if changed:
            self.decision = Decision.CHANGED
        elif now - self.started >= self.policy.window:
            self.decision = Decision.TIMED_OUT
        return self.decision

    def expire(self) -> Decision:
        """Force termination (the enclosing verb deadline passed)."""
        if self.decision == Decision.CONTINUE:
            self.decision = Decision.TIMED_OUT
        return self.decision


@dataclass(frozen=True)
class ScrollPolicy:
    """Iterative scroll termination.

    Attributes:
        stable_observations: consecutive no-change steps that mean "end of list"
        max_steps: hard cap on scroll steps
    """

    stable_observations: int = 1
    max_steps: int = 200

    def __post_init__(self) -> None:
        if self.stable_observations < 1:
            raise ValueError("stable_observations must be >= 1")
        if self.max_steps < 1:
            raise ValueError("max_steps must be >= 1")


class ScrollConvergence:
    """Counts steps and consecutive no-change steps; converges on a run of stable steps."""

    def __init__(self, policy: ScrollPolicy) -> None:
        self.policy = policy
        self.steps = 0
        self.stable = 0
        self.decision = Decision.CONTINUE

    def record(self, changed: bool) -> Decision:
        if self.decision != Decision.CONTINUE:
            return self.decision
        self.steps += 1
        self.stable = 0 if changed else self.stable + 1
        if self.stable >= self.policy.stable_observations:
            self.decision = Decision.CONVERGED
        elif self.steps >= self.policy.max_steps:
            self.decision = Decision.EXHAUSTED
        return self.decision


__all__ = [
    "Decision",
    "WatchPolicy",
    "ChangeWatch",
    "ScrollPolicy",
    "ScrollConvergence",
]
