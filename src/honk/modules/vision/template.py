"""
Template matching.

Features:
- Best match above threshold with deterministic tie-breaking (top-most,
  then left-most location wins among equal scores)
- Multi-scale search within a template's declared size tolerance
- Pluggable location strategies (normalized cross-correlation, squared difference)

Locations returned by the strategies are screen-absolute.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Protocol, Tuple

import cv2  # type: ignore
import numpy as np

from .snapshot import Snapshot
from .utils import load_image, resize_scaled
from .zone import Point, Zone


DEFAULT_THRESHOLD = 0.85
_TIE_EPSILON = 1e-4


@dataclass(frozen=True)
class Template:
    """Immutable named image patch.

    Attributes:
        name: identifier scripts use to reference the template
        image: BGR pixels (read-only)
        threshold: per-template confidence threshold, None uses the engine default
        size_tolerance: relative size deviation allowed when matching (0.1 = +-10%)
        search_zone: default search area, None means the full screen
    """

    name: str
    image: np.ndarray = field(repr=False)
    threshold: Optional[float] = None
    size_tolerance: float = 0.0
    search_zone: Optional[Zone] = None

    def __post_init__(self) -> None:
        img = load_image(self.image)
        if img is not self.image or img.flags.writeable:
            img = img.copy()
            img.setflags(write=False)
        object.__setattr__(self, "image", img)
        if self.threshold is not None and not 0.0 <= self.threshold <= 1.0:
            raise ValueError(f"Template {self.name}: threshold must be in [0, 1]")
        if not 0.0 <= self.size_tolerance < 1.0:
            raise ValueError(f"Template {self.name}: size_tolerance must be in [0, 1)")

    @property
    def size(self) -> Tuple[int, int]:
        h, w = self.image.shape[:2]
        return (w, h)


@dataclass(frozen=True)
class MatchResult:
    """Located template in screen coordinates.

    Confidence is in [0, 1]; results below threshold are never produced.
    """

    template: str
    location: Point
    w: int
    h: int
    confidence: float
    search_zone: Zone
    scale: float = 1.0

    @property
    def box(self) -> Zone:
        return Zone(self.location[0], self.location[1], self.w, self.h)

    @property
    def center(self) -> Point:
        return self.box.center


def _ensure_sizes(big: np.ndarray, small: np.ndarray) -> None:
    hb, wb = big.shape[:2]
    hs, ws = small.shape[:2]
    if hs > hb or ws > wb:
        raise ValueError(f"Template larger than image: template {ws}x{hs}, image {wb}x{hb}")


def _is_flat(template: np.ndarray) -> bool:
    """True when every channel holds a single value across the patch."""
    channels = template.shape[2] if template.ndim == 3 else 1
    return int(np.ptp(template.reshape(-1, channels), axis=0).max()) == 0


# a flat patch scores 0 once its RMS colour distance reaches this many levels
FLAT_COLOR_RANGE = 64.0


def flat_score_map(image: np.ndarray, template: np.ndarray) -> np.ndarray:
    """Similarity of a single-colour template: 1 - RMS pixel distance / FLAT_COLOR_RANGE."""
    _ensure_sizes(image, template)
    sq = cv2.matchTemplate(image.astype(np.float32), template.astype(np.float32), cv2.TM_SQDIFF)
    rms = np.sqrt(np.maximum(sq, 0.0) / template.size)
    return np.clip(1.0 - rms / FLAT_COLOR_RANGE, 0.0, 1.0)


def score_map(image: np.ndarray, template: np.ndarray, method: int = cv2.TM_CCOEFF_NORMED) -> np.ndarray:
    """Similarity of every template placement, mapped to [0, 1] with higher = better.

    Normalized metrics are undefined for a flat template (zero variance or
    zero energy), so those are scored by absolute colour distance instead.
    """
    _ensure_sizes(image, template)
    if _is_flat(template):
        return flat_score_map(image, template)
    res = cv2.matchTemplate(image, template, method)
    res = np.nan_to_num(res, nan=0.0, posinf=0.0, neginf=0.0)
    if method in (cv2.TM_SQDIFF, cv2.TM_SQDIFF_NORMED):
        # lower is better
        res = 1.0 - res
    return np.clip(res, 0.0, 1.0)


def best_location(scores: np.ndarray) -> Tuple[int, int, float]:
    """Highest score and its (x, y); ties go to the top-most, then left-most cell."""
    best = float(scores.max())
    # argwhere walks rows first, so the first hit is the smallest (y, x)
    y, x = np.argwhere(scores >= best - _TIE_EPSILON)[0]
    return int(x), int(y), best


def scale_factors(tolerance: float, steps: int) -> List[float]:
    """Scales to try, 1.0 first, then alternating below/above out to +-tolerance."""
    scales = [1.0]
    if tolerance <= 0 or steps <= 0:
        return scales
    for i in range(1, steps + 1):
        delta = tolerance * i / steps
        scales.extend([1.0 - delta, 1.0 + delta])
    return scales


class LocationStrategy(Protocol):
    """Resolves a template to a screen location; None means not found."""

    def locate(
        self,
        template: Template,
        snapshot: Snapshot,
        *,
        search_zone: Optional[Zone] = None,
        threshold: Optional[float] = None,
    ) -> Optional[MatchResult]:
        ...


class TemplateMatchingStrategy:
    """Normalized cross-correlation over sliding windows of the search zone."""

    method = cv2.TM_CCOEFF_NORMED

    def __init__(self, threshold: float = DEFAULT_THRESHOLD, scale_steps: int = 2) -> None:
        self.threshold = threshold
        self.scale_steps = scale_steps

    def locate(
        self,
        template: Template,
        snapshot: Snapshot,
        *,
        search_zone: Optional[Zone] = None,
        threshold: Optional[float] = None,
    ) -> Optional[MatchResult]:
        zone = search_zone or template.search_zone or snapshot.zone
        zone = zone.clip_to(snapshot.zone)
        area = snapshot.sub(zone).pixels
        thr = threshold if threshold is not None else (
            template.threshold if template.threshold is not None else self.threshold
        )

        best: Optional[Tuple[float, int, int, int, int, float]] = None
        for scale in scale_factors(template.size_tolerance, self.scale_steps):
            tpl = resize_scaled(template.image, scale)
            th, tw = tpl.shape[:2]
            if th > area.shape[0] or tw > area.shape[1]:
                continue
            x, y, score = best_location(score_map(area, tpl, self.method))
            candidate = (score, x, y, tw, th, scale)
            if best is None or score > best[0] + _TIE_EPSILON or (
                abs(score - best[0]) <= _TIE_EPSILON and (y, x) < (best[2], best[1])
            ):
                best = candidate

        if best is None or best[0] < thr:
            return None
        score, x, y, tw, th, scale = best
        return MatchResult(
            template=template.name,
            location=(zone.x + x, zone.y + y),
            w=tw,
            h=th,
            confidence=score,
            search_zone=zone,
            scale=scale,
        )


class SquaredDifferenceStrategy(TemplateMatchingStrategy):
    """Bitmap-needle style search: normalized squared pixel difference."""

    method = cv2.TM_SQDIFF_NORMED


__all__ = [
    "DEFAULT_THRESHOLD",
    "Template",
    "MatchResult",
    "score_map",
    "flat_score_map",
    "best_location",
    "scale_factors",
    "LocationStrategy",
    "TemplateMatchingStrategy",
    "SquaredDifferenceStrategy",
]
