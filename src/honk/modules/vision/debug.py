"""Vision debugging helpers: annotate snapshots for failure diagnosis."""
from __future__ import annotations

from pathlib import Path
from typing import Optional

import cv2  # type: ignore
import numpy as np

from .snapshot import Snapshot
from .template import MatchResult, Template, score_map
from .zone import Zone


def draw_zone(pixels: np.ndarray, zone: Zone, origin: Zone, color=(0, 0, 255), label: str = "") -> np.ndarray:
    """Copy of ``pixels`` with ``zone`` outlined; ``origin`` is the zone ``pixels`` covers."""
    img = pixels.copy()
    local = zone.intersect(origin)
    if local is None:
        return img
    x1, y1 = local.x - origin.x, local.y - origin.y
    x2, y2 = x1 + local.w - 1, y1 + local.h - 1
    cv2.rectangle(img, (x1, y1), (x2, y2), color, thickness=2)
    if label:
        cv2.putText(
            img,
            label,
            (x1 + 2, max(12, y1 - 4)),
            cv2.FONT_HERSHEY_SIMPLEX,
            0.45,
            color,
            thickness=1,
            lineType=cv2.LINE_AA,
        )
    return img


def save_zone_overlay(
    snapshot: Snapshot,
    zone: Zone,
    path: Path,
    *,
    match: Optional[MatchResult] = None,
) -> Path:
    """Write the snapshot with the check zone (red) and match box (green) drawn on it."""
    img = draw_zone(snapshot.pixels, zone, snapshot.zone, label="check")
    if match is not None:
        img = draw_zone(img, match.box, snapshot.zone, color=(0, 255, 0), label=f"{match.confidence:.2f}")
    path.parent.mkdir(parents=True, exist_ok=True)
    cv2.imwrite(str(path), img)
    return path


def save_match_heatmap(snapshot: Snapshot, template: Template, path: Path) -> Optional[Path]:
    """Blend the template score map over the snapshot (JET colormap, hot = similar)."""
    th, tw = template.image.shape[:2]
    if th > snapshot.zone.h or tw > snapshot.zone.w:
        return None
    scores = score_map(snapshot.pixels, template.image)
    heat = cv2.applyColorMap((scores * 255).astype(np.uint8), cv2.COLORMAP_JET)
    full = np.zeros_like(snapshot.pixels)
    full[: heat.shape[0], : heat.shape[1]] = heat
    out = cv2.addWeighted(snapshot.pixels, 0.7, full, 0.3, 0.0)
    path.parent.mkdir(parents=True, exist_ok=True)
    cv2.imwrite(str(path), out)
    return path


__all__ = ["draw_zone", "save_zone_overlay", "save_match_heatmap"]
