"""
Region differ: decide whether a zone changed between two snapshots.

Noise handling happens at two levels: a per-channel pixel tolerance absorbs
anti-aliasing and compression jitter, and the noise threshold (fraction of
changed pixels) absorbs small localized changes such as a blinking caret.
"""
from __future__ import annotations

import zlib
from dataclasses import dataclass
from typing import Optional

import cv2  # type: ignore
import numpy as np

from .snapshot import Snapshot
from .utils import to_gray
from .zone import Zone


class IncomparableSnapshots(ValueError):
    """Snapshots of different zones were compared."""


@dataclass(frozen=True)
class DiffResult:
    changed: bool
    magnitude: float  # fraction of compared pixels that differ, in [0, 1]
    changed_box: Optional[Zone] = None  # screen coordinates; None if nothing differs
    zone: Optional[Zone] = None


def diff_snapshots(
    a: Snapshot,
    b: Snapshot,
    *,
    noise_threshold: float,
    pixel_tolerance: int = 0,
    zone: Optional[Zone] = None,
) -> DiffResult:
    """Compare two snapshots of the same zone.

    Args:
        a, b: snapshots; must share the same Zone
        noise_threshold: changed only if magnitude strictly exceeds this
        pixel_tolerance: per-channel absolute delta treated as unchanged
        zone: optional sub-zone (screen coordinates) to restrict the comparison to

    Raises:
        IncomparableSnapshots: zones differ or ``zone`` is not inside them
    """
    if a.zone != b.zone:
        raise IncomparableSnapshots(f"Cannot compare {a.zone} with {b.zone}")
    if noise_threshold < 0:
        raise ValueError("noise_threshold must be >= 0")

    compared = a.zone
    pa, pb = a.pixels, b.pixels
    if zone is not None and zone != a.zone:
        if not a.zone.contains(zone):
            raise IncomparableSnapshots(f"{zone} is not inside snapshot {a.zone}")
        pa, pb = a.sub(zone).pixels, b.sub(zone).pixels
        compared = zone

    delta = cv2.absdiff(pa, pb)
    if delta.ndim == 3:
        delta = delta.max(axis=2)
    mask = (delta > pixel_tolerance).astype(np.uint8)
    count = int(cv2.countNonZero(mask))
    magnitude = count / float(compared.area)

    box = None
    if count:
        x, y, w, h = cv2.boundingRect(mask)
        box = Zone(compared.x + x, compared.y + y, w, h)

    return DiffResult(
        changed=magnitude > noise_threshold,
        magnitude=magnitude,
        changed_box=box,
        zone=compared,
    )


def compute_frame_fingerprint(pixels: np.ndarray, *, width: int = 64, height: int = 36) -> int:
    """CRC32 of a quantized thumbnail, for cheap same-frame detection."""
    gray = to_gray(pixels)
    small = cv2.resize(gray, (width, height), interpolation=cv2.INTER_AREA)
    quantized = (small // 8).astype("uint8")
    return zlib.crc32(memoryview(np.ascontiguousarray(quantized)).tobytes()) & 0xFFFFFFFF


__all__ = [
    "IncomparableSnapshots",
    "DiffResult",
    "diff_snapshots",
    "compute_frame_fingerprint",
]
