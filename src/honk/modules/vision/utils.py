"""
Vision utilities: image loading/decoding and pixel helpers.
"""
from __future__ import annotations

import os
from typing import Union

import cv2  # type: ignore
import numpy as np

from .zone import Zone


ImageLike = Union[str, bytes, np.ndarray]


def load_image(img: ImageLike) -> np.ndarray:
    """Load an image into a BGR numpy array.

    - str: treated as a file path and loaded via cv2.imread
    - bytes: decoded via cv2.imdecode
    - np.ndarray: normalized to 3-channel BGR (BGRA and gray are converted)
    """
    if isinstance(img, np.ndarray):
        return to_bgr(img)
    if isinstance(img, (bytes, bytearray)):
        arr = np.frombuffer(img, dtype=np.uint8)
        mat = cv2.imdecode(arr, cv2.IMREAD_COLOR)
        if mat is None:
            raise ValueError("Failed to decode image bytes")
        return mat
    if isinstance(img, str):
        if not os.path.isfile(img):
            raise FileNotFoundError(f"Image file not found: {img}")
        mat = cv2.imread(img, cv2.IMREAD_COLOR)
        if mat is None:
            raise ValueError(f"Failed to load image from path: {img}")
        return mat
    raise TypeError(f"Unsupported image type: {type(img)}")


def to_bgr(img: np.ndarray) -> np.ndarray:
    """Normalize gray / BGRA arrays to uint8 BGR."""
    if img.dtype != np.uint8:
        img = np.clip(img, 0, 255).astype(np.uint8)
    if img.ndim == 2:
        return cv2.cvtColor(img, cv2.COLOR_GRAY2BGR)
    if img.shape[2] == 4:
        return cv2.cvtColor(img, cv2.COLOR_BGRA2BGR)
    return img


def to_gray(img: np.ndarray) -> np.ndarray:
    """Convert BGR image to grayscale (no-op if already single-channel)."""
    if img.ndim == 2:
        return img
    return cv2.cvtColor(img, cv2.COLOR_BGR2GRAY)


def crop(img: np.ndarray, roi: Zone) -> np.ndarray:
    """Crop ``roi`` (in the image's own pixel coordinates) out of ``img``.

    Raises IndexError if the roi does not fit inside the image.
    """
    h, w = img.shape[:2]
    if roi.x < 0 or roi.y < 0 or roi.right > w or roi.bottom > h:
        raise IndexError(f"{roi} is out of bounds for image {w}x{h}")
    return img[roi.y : roi.bottom, roi.x : roi.right]


def resize_scaled(img: np.ndarray, scale: float) -> np.ndarray:
    """Resize by a uniform factor, area interpolation when shrinking."""
    if scale == 1.0:
        return img
    h, w = img.shape[:2]
    new_w, new_h = max(1, int(round(w * scale))), max(1, int(round(h * scale)))
    interp = cv2.INTER_AREA if scale < 1.0 else cv2.INTER_LINEAR
    return cv2.resize(img, (new_w, new_h), interpolation=interp)


__all__ = [
    "ImageLike",
    "load_image",
    "to_bgr",
    "to_gray",
    "crop",
    "resize_scaled",
]
