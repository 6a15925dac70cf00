"""
Screen sampler
"""
from .base import BaseCapture, CaptureError
from .mss_capture import MssCapture

__all__ = ["BaseCapture", "CaptureError", "MssCapture"]
