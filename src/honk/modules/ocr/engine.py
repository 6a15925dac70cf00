"""PaddleOCR engine management (lazy, thread-safe singleton)."""
from __future__ import annotations

import os
import threading
from pathlib import Path

from ...core.config import settings
from ...core.logger import logger

_ocr_instance = None
_ocr_lock = threading.Lock()
# PaddleOCR predict() is not thread-safe
_ocr_infer_lock = threading.Lock()


def _pin_model_dir() -> None:
    """Keep PaddleOCR from downloading models when a local model dir is configured."""
    if not settings.ocr_model_dir:
        return
    model_dir = str(Path(settings.ocr_model_dir).resolve())
    os.environ.setdefault("PADDLEX_HOME", model_dir)
    os.environ.setdefault("PPOCR_HOME", model_dir)
    os.environ.setdefault("PADDLE_PDX_DISABLE_MODEL_SOURCE_CHECK", "True")


def get_ocr_engine():
    """Return the PaddleOCR singleton.

    The first call initializes the engine (several seconds); later calls
    return the cached instance. Double-checked locking.
    """
    global _ocr_instance
    if _ocr_instance is not None:
        return _ocr_instance

    with _ocr_lock:
        if _ocr_instance is not None:
            return _ocr_instance

        _pin_model_dir()
        logger.info("Initializing PaddleOCR (lang={})...", settings.ocr_lang)
        try:
            from paddleocr import PaddleOCR  # noqa: delay import
        except ImportError as e:
            logger.error(f"PaddleOCR import failed, install the 'ocr' extra: {e}")
            raise

        _ocr_instance = PaddleOCR(
            use_textline_orientation=False,
            use_doc_orientation_classify=False,
            use_doc_unwarping=False,
            lang=settings.ocr_lang,
            device="cpu",
        )
        logger.info("PaddleOCR ready")
        return _ocr_instance


def acquire_ocr():
    """Return (engine, inference lock)."""
    return get_ocr_engine(), _ocr_infer_lock
