"""
Text-analysis collaborator boundary used by the Check verb.

The engine only needs two calls: pull text out of a snapshot, and decide
whether that text satisfies a script condition. Anything smarter (LLM-based
judgement, table models) belongs behind this same interface.
"""
from __future__ import annotations

from typing import List, Optional, Protocol, Tuple

from ...core.config import settings
from ...core.logger import logger
from ..vision.snapshot import Snapshot
from .condition import evaluate


class TextBackendError(RuntimeError):
    """The text-analysis backend failed."""


class TextAnalysisBackend(Protocol):
    def extract_text(self, snapshot: Snapshot) -> str:
        ...

    def evaluate_condition(self, text: str, condition: str) -> bool:
        ...


class PaddleTextBackend:
    """OCR through PaddleOCR; conditions through the built-in expression evaluator."""

    def __init__(self, min_confidence: Optional[float] = None) -> None:
        self.min_confidence = settings.ocr_min_confidence if min_confidence is None else min_confidence
        self.logger = logger.bind(module="PaddleTextBackend")

    def extract_text(self, snapshot: Snapshot) -> str:
        from .engine import acquire_ocr

        engine, lock = acquire_ocr()
        try:
            with lock:
                results = engine.predict(snapshot.pixels)
        except Exception as e:
            raise TextBackendError(f"OCR failed on {snapshot.zone}: {e}") from e

        lines: List[Tuple[int, int, str]] = []
        if results:
            result = results[0]
            for text, confidence, poly in zip(
                result["rec_texts"], result["rec_scores"], result["rec_polys"]
            ):
                if confidence < self.min_confidence:
                    continue
                top = int(min(p[1] for p in poly))
                left = int(min(p[0] for p in poly))
                lines.append((top, left, text))

        # reading order: top-to-bottom, then left-to-right
        lines.sort()
        text = " ".join(t for _, _, t in lines)
        self.logger.debug(f"OCR {snapshot.zone}: {text!r}")
        return text

    def evaluate_condition(self, text: str, condition: str) -> bool:
        return evaluate(text, condition)


__all__ = ["TextBackendError", "TextAnalysisBackend", "PaddleTextBackend"]
