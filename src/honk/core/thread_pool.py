"""
Shared thread pool

The engine itself is single-threaded. The pool only exists so that blocking
collaborator calls (OCR, condition evaluation) can be bounded by a timeout
without stalling the script forever.
"""
from __future__ import annotations

import os
import threading
from concurrent.futures import ThreadPoolExecutor
from concurrent.futures import TimeoutError as FutureTimeoutError
from typing import Optional

from .logger import logger

_compute_pool: Optional[ThreadPoolExecutor] = None
_pool_lock = threading.Lock()


class CallTimeout(TimeoutError):
    """A bounded call did not return in time."""


def _auto_compute_pool_size() -> int:
    """max(2, cpu_count // 2), capped at 8."""
    cpu = os.cpu_count() or 4
    return min(max(2, cpu // 2), 8)


def get_compute_pool() -> ThreadPoolExecutor:
    """Return the lazily created compute pool (OCR and other CPU-bound calls)."""
    global _compute_pool
    with _pool_lock:
        if _compute_pool is None:
            size = _auto_compute_pool_size()
            _compute_pool = ThreadPoolExecutor(
                max_workers=size,
                thread_name_prefix="honk-compute",
            )
            logger.debug("Compute pool created: max_workers={}", size)
        return _compute_pool


def run_with_timeout(func, *args, timeout: float):
    """Run ``func(*args)`` on the compute pool and block for at most ``timeout`` seconds.

    Exceptions raised by ``func`` are re-raised in the caller. On timeout the
    worker is left to finish in the background and ``CallTimeout`` is raised.
    """
    future = get_compute_pool().submit(func, *args)
    try:
        return future.result(timeout=timeout)
    except FutureTimeoutError as e:
        future.cancel()
        raise CallTimeout(f"{getattr(func, '__name__', func)!s} did not finish within {timeout:.1f}s") from e


def shutdown_pools() -> None:
    """Shut the pools down (called at process exit and between tests)."""
    global _compute_pool
    with _pool_lock:
        if _compute_pool:
            _compute_pool.shutdown(wait=False)
            _compute_pool = None
    logger.debug("Thread pools shut down")
