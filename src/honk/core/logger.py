"""
Logging setup
"""
import sys
from pathlib import Path

from loguru import logger

from .config import settings

CONSOLE_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | <level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan> - <level>{message}</level>"
)
FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level: <8} | {name}:{function}:{line} - {message}"

_configured = False


def _console_stream():
    """Return a writable console stream, or None when running windowed."""
    for stream in (sys.stderr, sys.stdout, sys.__stderr__, sys.__stdout__):
        if stream is not None and hasattr(stream, "write"):
            return stream
    return None


def setup_logger(force: bool = False):
    """Configure loguru sinks from settings.

    Repeated calls are no-ops unless ``force`` is set; a forced call replaces
    every sink so messages are never written twice.
    """
    global _configured
    if _configured and not force:
        return logger

    logger.remove()

    console_missing = False
    if settings.log_console_enabled:
        stream = _console_stream()
        if stream is None:
            console_missing = True
        else:
            logger.add(stream, level=settings.log_level, format=CONSOLE_FORMAT)

    if settings.log_file_enabled:
        log_dir = Path(settings.log_path)
        log_dir.mkdir(parents=True, exist_ok=True)

        logger.add(
            log_dir / "honk_{time:YYYY-MM-DD}.log",
            level=settings.log_level,
            format=FILE_FORMAT,
            rotation="00:00",
            retention=f"{settings.log_retention_days} days",
            encoding="utf-8",
        )

        # Errors kept twice as long for audit
        logger.add(
            log_dir / "error_{time:YYYY-MM-DD}.log",
            level="ERROR",
            format=FILE_FORMAT,
            rotation="00:00",
            retention=f"{settings.log_retention_days * 2} days",
            encoding="utf-8",
        )

    if console_missing:
        logger.warning("No usable console stream found, logging to files only")

    _configured = True
    return logger


logger = setup_logger()
