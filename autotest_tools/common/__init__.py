"""
================================================================================
Autotest Tools Common Utilities
================================================================================

Shared logging setup and small helpers used by the UI suite and the test
runner.

Exports:
    - init_logger: Initialize loguru with the standard console/file sinks
    - mask_secret: Mask a sensitive value for logs and reports
    - ensure_directory: Create a directory if missing

Usage:
    from autotest_tools.common import init_logger, mask_secret

    init_logger(level="DEBUG", log_file="logs/ui_tests.log")
    logger.info(f"Logging in as {email} / {mask_secret(password)}")

================================================================================
"""

import os
import sys
from typing import Optional

from loguru import logger


# ============================================================
# Logging Setup
# ============================================================

DEFAULT_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> | "
    "<level>{message}</level>"
)

_logger_initialized = False


def init_logger(
    level: Optional[str] = None,
    format_string: Optional[str] = None,
    log_file: Optional[str] = None,
    rotation: str = "10 MB",
    retention: str = "7 days",
    force: bool = False,
) -> None:
    """
    Initializes the loguru logger with standard settings.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR). Defaults to $LOG_LEVEL or INFO.
        format_string: Log format string. Uses default if not provided.
        log_file: Optional file path to write logs to.
        rotation: File rotation policy passed to loguru
        retention: File retention policy passed to loguru
        force: Re-initialize even if already configured

    Example:
        init_logger()  # Use defaults
        init_logger(level="DEBUG", log_file="logs/ui_tests.log")
    """
    global _logger_initialized

    if _logger_initialized and not force:
        return

    # Remove default handler
    logger.remove()

    level = (level or os.getenv("LOG_LEVEL", "INFO")).upper()
    format_string = format_string or DEFAULT_FORMAT

    logger.add(
        sys.stderr,
        format=format_string,
        level=level,
        colorize=True,
    )

    if log_file:
        log_dir = os.path.dirname(log_file)
        if log_dir:
            ensure_directory(log_dir)

        logger.add(
            log_file,
            format=format_string,
            level=level,
            rotation=rotation,
            retention=retention,
        )

    _logger_initialized = True
    logger.debug("Logger initialized successfully")


# ============================================================
# Common Utilities
# ============================================================

def mask_secret(value: Optional[str], visible: int = 0) -> str:
    """
    Mask a sensitive value.

    Args:
        value: Value to mask
        visible: Number of leading characters to keep readable

    Returns:
        Masked representation ("" stays "")
    """
    if not value:
        return ""
    keep = value[:visible] if 0 < visible < len(value) else ""
    return f"{keep}***MASKED***"


def ensure_directory(path: str) -> str:
    """
    Ensures a directory exists, creating it if necessary.

    Args:
        path: Directory path

    Returns:
        The path (for chaining)
    """
    os.makedirs(path, exist_ok=True)
    return path


# Export public API
__all__ = [
    "init_logger",
    "mask_secret",
    "ensure_directory",
]
