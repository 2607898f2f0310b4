"""Logging setup: console at INFO (or DEBUG), plus a full TRACE log file."""

import sys
from typing import Optional

from loguru import logger

CONSOLE_FORMAT = (
    "<green>{time:HH:mm:ss}</green> | "
    "<level>{level: <8}</level> | "
    "<level>{message}</level>"
)
FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level: <8} | {name}:{function}:{line} | {message}"


def setup_logger(verbose: bool = False, trace_file: Optional[str] = "trace.log"):
    """
    Configure the global loguru logger.

    Args:
        verbose: Show DEBUG output on the console
        trace_file: Path of the TRACE-level log file, or None to skip it

    Returns:
        The configured logger
    """
    logger.remove()
    logger.add(sys.stderr, level="DEBUG" if verbose else "INFO", format=CONSOLE_FORMAT)
    if trace_file:
        logger.add(trace_file, level="TRACE", format=FILE_FORMAT, mode="w", encoding="utf-8", enqueue=True)
    return logger
