"""Utility functions."""

import time
from pathlib import Path
from threading import Lock
from typing import Union

_timestamp_lock = Lock()
_last_timestamp = 0


def next_timestamp() -> str:
    """
    Nanosecond wall-clock timestamp, strictly increasing within the process.

    Used only as the note sort/dedup key.
    """
    global _last_timestamp
    with _timestamp_lock:
        _last_timestamp = max(time.time_ns(), _last_timestamp + 1)
        return str(_last_timestamp)


def ensure_dir(path: Union[str, Path]) -> None:
    """Ensure directory exists."""
    Path(path).mkdir(parents=True, exist_ok=True)


def get_file_size_mb(path: str) -> float:
    """Get file size in megabytes."""
    if not Path(path).exists():
        return 0.0
    return Path(path).stat().st_size / (1024 * 1024)
