"""Utils module."""

from .helpers import ensure_dir, get_file_size_mb, next_timestamp
from .logger import setup_logger
from .parsing import TextParser
from .paths import MediaPathGenerator
from .retry import retry_policy

__all__ = [
    'ensure_dir',
    'get_file_size_mb',
    'next_timestamp',
    'setup_logger',
    'TextParser',
    'MediaPathGenerator',
    'retry_policy',
]
