"""Utility exports."""

from .helpers import (
    collapse_whitespace,
    count_letters,
    normalize_unicode,
    strip_control_chars,
    truncate,
)
from .logger import get_logger

__all__ = [
    "get_logger",
    "normalize_unicode",
    "strip_control_chars",
    "collapse_whitespace",
    "count_letters",
    "truncate",
]
