"""Common utilities for the short code service."""

from .validators import is_valid_value, is_valid_short_code
from .logging_config import setup_logging

__all__ = [
    "is_valid_value",
    "is_valid_short_code",
    "setup_logging",
]
