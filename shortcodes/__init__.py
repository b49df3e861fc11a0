"""Core business logic for the short code service."""

from .errors import (
    CodeSpaceExhaustedError,
    InvalidInputError,
    NotFoundError,
    ShortCodeError,
    StoreError,
)
from .generator import ShortCodeGenerator
from .service import ShortCodeService

__all__ = [
    "CodeSpaceExhaustedError",
    "InvalidInputError",
    "NotFoundError",
    "ShortCodeError",
    "StoreError",
    "ShortCodeGenerator",
    "ShortCodeService",
]

__version__ = "1.0.0"
