"""Typed exceptions for the short code service."""


class ShortCodeError(Exception):
    """Base class for all short code service errors."""


class InvalidInputError(ShortCodeError, ValueError):
    """Client error: empty value, malformed code or non-positive identity."""


class NotFoundError(ShortCodeError):
    """A well-formed code has no mapping."""


class CodeSpaceExhaustedError(ShortCodeError):
    """Identity no longer fits in the maximum code length."""

    def __init__(self, message: str = "short code space exhausted (max 5 base62 chars)"):
        super().__init__(message)


class StoreError(ShortCodeError):
    """Persistent storage failure (connectivity, unexpected constraint violation)."""
