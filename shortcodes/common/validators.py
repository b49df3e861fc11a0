"""Validation utilities for the short code service."""

from typing import Tuple

from ..generator import ShortCodeGenerator


def is_valid_value(value: str) -> Tuple[bool, str]:
    """Validate a value submitted for encoding.

    Args:
        value: The value to validate

    Returns:
        Tuple of (is_valid, error_message)
    """
    if not isinstance(value, str):
        return False, "value must be a string"

    if not value:
        return False, "value is empty"

    # Lone surrogates survive JSON decoding but cannot be stored
    try:
        value.encode("utf-8")
    except UnicodeEncodeError:
        return False, "value is not valid UTF-8"

    return True, ""


def is_valid_short_code(
    code: str,
    min_length: int = ShortCodeGenerator.MIN_LENGTH,
    max_length: int = ShortCodeGenerator.MAX_LENGTH,
) -> Tuple[bool, str]:
    """Validate a short code submitted for decoding.

    Args:
        code: The short code to validate
        min_length: Minimum length for short code
        max_length: Maximum length for short code

    Returns:
        Tuple of (is_valid, error_message)
    """
    if not isinstance(code, str):
        return False, "code must be a string"

    if not min_length <= len(code) <= max_length:
        return False, f"code length must be {min_length}..={max_length}"

    if not ShortCodeGenerator.is_valid_format(code):
        return False, "code contains invalid characters"

    return True, ""
