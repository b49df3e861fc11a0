"""Short code generation utilities."""

import string

from .errors import CodeSpaceExhaustedError, InvalidInputError


class ShortCodeGenerator:
    """Turn durable mapping identities into short codes."""

    # Base62 characters: digits, then lowercase, then uppercase
    BASE62_CHARS = string.digits + string.ascii_lowercase + string.ascii_uppercase

    MIN_LENGTH = 2
    MAX_LENGTH = 5

    @property
    def max_identity(self) -> int:
        """Largest identity that still fits in MAX_LENGTH characters."""
        return len(self.BASE62_CHARS) ** self.MAX_LENGTH - 1

    def from_identity(self, identity: int) -> str:
        """Generate short code from a mapping identity.

        The identity is rendered in base62, most significant digit first,
        and left-padded with the zero digit to MIN_LENGTH.

        Args:
            identity: Positive identity assigned by the store

        Returns:
            Short code of MIN_LENGTH..MAX_LENGTH characters

        Raises:
            InvalidInputError: If identity is zero or negative
            CodeSpaceExhaustedError: If identity needs more than MAX_LENGTH characters
        """
        if isinstance(identity, bool) or not isinstance(identity, int) or identity <= 0:
            raise InvalidInputError("invalid id")

        code = self._int_to_base62(identity)

        if len(code) > self.MAX_LENGTH:
            raise CodeSpaceExhaustedError()

        # Pad with zeros if needed
        if len(code) < self.MIN_LENGTH:
            code = code.rjust(self.MIN_LENGTH, self.BASE62_CHARS[0])

        return code

    def _int_to_base62(self, num: int) -> str:
        """Convert integer to base62 string.

        Args:
            num: Integer to convert

        Returns:
            Base62 string
        """
        if num == 0:
            return self.BASE62_CHARS[0]

        result = []
        base = len(self.BASE62_CHARS)

        while num > 0:
            remainder = num % base
            result.append(self.BASE62_CHARS[remainder])
            num = num // base

        return ''.join(reversed(result))

    @staticmethod
    def is_valid_format(code: str) -> bool:
        """Check if code only uses the base62 alphabet.

        Args:
            code: Code to validate

        Returns:
            True if valid format
        """
        return all(c in ShortCodeGenerator.BASE62_CHARS for c in code)
