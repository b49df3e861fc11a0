"""Data models for the short code service."""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class MappingRow:
    """Represents a value/code mapping in the database.

    code stays None until the one-time assignment commits.
    """

    identity: int
    value: str
    code: Optional[str] = None
    created_at: Optional[datetime] = None
