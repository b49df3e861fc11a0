"""Abstract base classes for mapping store implementations."""

from abc import ABC, abstractmethod
from typing import AsyncContextManager, Optional

from .models import MappingRow


class MappingTransaction(ABC):
    """Operations available inside one atomic unit of work."""

    @abstractmethod
    async def insert_if_absent(self, value: str) -> None:
        """Insert a new code-less row for value.

        Does nothing (and does not fail) if a row for value already exists.

        Args:
            value: The value to insert
        """
        pass

    @abstractmethod
    async def get_by_value(self, value: str) -> Optional[MappingRow]:
        """Read the row for value as seen by this transaction.

        Args:
            value: The value to lookup

        Returns:
            The mapping row or None if not found
        """
        pass

    @abstractmethod
    async def set_code_if_unset(self, identity: int, code: str) -> bool:
        """Assign code to the row, but only if its code is still unset.

        Args:
            identity: Identity of the row to update
            code: Candidate short code

        Returns:
            True if this call assigned the code, False if another
            transaction already did
        """
        pass

    @abstractmethod
    async def get_code(self, identity: int) -> Optional[str]:
        """Re-read the code currently stored for identity.

        Args:
            identity: Identity of the row

        Returns:
            The stored code or None
        """
        pass


class MappingStoreBase(ABC):
    """Abstract base class for mapping store operations."""

    def __init__(self, db_config: str):
        """Initialize store.

        Args:
            db_config: Database connection string
        """
        self.db_config = db_config

    @abstractmethod
    async def initialize(self) -> None:
        """Create the mappings table and index if they don't exist."""
        pass

    @abstractmethod
    def transaction(self) -> AsyncContextManager[MappingTransaction]:
        """Open an atomic unit of work.

        The transaction commits when the block exits normally and rolls
        back on any exception, including cancellation.

        Usage:
            async with store.transaction() as tx:
                ...
        """
        pass

    @abstractmethod
    async def get_by_value(self, value: str) -> Optional[MappingRow]:
        """Get the committed row for value.

        Args:
            value: The value to lookup

        Returns:
            The mapping row or None if not found
        """
        pass

    @abstractmethod
    async def get_by_code(self, code: str) -> Optional[str]:
        """Get the value a code is assigned to.

        Args:
            code: The short code to lookup

        Returns:
            The original value if found, None otherwise
        """
        pass

    @abstractmethod
    async def health_check(self) -> bool:
        """Check if database is healthy.

        Returns:
            True if healthy, False otherwise
        """
        pass

    @abstractmethod
    async def close(self) -> None:
        """Close database connections."""
        pass
