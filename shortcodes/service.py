"""Business logic service for short code assignment."""

import logging
from typing import Dict, Optional

from .common.validators import is_valid_short_code, is_valid_value
from .database.base import MappingStoreBase
from .database.cache import RedisCache
from .errors import InvalidInputError, NotFoundError, StoreError
from .generator import ShortCodeGenerator


class ShortCodeService:
    """Service layer mapping values to short codes and back.

    The service keeps no state between calls. Every cross-request
    guarantee (one row per value, one code per row) comes from the
    store's transactions and unique constraints.
    """

    def __init__(
        self,
        store: MappingStoreBase,
        cache: Optional[RedisCache] = None,
        short_code_generator: Optional[ShortCodeGenerator] = None,
        logger: Optional[logging.Logger] = None,
    ):
        """Initialize short code service.

        Args:
            store: Mapping store instance
            cache: Optional cache instance
            short_code_generator: Optional short code generator
            logger: Optional logger
        """
        self.store = store
        self.cache = cache
        self.generator = short_code_generator or ShortCodeGenerator()
        self.logger = logger or logging.getLogger(__name__)

    async def encode(self, value: str) -> str:
        """Return the short code for value, assigning one on first use.

        Args:
            value: Non-empty value to encode

        Returns:
            The short code assigned to value

        Raises:
            InvalidInputError: If value is empty
            CodeSpaceExhaustedError: If no code is left for a new value
            StoreError: If the store fails
        """
        is_valid, error = is_valid_value(value)
        if not is_valid:
            raise InvalidInputError(error)

        # Fast path: already assigned
        existing = await self.store.get_by_value(value)
        if existing is not None and existing.code is not None:
            return existing.code

        async with self.store.transaction() as tx:
            await tx.insert_if_absent(value)

            row = await tx.get_by_value(value)
            if row is None:
                raise StoreError("mapping row missing after insert")

            if row.code is not None:
                code = row.code
            else:
                candidate = self.generator.from_identity(row.identity)
                if not await tx.set_code_if_unset(row.identity, candidate):
                    self.logger.debug(f"Code for identity {row.identity} was assigned concurrently")

                # Always trust the stored code over our candidate
                code = await tx.get_code(row.identity)
                if code is None:
                    raise StoreError(f"code missing for identity {row.identity} after assignment")

        await self._cache_assignment(code, value)

        self.logger.info(f"Assigned short code: {code} (identity {row.identity})")
        return code

    async def decode(self, code: str) -> str:
        """Return the value a short code was assigned to.

        Args:
            code: Short code to lookup

        Returns:
            The original value

        Raises:
            InvalidInputError: If code is malformed
            NotFoundError: If no mapping has this code
            StoreError: If the store fails
        """
        is_valid, error = is_valid_short_code(code)
        if not is_valid:
            raise InvalidInputError(error)

        if self.cache:
            cached_value = await self.cache.get(self.cache.get_cache_key(code))
            if cached_value is not None:
                self.logger.debug(f"Cache hit for {code}")
                return cached_value

        value = await self.store.get_by_code(code)
        if value is None:
            self.logger.debug(f"Short code not found: {code}")
            raise NotFoundError("not found")

        await self._cache_assignment(code, value)

        self.logger.debug(f"Decoded short code: {code}")
        return value

    async def health_check(self) -> Dict[str, bool]:
        """Perform health check.

        Returns:
            Dictionary with health status
        """
        db_healthy = await self.store.health_check()

        cache_healthy = True
        if self.cache and self.cache.enabled:
            cache_healthy = await self.cache.ping()

        return {
            "database": db_healthy,
            "cache": cache_healthy,
            "overall": db_healthy and cache_healthy,
        }

    async def _cache_assignment(self, code: str, value: str) -> None:
        if self.cache:
            await self.cache.set(self.cache.get_cache_key(code), value)

    async def close(self) -> None:
        """Close service connections."""
        await self.store.close()
        if self.cache:
            await self.cache.close()
