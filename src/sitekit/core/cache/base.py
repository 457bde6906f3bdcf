"""Cache contract shared by every backend."""

from abc import ABC, abstractmethod


class CacheClient(ABC):
    """Async key/value cache with hash-field addressing.

    Backends differ in their failure policy: the file backend logs and
    swallows I/O failures, the Redis backend propagates transport errors.
    Reads of malformed hash values are logged and treated as misses by both.
    """

    @abstractmethod
    async def get(self, key: str) -> str | None:
        """Return the value at ``key``, or None if absent or expired."""

    @abstractmethod
    async def get_item(self, key: str, field: str) -> str | None:
        """Return one field of the hash stored at ``key``."""

    @abstractmethod
    async def get_items(self, key: str) -> dict[str, str] | None:
        """Return every field of the hash stored at ``key``."""

    @abstractmethod
    async def set(self, key: str, value: str, expires: int | None = None) -> None:
        """Store ``value`` at ``key``.

        Args:
            key: Cache key
            value: Value to store
            expires: TTL in seconds; only positive integers set an expiry,
                anything else stores a non-expiring value
        """

    @abstractmethod
    async def set_item(self, key: str, field: str, value: str) -> None:
        """Set one field of the hash stored at ``key``."""

    @abstractmethod
    async def delete(self, key: str) -> None:
        """Remove ``key``. Absent keys are ignored."""


def ttl_seconds(expires: int | None) -> int | None:
    """Normalize a TTL argument: positive ints pass, anything else is None."""
    if isinstance(expires, int) and not isinstance(expires, bool) and expires > 0:
        return expires
    return None
