"""Process-local memoization for lookups."""

import time
from typing import Protocol


class Cache(Protocol):
    """Key-value cache used by services."""

    def get(self, key: str) -> object | None:
        """Return the stored value, or None when absent or expired."""

    def set(self, key: str, value: object, ttl_seconds: float | None = None) -> None:
        """Store a value; without a TTL it lives as long as the process."""


class InMemoryCache(Cache):
    """Dictionary-backed cache; expiry is checked lazily on read."""

    def __init__(self) -> None:
        # key -> (value, monotonic deadline or None)
        self._entries: dict[str, tuple[object, float | None]] = {}

    def __len__(self) -> int:
        return len(self._entries)

    def get(self, key: str) -> object | None:
        try:
            value, deadline = self._entries[key]
        except KeyError:
            return None
        if deadline is not None and time.monotonic() >= deadline:
            del self._entries[key]
            return None
        return value

    def set(self, key: str, value: object, ttl_seconds: float | None = None) -> None:
        deadline = None if ttl_seconds is None else time.monotonic() + ttl_seconds
        self._entries[key] = (value, deadline)
