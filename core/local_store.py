# core/local_store.py

"""
Process-local key/value stores backing the cross-surface session mirror.

Each surface instance keeps its own stores; nothing here talks to the
network. For multi-instance deployments, any object with the same
get / set / delete methods can be passed to SessionMirror instead.
"""

import time
from typing import Callable, Optional, Protocol
from threading import Lock


class LocalStore(Protocol):
    def get(self, key: str) -> Optional[str]:
        ...

    def set(self, key: str, value: str, ttl_seconds: Optional[float] = None) -> None:
        ...

    def delete(self, key: str) -> None:
        ...


class StoreEntry:
    """A stored string with an optional expiry time (epoch seconds)."""

    def __init__(self, value: str, expires_at: Optional[float]):
        self.value = value
        self.expires_at = expires_at

    def is_expired(self, now: float) -> bool:
        return self.expires_at is not None and now > self.expires_at


class MemoryStore:
    """
    Simple in-memory string store with TTL support.

    Thread-safe for concurrent access. Expired entries are purged on
    every get / set, so abandoned keys never outlive their TTL by more
    than one store operation.
    """

    def __init__(self, clock: Callable[[], float] = time.time):
        self._data: dict[str, StoreEntry] = {}
        self._lock = Lock()
        self._clock = clock

    def get(self, key: str) -> Optional[str]:
        with self._lock:
            self._purge_expired()
            entry = self._data.get(key)
            return entry.value if entry else None

    def set(self, key: str, value: str, ttl_seconds: Optional[float] = None) -> None:
        with self._lock:
            self._purge_expired()
            expires_at = self._clock() + ttl_seconds if ttl_seconds is not None else None
            self._data[key] = StoreEntry(value, expires_at)

    def delete(self, key: str) -> None:
        with self._lock:
            self._data.pop(key, None)

    def cleanup_expired(self):
        """Remove all expired entries."""
        with self._lock:
            self._purge_expired()

    def _purge_expired(self):
        now = self._clock()
        expired_keys = [key for key, entry in self._data.items() if entry.is_expired(now)]
        for key in expired_keys:
            del self._data[key]

    def clear(self):
        """Remove every entry."""
        with self._lock:
            self._data.clear()

    def size(self) -> int:
        with self._lock:
            return len(self._data)


# Process-wide instances: one durable, one scoped per browser tab / surface session
_durable_store = MemoryStore()
_scoped_store = MemoryStore()


def get_durable_store() -> MemoryStore:
    return _durable_store


def get_scoped_store() -> MemoryStore:
    return _scoped_store


def clear_local_stores():
    """Clear both process-wide stores."""
    _durable_store.clear()
    _scoped_store.clear()
