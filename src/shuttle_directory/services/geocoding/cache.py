"""In-memory geocode cache with in-flight lookup deduplication."""

from __future__ import annotations

import threading
from concurrent.futures import Future
from typing import Iterable, Union

from ...models.domain import GeoPoint


class _Unresolvable:
    """Marker stored for keys the geocoder could not resolve."""

    _instance: "_Unresolvable | None" = None

    def __new__(cls) -> "_Unresolvable":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "UNRESOLVABLE"

    def __bool__(self) -> bool:
        return False


UNRESOLVABLE = _Unresolvable()

CacheEntry = Union[GeoPoint, _Unresolvable]


class GeocodeCache:
    """Write-once mapping from location key to coordinates.

    Entries never expire. A key that is being looked up is tracked as a
    pending ``Future`` so concurrent callers share the same external call:
    exactly one caller becomes the owner (``claim`` returns ``True``) and
    must call ``resolve`` once the lookup finishes.
    """

    def __init__(self) -> None:
        self._entries: dict[str, CacheEntry] = {}
        self._pending: dict[str, Future] = {}
        self._lock = threading.Lock()

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._entries

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def get(self, key: str) -> CacheEntry | None:
        """Return the stored entry, or ``None`` if the key was never resolved."""
        with self._lock:
            return self._entries.get(key)

    def partition(self, keys: Iterable[str]) -> tuple[dict[str, CacheEntry], list[str]]:
        """Split keys into already-cached entries and keys that still need a lookup."""
        cached: dict[str, CacheEntry] = {}
        missing: list[str] = []
        with self._lock:
            for key in keys:
                if key in self._entries:
                    cached[key] = self._entries[key]
                elif key not in missing:
                    missing.append(key)
        return cached, missing

    def claim(self, key: str) -> tuple[Future, bool]:
        """Return a future for ``key`` and whether the caller owns the lookup."""
        with self._lock:
            if key in self._entries:
                done: Future = Future()
                done.set_result(self._entries[key])
                return done, False
            pending = self._pending.get(key)
            if pending is not None:
                return pending, False
            future: Future = Future()
            self._pending[key] = future
            return future, True

    def resolve(self, key: str, value: CacheEntry) -> CacheEntry:
        """Store the lookup outcome and wake every waiter. First write wins."""
        with self._lock:
            stored = self._entries.setdefault(key, value)
            future = self._pending.pop(key, None)
        if future is not None and not future.done():
            future.set_result(stored)
        return stored

    def stats(self) -> dict[str, int]:
        with self._lock:
            unresolvable = sum(1 for value in self._entries.values() if value is UNRESOLVABLE)
            return {
                "entries": len(self._entries),
                "resolved": len(self._entries) - unresolvable,
                "unresolvable": unresolvable,
                "pending": len(self._pending),
            }
