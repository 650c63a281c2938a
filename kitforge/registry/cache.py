"""In-process TTL cache and single-flight call coalescing."""

from __future__ import annotations

import asyncio
import time
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any, Generic, TypeVar

T = TypeVar("T")


@dataclass
class CacheEntry(Generic[T]):
    key: str
    value: T
    inserted_at: float


class TTLCache(Generic[T]):
    """Mapping whose entries disappear *ttl* seconds after insertion.

    Expiry is lazy: a stale entry is dropped the next time it is read.  There
    is no size bound and no manual invalidation.  Writes to the same key are
    last-writer-wins.
    """

    def __init__(self, ttl: float, clock: Callable[[], float] = time.monotonic) -> None:
        if ttl <= 0:
            raise ValueError("ttl must be positive")
        self.ttl = ttl
        self._clock = clock
        self._entries: dict[str, CacheEntry[T]] = {}

    def get(self, key: str) -> T | None:
        entry = self._entries.get(key)
        if entry is None:
            return None
        if self._clock() - entry.inserted_at > self.ttl:
            del self._entries[key]
            return None
        return entry.value

    def set(self, key: str, value: T) -> None:
        self._entries[key] = CacheEntry(key, value, self._clock())

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and self.get(key) is not None

    def __len__(self) -> int:
        return len(self._entries)


class SingleFlight:
    """Run at most one call per key at a time.

    Callers arriving while a call for the same key is in flight await the
    same result (or exception) instead of starting their own.  A caller
    being cancelled does not cancel the shared call.
    """

    def __init__(self) -> None:
        self._calls: dict[str, asyncio.Future[Any]] = {}

    @property
    def in_flight(self) -> int:
        return len(self._calls)

    async def do(self, key: str, fn: Callable[[], Awaitable[T]]) -> T:
        call = self._calls.get(key)
        if call is None:
            call = asyncio.ensure_future(fn())
            self._calls[key] = call
            call.add_done_callback(lambda done, key=key: self._forget(key, done))
        return await asyncio.shield(call)

    def _forget(self, key: str, done: asyncio.Future[Any]) -> None:
        if self._calls.get(key) is done:
            del self._calls[key]
        if not done.cancelled():
            # Mark retrieved; every waiter still receives the exception.
            done.exception()
