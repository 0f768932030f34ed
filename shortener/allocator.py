"""Identifier allocation backed by an atomic counter.

Flow Diagram — IdAllocator.next()
=================================
::
    ┌─────────────┐
    │  next()     │
    └──────┬──────┘
           ▼
    ┌─────────────┐
    │ INCR url_id │
    │ (Redis)     │
    └──────┬──────┘
    OK?    │
    ┌──────┴────┐
    │ NO        │ YES
    ▼           ▼
┌──────────┐  ┌─────────┐
│ raise    │  │ return  │
│Allocation│  │ new id  │
│ Failure  │  │         │
└──────────┘  └─────────┘

Key Behaviours
===============
- One INCR per allocation; uniqueness under concurrent callers comes from the
  counter store, not from any in-process lock or module-level state.
- A failed increment consumes nothing on this side and is reported as
  ``AllocationFailure``.
- Values are strictly increasing for the lifetime of the counter key but may
  have gaps (ids abandoned after a failed write are never handed out again).
"""

from typing import Protocol

import redis.asyncio as redis
from redis.exceptions import RedisError

from shortener.encoder import MAX_IDENTIFIER
from shortener.errors import AllocationFailure

__all__ = ["AtomicCounter", "IdAllocator", "RedisCounter"]


class AtomicCounter(Protocol):
    """Store capable of an atomic increment-and-return."""

    async def incr(self, key: str) -> int: ...


class RedisCounter:
    """``AtomicCounter`` backed by Redis ``INCR``."""

    def __init__(self, client: redis.Redis):
        self._client = client

    async def incr(self, key: str) -> int:
        return int(await self._client.incr(key))


class IdAllocator:
    """Hands out unique, strictly increasing 64-bit identifiers."""

    def __init__(self, counter: AtomicCounter, key: str = "url_id"):
        self._counter = counter
        self._key = key

    @property
    def key(self) -> str:
        return self._key

    async def next(self) -> int:
        """Allocate the next identifier.

        Returns:
            int: A value never returned before for this counter key

        Raises:
            AllocationFailure: If the counter store is unreachable or returns
                a value outside the unsigned 64-bit range
        """
        try:
            value = await self._counter.incr(self._key)
        except (RedisError, OSError) as exc:
            raise AllocationFailure(f"Counter increment failed for '{self._key}': {exc}") from exc

        if value < 0 or value > MAX_IDENTIFIER:
            raise AllocationFailure(f"Counter '{self._key}' returned out-of-range value {value}")
        return value
