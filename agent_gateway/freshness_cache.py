"""
Single-slot cache for a value that carries its own absolute expiry.

The slot is served while it still has more than `margin_seconds` of
validity left; otherwise the caller-supplied refresh coroutine is awaited
and, on success, the (value, expiry) pair is replaced in one assignment.
A failed refresh never touches the stored entry and never hands out the
stale value.
"""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Awaitable, Callable, Generic, Optional, Tuple, TypeVar

T = TypeVar("T")

RefreshResult = Optional[Tuple[T, int]]


@dataclass(frozen=True)
class CachedEntry(Generic[T]):
    value: T
    expires_at: int  # unix seconds


class FreshnessCache(Generic[T]):
    def __init__(self, clock: Callable[[], float] = time.time) -> None:
        self._clock = clock
        self._entry: Optional[CachedEntry[T]] = None

    @property
    def current(self) -> Optional[CachedEntry[T]]:
        return self._entry

    def clear(self) -> None:
        self._entry = None

    def is_fresh(self, margin_seconds: int) -> bool:
        entry = self._entry
        if entry is None:
            return False
        return entry.expires_at > int(self._clock()) + margin_seconds

    async def get_or_refresh(
        self,
        margin_seconds: int,
        refresh_fn: Callable[[], Awaitable[RefreshResult]],
    ) -> Optional[T]:
        """
        Return the cached value if fresh beyond the margin, else refresh.

        `refresh_fn` returns `(value, ttl_seconds)` or None on failure.
        Concurrent callers may refresh more than once; last writer wins.
        """
        if self.is_fresh(margin_seconds):
            return self._entry.value  # type: ignore[union-attr]

        # Expiry is measured from before the exchange.
        now = int(self._clock())
        result = await refresh_fn()
        if result is None:
            return None

        value, ttl_seconds = result
        self._entry = CachedEntry(value=value, expires_at=now + int(ttl_seconds))
        return value


__all__ = ["CachedEntry", "FreshnessCache"]
