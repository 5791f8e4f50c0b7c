"""In-memory summary cache with a fixed time-to-live.

Entries live for the lifetime of the process only. Expired entries are
purged by `SummaryCache.sweep`, which the summarizer runs at the start of
every request; `get` never returns an entry whose age has reached the TTL
even if no sweep ran in between.

The cache key is `hash_text(text)`, a 32-bit rolling hash. It is cheap and
deterministic but not collision resistant: two different texts can share a
key. That is acceptable for a five minute cache of LLM summaries and should
not be relied on anywhere else.
"""
from __future__ import annotations
from dataclasses import dataclass
from typing import Callable, Dict, Optional
import logging
import time

logger = logging.getLogger(__name__)

DEFAULT_TTL_SECONDS = 5 * 60

_BASE36 = "0123456789abcdefghijklmnopqrstuvwxyz"


def _to_base36(n: int) -> str:
    if n == 0:
        return "0"
    sign = "-" if n < 0 else ""
    n = abs(n)
    digits = []
    while n:
        n, rem = divmod(n, 36)
        digits.append(_BASE36[rem])
    return sign + "".join(reversed(digits))


def hash_text(text: str) -> str:
    """Return the cache key for `text`.

    `h = h * 31 + unit` over the UTF-16 code units of the text, wrapped to a
    signed 32-bit integer and rendered in base 36.
    """
    raw = text.encode("utf-16-le", "surrogatepass")
    h = 0
    for i in range(0, len(raw), 2):
        unit = raw[i] | (raw[i + 1] << 8)
        h = (h * 31 + unit) & 0xFFFFFFFF
    if h & 0x80000000:
        h -= 0x100000000
    return _to_base36(h)


@dataclass
class CacheEntry:
    """A cached summary and the time it was stored."""

    summary: str
    created_at: float

    def age(self, now: float) -> float:
        return now - self.created_at


class SummaryCache:
    """Mapping of text hash to summary, owning its TTL policy.

    Args:
        ttl_seconds: Maximum age of a usable entry.
        clock: Returns the current time in seconds; injectable for tests.
    """

    def __init__(self, ttl_seconds: float = DEFAULT_TTL_SECONDS,
                 clock: Callable[[], float] = time.time):
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._entries: Dict[str, CacheEntry] = {}

    def sweep(self) -> int:
        """Delete entries older than the TTL and return how many were removed."""
        now = self._clock()
        expired = [k for k, e in self._entries.items() if e.age(now) > self.ttl_seconds]
        for key in expired:
            del self._entries[key]
        if expired:
            logger.debug("Purged %d expired summaries", len(expired))
        return len(expired)

    def get(self, key: str) -> Optional[str]:
        entry = self._entries.get(key)
        if entry is None:
            return None
        if entry.age(self._clock()) >= self.ttl_seconds:
            return None
        return entry.summary

    def set(self, key: str, summary: str) -> None:
        self._entries[key] = CacheEntry(summary=summary, created_at=self._clock())

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: object) -> bool:
        return key in self._entries
