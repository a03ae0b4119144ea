"""
Cache primitives for provider lookups.

Features:
- Content-addressed keys: MD5 of the normalised (destination, nationality) pair
- Fixed 24 hour freshness window
- Immutable records, replaced wholesale when stale
"""

import hashlib
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any

CACHE_TTL = timedelta(hours=24)


def utcnow() -> datetime:
    """Naive UTC timestamp, the form stored in the database."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def derive_cache_key(destination: str, nationality: str) -> str:
    """Generate a cache key from the two country codes (case-insensitive)."""
    data = f"{destination.lower()}-{nationality.lower()}"
    return hashlib.md5(data.encode()).hexdigest()


def is_fresh(stored_at: datetime, now: datetime, ttl: timedelta = CACHE_TTL) -> bool:
    """Check whether a record stored at ``stored_at`` is still inside its TTL."""
    return now - stored_at < ttl


@dataclass(frozen=True)
class CacheRecord:
    """A stored lookup result."""

    key: str
    payload: Any  # list of VisaOption dicts, or the provider's raw JSON object
    stored_at: datetime

    @property
    def hash(self) -> str:
        return self.key

    def is_fresh(self, now: datetime | None = None, ttl: timedelta = CACHE_TTL) -> bool:
        return is_fresh(self.stored_at, now or utcnow(), ttl)
