"""
In-memory response cache for provider lookups.
Entries expire per kind: weather readings quickly, geocoding much later.
"""

import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, Optional, Tuple

from logging_config import get_logger

logger = get_logger(__name__)


class CacheKind(str, Enum):
    WEATHER = "weather"
    GEOCODE = "geocode"


def _normalize(value: Any) -> Any:
    if isinstance(value, str):
        return value.strip().lower()
    if isinstance(value, float):
        return round(value, 4)
    return value


@dataclass(frozen=True)
class CacheKey:
    """Composite of the operation name and its normalized arguments."""

    kind: CacheKind
    operation: str
    args: Tuple[Tuple[str, Any], ...] = ()

    @classmethod
    def build(cls, kind: CacheKind, operation: str, **kwargs) -> "CacheKey":
        args = tuple(sorted((name, _normalize(value)) for name, value in kwargs.items()))
        return cls(kind=kind, operation=operation, args=args)

    def __str__(self) -> str:
        rendered = ",".join(f"{name}={value}" for name, value in self.args)
        return f"{self.operation}({rendered})"


@dataclass
class CacheEntry:
    key: CacheKey
    value: Any
    timestamp: float


@dataclass
class CacheStats:
    hits: int = 0
    misses: int = 0
    stale: int = 0


class ResponseCache:
    """Key -> (value, timestamp) map with TTL-based staleness.

    The map is never evicted by size; it lives for the process lifetime and
    only ``clear()`` empties it. Stale entries are overwritten on the next
    successful fetch.
    """

    def __init__(
        self,
        weather_ttl_seconds: float = 600,
        geocode_ttl_multiplier: int = 6,
        clock: Callable[[], float] = time.monotonic,
    ):
        if geocode_ttl_multiplier < 1:
            raise ValueError("geocode_ttl_multiplier must be a positive integer")
        self._ttls: Dict[CacheKind, float] = {
            CacheKind.WEATHER: weather_ttl_seconds,
            CacheKind.GEOCODE: weather_ttl_seconds * geocode_ttl_multiplier,
        }
        self._clock = clock
        self._entries: Dict[CacheKey, CacheEntry] = {}
        self._stats = CacheStats()
        logger.info(
            "Response cache initialized (weather TTL %ss, geocode TTL %ss)",
            self._ttls[CacheKind.WEATHER],
            self._ttls[CacheKind.GEOCODE],
        )

    def ttl_for(self, kind: CacheKind) -> float:
        return self._ttls[kind]

    def get(self, key: CacheKey) -> Optional[Any]:
        """Return the cached value, or None if never set or stale."""
        entry = self._entries.get(key)
        if entry is None:
            self._stats.misses += 1
            return None

        age = self._clock() - entry.timestamp
        if age >= self.ttl_for(key.kind):
            self._stats.misses += 1
            self._stats.stale += 1
            logger.debug(f"CACHE: stale entry for {key} (age {age:.0f}s)")
            return None

        self._stats.hits += 1
        logger.debug(f"CACHE: hit for {key}")
        return entry.value

    def set(self, key: CacheKey, value: Any) -> None:
        """Store value with the current timestamp, overwriting any prior entry."""
        self._entries[key] = CacheEntry(key=key, value=value, timestamp=self._clock())

    def entry(self, key: CacheKey) -> Optional[CacheEntry]:
        """Raw entry access, regardless of staleness."""
        return self._entries.get(key)

    def clear(self) -> None:
        """Remove all entries."""
        count = len(self._entries)
        self._entries.clear()
        logger.info(f"Response cache cleared ({count} entries removed)")

    def __len__(self) -> int:
        return len(self._entries)

    def stats(self) -> Dict[str, Any]:
        return {
            "entries": len(self._entries),
            "hits": self._stats.hits,
            "misses": self._stats.misses,
            "stale": self._stats.stale,
            "weather_ttl_seconds": self._ttls[CacheKind.WEATHER],
            "geocode_ttl_seconds": self._ttls[CacheKind.GEOCODE],
        }
