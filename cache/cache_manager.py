"""
Series Cache Manager

Keeps recently fetched source series in memory so repeated formula runs
over the same indicators do not hit the provider APIs again.

Keys are derived from the source type and its configuration, so two
indicators pointing at the same upstream series share one entry.
"""

import hashlib
import json
import math
import random
import threading
import time
from collections import OrderedDict
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from config import config


@dataclass
class CacheEntry:
    """Single cache entry with value and expiration."""
    value: Any
    expires_at: float
    created_at: float = field(default_factory=time.time)
    ttl: float = 0  # Original TTL for stampede protection


class LRUCache:
    """
    LRU cache with TTL support and stampede protection.

    Uses probabilistic early expiration (XFetch) so that entries close to
    expiring get refreshed by one caller before all callers miss at once.
    """

    def __init__(self, max_size: int = 5000, stampede_beta: float = 1.0):
        """
        Args:
            max_size: Maximum number of entries
            stampede_beta: Early-expiration aggressiveness, 0 disables it
        """
        self._cache: "OrderedDict[str, CacheEntry]" = OrderedDict()
        self._max_size = max_size
        self._stampede_beta = stampede_beta
        self._lock = threading.Lock()
        self._hits = 0
        self._misses = 0

    def get(self, key: str, stampede_protection: bool = True) -> Optional[Any]:
        """Get value if present and not expired."""
        with self._lock:
            entry = self._cache.get(key)
            if entry is None:
                self._misses += 1
                return None

            now = time.time()
            if now > entry.expires_at:
                del self._cache[key]
                self._misses += 1
                return None

            if stampede_protection and self._stampede_beta > 0 and entry.ttl > 0:
                time_remaining = entry.expires_at - now
                threshold = self._stampede_beta * entry.ttl * 0.1  # 10% of TTL window
                if time_remaining < threshold * (-math.log(random.random() + 0.001)):
                    self._misses += 1
                    return None

            self._cache.move_to_end(key)
            self._hits += 1
            return entry.value

    def set(self, key: str, value: Any, ttl: float) -> None:
        """Set value with TTL in seconds."""
        with self._lock:
            if key in self._cache:
                del self._cache[key]
            while len(self._cache) >= self._max_size:
                self._cache.popitem(last=False)

            self._cache[key] = CacheEntry(value=value, expires_at=time.time() + ttl, ttl=ttl)

    def clear(self) -> None:
        with self._lock:
            self._cache.clear()
            self._hits = 0
            self._misses = 0

    def __len__(self) -> int:
        return len(self._cache)

    def stats(self) -> dict:
        """Get cache statistics."""
        now = time.time()
        with self._lock:
            valid = sum(1 for e in self._cache.values() if e.expires_at > now)
            return {
                'total_entries': len(self._cache),
                'valid_entries': valid,
                'expired_entries': len(self._cache) - valid,
                'max_size': self._max_size,
                'hits': self._hits,
                'misses': self._misses,
            }


class CacheManager:
    """Cache for fetched series: (source_type, source_config) -> (dates, values, info)."""

    def __init__(self, max_size: Optional[int] = None, ttl: Optional[float] = None):
        self._data = LRUCache(max_size=max_size or config.max_cache_size)
        self._ttl = ttl if ttl is not None else config.data_cache_ttl

    def get_data(self, source_type: str, source_config: dict) -> Optional[Tuple[List[str], List[Optional[float]], dict]]:
        """Returns (dates, values, info) or None."""
        return self._data.get(self.data_key(source_type, source_config))

    def set_data(self, source_type: str, source_config: dict, dates: List[str],
                 values: List[Optional[float]], info: dict) -> None:
        key = self.data_key(source_type, source_config)
        self._data.set(key, (list(dates), list(values), dict(info)), self._ttl)

    @staticmethod
    def data_key(source_type: str, source_config: dict) -> str:
        """Stable key for a source configuration."""
        canonical = json.dumps(source_config or {}, sort_keys=True, default=str)
        digest = hashlib.md5(canonical.encode()).hexdigest()[:16]
        return f"data:{source_type}:{digest}"

    def stats(self) -> Dict[str, dict]:
        return {'data': self._data.stats()}

    def clear_all(self) -> None:
        self._data.clear()


# Global cache instance
cache_manager = CacheManager()
