"""Cache module - In-memory cache for fetched series."""

from .cache_manager import CacheManager, cache_manager

__all__ = ['CacheManager', 'cache_manager']
