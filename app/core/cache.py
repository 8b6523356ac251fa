"""
Response cache - expiring key/value store handed to request handlers
"""
import time
from typing import Callable

from cachetools import TTLCache
from fastapi import Request


def create_cache(ttl_seconds: float = 60.0, maxsize: int = 1024, timer: Callable[[], float] = time.monotonic) -> TTLCache:
    """
    Build the application cache.

    One instance lives on ``app.state.cache``; handlers receive it through
    the ``get_cache`` dependency so tests can swap in their own.
    """
    return TTLCache(maxsize=maxsize, ttl=ttl_seconds, timer=timer)


def invalidate(cache: TTLCache, *keys: str) -> None:
    """Drop the given keys, or everything when none are given"""
    if not keys:
        cache.clear()
        return
    for key in keys:
        cache.pop(key, None)


def get_cache(request: Request) -> TTLCache:
    """FastAPI dependency: the application's cache instance"""
    return request.app.state.cache
