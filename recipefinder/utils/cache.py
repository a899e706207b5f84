"""
In-process TTL cache for forwarded search responses.

This module provides a simple, lightweight cache for recipe search results
to reduce redundant calls to the remote recipe backend while keeping results
fresh.

The cache is process-local and in-memory, with automatic expiration based on TTL
and a size bound (the oldest entry is evicted when full).
"""

import json
import time
from typing import Any, Dict, Hashable, List, Optional, Tuple

# Cache storage: Key -> (timestamp, cached_value)
_SEARCH_CACHE: Dict[Hashable, Tuple[float, Dict[str, Any]]] = {}

# TTL in seconds - overridden from SEARCH_CACHE_TTL_SECONDS by api.config
SEARCH_CACHE_TTL_SECONDS = 60

# Maximum number of cached responses
SEARCH_CACHE_MAX_SIZE = 500

# Payload keys that make_search_cache_key normalises; any other key is keyed verbatim
_KNOWN_KEYS = frozenset({
    "ingredients", "dietary", "matchAll", "page", "page_size", "max_results",
    "cookingTime", "cuisine", "mealType",
})


def _normalize_terms(values: Optional[List[Any]]) -> Tuple[str, ...]:
    if not isinstance(values, list):
        return ()
    return tuple(sorted(str(v).strip().lower() for v in values if str(v).strip()))


def make_search_cache_key(payload: Dict[str, Any]) -> Hashable:
    """
    Create a deterministic cache key for a search payload.

    Ingredient and dietary lists are normalised (trimmed, lowercased, sorted)
    so that "Garlic, chicken" and "chicken, garlic" share an entry. Paging and
    the optional filters are part of the key, and so is every other key of the
    payload (they are forwarded to the backend and may change its answer).

    Args:
        payload: Search payload as sent to the backend

    Returns:
        Hashable cache key (tuple)
    """
    return (
        _normalize_terms(payload.get("ingredients")),
        _normalize_terms(payload.get("dietary")),
        bool(payload.get("matchAll")),
        payload.get("page") or 1,
        payload.get("page_size") or 10,
        payload.get("max_results") or 100,
        payload.get("cookingTime") or "",
        payload.get("cuisine") or "",
        payload.get("mealType") or "",
        tuple(sorted(
            (key, json.dumps(value, sort_keys=True, default=str))
            for key, value in payload.items()
            if key not in _KNOWN_KEYS
        )),
    )


def get_cached_search(key: Hashable) -> Optional[Dict[str, Any]]:
    """
    Retrieve a cached search result if it exists and hasn't expired.

    Args:
        key: Cache key from make_search_cache_key()

    Returns:
        Cached result dictionary, or None if not found or expired
    """
    now = time.time()
    entry = _SEARCH_CACHE.get(key)

    if not entry:
        return None

    timestamp, value = entry

    if now - timestamp > SEARCH_CACHE_TTL_SECONDS:
        _SEARCH_CACHE.pop(key, None)
        return None

    return value


def set_cached_search(key: Hashable, value: Dict[str, Any]) -> None:
    """
    Store a search result in the cache, evicting the oldest entry when full.

    Args:
        key: Cache key from make_search_cache_key()
        value: Backend response dictionary ({"recipes": [...], "pagination": {...}})
    """
    if key not in _SEARCH_CACHE and len(_SEARCH_CACHE) >= SEARCH_CACHE_MAX_SIZE:
        oldest_key = min(_SEARCH_CACHE.items(), key=lambda item: item[1][0])[0]
        _SEARCH_CACHE.pop(oldest_key, None)

    _SEARCH_CACHE[key] = (time.time(), value)


def clear_cache() -> None:
    """Clear all cached search results (useful for testing)."""
    _SEARCH_CACHE.clear()


def get_cache_size() -> int:
    """Get the current number of cached entries (useful for monitoring)."""
    return len(_SEARCH_CACHE)
