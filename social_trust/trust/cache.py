"""TTL cache of social neighbourhoods, keyed by evaluator and graph contents."""
from __future__ import annotations

import hashlib
import json
import threading
import time
from typing import Any, Sequence

from .models import SocialConnection

_cache: dict[str, dict[str, Any]] = {}
_hits: int = 0
_misses: int = 0
_DEFAULT_TTL = 300  # 5 minutes
_MAX_ENTRIES = 256
_lock = threading.Lock()


def make_key(
    evaluator_id: str,
    connections: Sequence[SocialConnection],
    max_distance: int,
) -> str:
    """Stable key: same evaluator, same edge set and same depth give the same key."""
    edges = sorted({(c.from_user_id, c.to_user_id) for c in connections})
    normalized = json.dumps(
        {"evaluator": evaluator_id, "depth": max_distance, "edges": edges},
        sort_keys=True,
    )
    return hashlib.sha256(normalized.encode()).hexdigest()[:16]


def cache_get(key: str, ttl: float = _DEFAULT_TTL) -> Any | None:
    global _hits, _misses
    with _lock:
        entry = _cache.get(key)
        if entry and time.time() - entry["created_at"] < ttl:
            _hits += 1
            return entry["value"]
        if entry:
            _cache.pop(key, None)
        _misses += 1
        return None


def _evict(ttl: float) -> None:
    # Caller holds _lock. Drops expired entries, then the oldest beyond the size cap.
    now = time.time()
    for key in [k for k, e in _cache.items() if now - e["created_at"] >= ttl]:
        del _cache[key]
    while len(_cache) >= _MAX_ENTRIES:
        del _cache[next(iter(_cache))]


def cache_set(key: str, value: Any, ttl: float = _DEFAULT_TTL) -> None:
    with _lock:
        _cache.pop(key, None)
        _evict(ttl)
        _cache[key] = {"value": value, "created_at": time.time()}


def get_cache_stats() -> dict:
    with _lock:
        total = _hits + _misses
        return {
            "size": len(_cache),
            "hits": _hits,
            "misses": _misses,
            "hit_rate": round(_hits / total * 100, 1) if total > 0 else 0.0,
        }


def clear_cache() -> None:
    global _hits, _misses
    with _lock:
        _cache.clear()
        _hits = 0
        _misses = 0
