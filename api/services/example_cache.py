"""
Example Cache
Memoizes generated examples by case-folded word

Pure memoization: no TTL, no eviction, no invalidation. The in-memory backend
grows without bound and is lost whenever the instance is recycled; both are
accepted limitations.
"""

import json
import threading
from typing import Dict, Optional

from .example_service import ExampleResult

CACHE_KEY_PREFIX = "example:"


def normalize_cache_key(word: str) -> str:
    """Case-folded exact word. No trimming or stemming."""
    return word.casefold()


class ExampleCache:
    """Interface: get(key) -> ExampleResult or None, put(key, value)."""

    def get(self, key: str) -> Optional[ExampleResult]:
        raise NotImplementedError

    def put(self, key: str, value: ExampleResult) -> None:
        raise NotImplementedError


class InMemoryExampleCache(ExampleCache):
    def __init__(self):
        self._entries: Dict[str, ExampleResult] = {}
        self._lock = threading.Lock()

    def get(self, key: str) -> Optional[ExampleResult]:
        return self._entries.get(key)

    def put(self, key: str, value: ExampleResult) -> None:
        # First value wins, later writes for the same key are ignored
        with self._lock:
            self._entries.setdefault(key, value)

    def __len__(self) -> int:
        return len(self._entries)


class UpstashExampleCache(ExampleCache):
    """Shared across instances. Cache failures degrade to a miss."""

    def __init__(self, redis):
        self._redis = redis

    def get(self, key: str) -> Optional[ExampleResult]:
        try:
            cached = self._redis.get(CACHE_KEY_PREFIX + key)
        except Exception as e:
            print(f"[EXAMPLE] Cache read failed for {key}: {e}")
            return None
        if not cached:
            return None
        try:
            return ExampleResult.from_dict(json.loads(cached))
        except (ValueError, AttributeError) as e:
            print(f"[EXAMPLE] Ignoring unreadable cache entry for {key}: {e}")
            return None

    def put(self, key: str, value: ExampleResult) -> None:
        try:
            # nx: a populated key keeps its first value
            self._redis.set(CACHE_KEY_PREFIX + key, json.dumps(value.to_dict()), nx=True)
        except Exception as e:
            print(f"[EXAMPLE] Cache write failed for {key}: {e}")
