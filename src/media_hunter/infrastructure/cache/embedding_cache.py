"""
Embedding Cache

In-memory cache of embedding vectors keyed by a content hash of the text.
Uses cachetools.TTLCache for LRU eviction and TTL expiration.

Popular items come back on many searches; caching their vectors avoids
re-encoding identical text. Vectors are only valid for the model that
produced them, so the model name is part of the key.
"""

from __future__ import annotations

import hashlib
import logging
from dataclasses import dataclass

from cachetools import TTLCache

logger = logging.getLogger(__name__)


@dataclass
class CacheStats:
    """Cache hit/miss counters."""

    hits: int = 0
    misses: int = 0

    @property
    def hit_rate(self) -> float:
        total = self.hits + self.misses
        return self.hits / total if total else 0.0


class EmbeddingCache:
    """
    Content-hash keyed cache for embedding vectors.

    Example:
        cache = EmbeddingCache(max_size=10_000, ttl=3600)
        vector = cache.get(model_name, text)
        if vector is None:
            vector = encode(text)
            cache.set(model_name, text, vector)
    """

    def __init__(self, max_size: int = 10_000, ttl: float = 3600.0):
        """
        Initialize cache.

        Args:
            max_size: Maximum number of vectors kept
            ttl: Time-to-live in seconds
        """
        self._cache: TTLCache[str, list[float]] = TTLCache(maxsize=max_size, ttl=ttl)
        self._stats = CacheStats()

    @property
    def stats(self) -> CacheStats:
        return self._stats

    def __len__(self) -> int:
        return len(self._cache)

    @staticmethod
    def make_key(model_name: str, text: str) -> str:
        digest = hashlib.sha256(text.encode("utf-8")).hexdigest()
        return f"{model_name}:{digest}"

    def get(self, model_name: str, text: str) -> list[float] | None:
        """Cached vector for ``text`` or None if absent/expired."""
        try:
            vector = self._cache[self.make_key(model_name, text)]
        except KeyError:
            self._stats.misses += 1
            return None
        self._stats.hits += 1
        return vector

    def set(self, model_name: str, text: str, vector: list[float]) -> None:
        self._cache[self.make_key(model_name, text)] = vector

    def clear(self) -> None:
        self._cache.clear()
        self._stats = CacheStats()
        logger.debug("Embedding cache cleared")
