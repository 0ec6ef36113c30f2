"""
Cache infrastructure.

Provides an in-memory TTL cache for embedding vectors.
"""

from .embedding_cache import CacheStats, EmbeddingCache

__all__ = ["CacheStats", "EmbeddingCache"]
