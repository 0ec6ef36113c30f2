"""
SemanticReranker - embedding-based relevance ordering

Reorders merged search results by cosine similarity between the query and
each item's text signature (title + description + tags).

Re-ranking is best-effort: any failure while embedding or scoring returns
the input order unchanged.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Protocol

from media_hunter.core.async_utils import gather_with_errors

if TYPE_CHECKING:
    from collections.abc import Sequence

    from media_hunter.domain.entities.media import MediaItem

logger = logging.getLogger(__name__)


class Embedder(Protocol):
    async def embed(self, text: str) -> list[float]: ...

    def similarity(self, a: Sequence[float], b: Sequence[float]) -> float: ...


class Reranker(Protocol):
    async def rerank(self, query: str, items: Sequence[MediaItem]) -> list[MediaItem]: ...


class SemanticReranker:
    """
    Re-rank items by semantic similarity to the query.

    Usage:
        reranker = SemanticReranker(EmbeddingClient())
        ranked = await reranker.rerank("sunset beach", items)
    """

    def __init__(self, embedder: Embedder) -> None:
        self._embedder = embedder

    async def rerank(self, query: str, items: Sequence[MediaItem]) -> list[MediaItem]:
        """Return ``items`` sorted by similarity, or unchanged on any failure."""
        if not items:
            return []

        try:
            scores = await self._score(query, items)
        except Exception as e:
            logger.warning(f"Semantic rerank failed, keeping original order: {e}")
            return list(items)

        # sorted() is stable: equal scores keep their incoming order
        order = sorted(range(len(items)), key=lambda i: -scores[i])
        return [items[i] for i in order]

    async def _score(self, query: str, items: Sequence[MediaItem]) -> list[float]:
        query_vector = await self._embedder.embed(query)
        item_vectors = await gather_with_errors(*(self._embedder.embed(item.text_signature) for item in items))
        return [self._embedder.similarity(query_vector, vector) for vector in item_vectors]
