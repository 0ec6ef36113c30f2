"""
Embedding Client - sentence embeddings for semantic re-ranking.

Wraps a sentence-transformers model behind an async interface:
- Lazy, single-flight model loading (at most once per client)
- Model loading and CPU-bound encoding run in worker threads, each bounded
  by the same timeout
- L2-normalized output vectors
- Optional content-hash cache of vectors

Example:
    >>> client = EmbeddingClient()
    >>> q = await client.embed("sunset over the ocean")
    >>> d = await client.embed("beach at dusk")
    >>> client.similarity(q, d)
    0.71...
"""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING, Any

import numpy as np

from media_hunter.core.exceptions import RerankingError

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence

    from media_hunter.infrastructure.cache import EmbeddingCache

logger = logging.getLogger(__name__)

DEFAULT_MODEL_NAME = "sentence-transformers/all-MiniLM-L6-v2"
DEFAULT_TIMEOUT = 30.0


def load_sentence_transformer(model_name: str) -> Any:
    """Load a SentenceTransformer model (imported lazily, it pulls in torch)."""
    from sentence_transformers import SentenceTransformer

    return SentenceTransformer(model_name)


class EmbeddingClient:
    """
    Async facade over a sentence-embedding model.

    The model is built on first use. Concurrent first callers all wait on
    the same load instead of loading duplicate copies. A load that outlives
    the timeout keeps running in the background and later callers pick it
    up, so a slow first download degrades one search, not every search.

    Args:
        model_name: Model identifier passed to ``model_factory``
        timeout: Upper bound in seconds for the model load and for each encode
        model_factory: Callable building the model from its name. Anything
            exposing ``encode(text, normalize_embeddings=True, ...)`` works.
        cache: Optional vector cache shared across searches
    """

    def __init__(
        self,
        model_name: str = DEFAULT_MODEL_NAME,
        timeout: float = DEFAULT_TIMEOUT,
        model_factory: Callable[[str], Any] | None = None,
        cache: EmbeddingCache | None = None,
    ) -> None:
        self._model_name = model_name
        self._timeout = timeout
        self._model_factory = model_factory or load_sentence_transformer
        self._cache = cache
        self._model: Any = None
        self._load_task: asyncio.Task[Any] | None = None

    @property
    def model_name(self) -> str:
        return self._model_name

    @property
    def is_loaded(self) -> bool:
        return self._model is not None

    async def initialize(self) -> Any:
        """
        Load the model once; later and concurrent calls reuse it.

        Raises:
            RerankingError: The load did not finish within the timeout
        """
        if self._model is not None:
            return self._model

        if self._load_task is None:
            logger.info(f"Loading embedding model {self._model_name}")
            self._load_task = asyncio.create_task(asyncio.to_thread(self._model_factory, self._model_name))
        task = self._load_task

        try:
            model = await asyncio.wait_for(asyncio.shield(task), timeout=self._timeout)
        except TimeoutError as e:
            raise RerankingError(f"Embedding model load timed out after {self._timeout}s") from e
        except Exception:
            # Failed load: the next caller starts a new one
            if self._load_task is task:
                self._load_task = None
            raise

        if self._model is None:
            self._model = model
            logger.info("Embedding model loaded")
        return self._model

    async def embed(self, text: str) -> list[float]:
        """
        Embed ``text`` into a fixed-length, L2-normalized vector.

        Raises:
            RerankingError: Model load or encoding exceeded the timeout
        """
        if self._cache is not None:
            cached = self._cache.get(self._model_name, text)
            if cached is not None:
                return cached

        model = await self.initialize()
        try:
            vector = await asyncio.wait_for(
                asyncio.to_thread(self._encode, model, text),
                timeout=self._timeout,
            )
        except TimeoutError as e:
            raise RerankingError(f"Embedding timed out after {self._timeout}s") from e

        if self._cache is not None:
            self._cache.set(self._model_name, text, vector)
        return vector

    @staticmethod
    def _encode(model: Any, text: str) -> list[float]:
        embedding = model.encode(
            text,
            normalize_embeddings=True,
            convert_to_numpy=True,
            show_progress_bar=False,
        )
        return np.asarray(embedding, dtype=np.float64).ravel().tolist()

    @staticmethod
    def similarity(a: Sequence[float], b: Sequence[float]) -> float:
        """
        Cosine similarity of two vectors.

        Returns 0.0 when dimensionalities differ or either vector is all
        zeros.
        """
        va = np.asarray(a, dtype=np.float64)
        vb = np.asarray(b, dtype=np.float64)
        if va.shape != vb.shape:
            return 0.0
        denom = float(np.linalg.norm(va) * np.linalg.norm(vb))
        if denom == 0.0:
            return 0.0
        return float(np.dot(va, vb) / denom)
