"""
Pytest configuration and shared fixtures.
"""

from __future__ import annotations

import asyncio
from collections.abc import Sequence

import pytest

from media_hunter.domain.entities.media import (
    DownloadOption,
    MediaItem,
    MediaSource,
    MediaType,
    NormalizedQuery,
    ProviderResult,
)
from media_hunter.infrastructure.embedding import EmbeddingClient

# ============================================================
# Domain Fixtures
# ============================================================


def make_item(
    source: MediaSource,
    index: int,
    title: str | None = None,
    media_type: MediaType = MediaType.IMAGE,
    tags: Sequence[str] = (),
    description: str | None = None,
) -> MediaItem:
    """Build a minimal MediaItem; ids look like ``pexels-1``."""
    return MediaItem(
        id=f"{source.value}-{index}",
        type=media_type,
        source=source,
        title=title or f"{source.display_name} item {index}",
        thumbnail=f"https://cdn.example.com/{source.value}/{index}/thumb.jpg",
        preview=f"https://cdn.example.com/{source.value}/{index}/preview.jpg",
        author="Tester",
        source_url=f"https://{source.value}.example.com/{index}",
        downloads=(DownloadOption(label="Original", url=f"https://cdn.example.com/{source.value}/{index}", format="jpg"),),
        description=description,
        tags=tuple(tags),
    )


@pytest.fixture
def item_factory():
    """Factory fixture for MediaItem instances."""
    return make_item


@pytest.fixture
def query():
    return NormalizedQuery(text="ocean waves")


# ============================================================
# Fake Providers
# ============================================================


class FakeProvider:
    """In-memory provider returning canned items or raising a canned error."""

    def __init__(
        self,
        source: MediaSource,
        count: int = 0,
        total: int | None = None,
        error: Exception | None = None,
        delay: float = 0.0,
    ):
        self.source = source
        self.items = [make_item(source, i + 1) for i in range(count)]
        self.total = total if total is not None else count
        self.error = error
        self.delay = delay
        self.calls: list[NormalizedQuery] = []
        self.closed = False

    async def search(self, query: NormalizedQuery) -> ProviderResult:
        self.calls.append(query)
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        return ProviderResult(items=list(self.items), total=self.total)

    async def close(self) -> None:
        self.closed = True


@pytest.fixture
def fake_provider():
    """Factory fixture for FakeProvider."""
    return FakeProvider


# ============================================================
# Fake Embeddings
# ============================================================


class KeywordEmbedder:
    """
    Deterministic bag-of-words embedder over a fixed vocabulary.

    Exposes the same ``embed``/``similarity`` surface as EmbeddingClient.
    """

    def __init__(self, vocabulary: Sequence[str], fail_on: str | None = None):
        self.vocabulary = [w.lower() for w in vocabulary]
        self.fail_on = fail_on
        self.calls: list[str] = []

    async def embed(self, text: str) -> list[float]:
        self.calls.append(text)
        if self.fail_on is not None and self.fail_on in text:
            raise RuntimeError(f"embedding failed for {text!r}")
        words = text.lower().split()
        return [float(words.count(w)) for w in self.vocabulary]

    def similarity(self, a: Sequence[float], b: Sequence[float]) -> float:
        return EmbeddingClient.similarity(a, b)


@pytest.fixture
def keyword_embedder():
    """Factory fixture for KeywordEmbedder."""
    return KeywordEmbedder


class FakeSentenceModel:
    """Stand-in for a SentenceTransformer exposing ``encode``."""

    def __init__(self, dim: int = 4):
        self.dim = dim
        self.encode_calls: list[str] = []

    def encode(self, text, normalize_embeddings=False, convert_to_numpy=True, show_progress_bar=False):
        self.encode_calls.append(text)
        seed = sum(ord(c) for c in text) or 1
        return [float((seed * (i + 1)) % 7 + 1) for i in range(self.dim)]


@pytest.fixture
def fake_model():
    return FakeSentenceModel()
