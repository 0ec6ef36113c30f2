"""
Media Hunter - Aggregated Stock-Media Search

Searches Pexels, Pixabay, Giphy and Freesound concurrently and returns one
merged result list. A failing provider only removes its own results; the
merged list is interleaved across sources and, when the query has text,
re-ranked by sentence-embedding similarity.

Usage:
    from media_hunter import NormalizedQuery, SearchAggregator, create_providers

    aggregator = SearchAggregator(create_providers({"pexels": "KEY"}))
    result = await aggregator.search_all(NormalizedQuery(text="ocean waves"))

    for item in result.items:
        print(f"{item.source.value}: {item.title}")
"""

from .application.search import SearchAggregator, SemanticReranker, interleave_results, normalize_search_params
from .domain.entities.media import (
    AggregateResult,
    DownloadOption,
    MediaItem,
    MediaSource,
    MediaType,
    NormalizedQuery,
    ProviderResult,
    SourceSummary,
)
from .infrastructure.sources import create_providers

__version__ = "0.1.0"

__all__ = [
    # Aggregation
    "SearchAggregator",
    "SemanticReranker",
    "interleave_results",
    "normalize_search_params",
    "create_providers",
    # Domain
    "AggregateResult",
    "DownloadOption",
    "MediaItem",
    "MediaSource",
    "MediaType",
    "NormalizedQuery",
    "ProviderResult",
    "SourceSummary",
]
