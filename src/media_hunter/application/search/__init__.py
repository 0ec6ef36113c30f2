"""
Search application services.

- query_validator: HTTP boundary normalization into NormalizedQuery
- result_aggregator: concurrent fan-out, interleaving, ranking fallback
- reranker: embedding-based relevance ordering
"""

from .query_validator import normalize_media_type, normalize_search_params
from .reranker import Embedder, Reranker, SemanticReranker
from .result_aggregator import (
    DEFAULT_PROVIDER_TIMEOUT,
    MediaProvider,
    SearchAggregator,
    interleave_results,
)

__all__ = [
    "DEFAULT_PROVIDER_TIMEOUT",
    "Embedder",
    "MediaProvider",
    "Reranker",
    "SearchAggregator",
    "SemanticReranker",
    "interleave_results",
    "normalize_media_type",
    "normalize_search_params",
]
