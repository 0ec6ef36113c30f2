"""Domain entities for media search."""

from .media import (
    ALL_TYPES,
    DEFAULT_PER_PAGE,
    MAX_PER_PAGE,
    AggregateResult,
    DownloadOption,
    MediaItem,
    MediaSource,
    MediaType,
    NormalizedQuery,
    OrderBy,
    Orientation,
    ProviderResult,
    SourceOutcome,
    SourceSummary,
)

__all__ = [
    "ALL_TYPES",
    "DEFAULT_PER_PAGE",
    "MAX_PER_PAGE",
    "AggregateResult",
    "DownloadOption",
    "MediaItem",
    "MediaSource",
    "MediaType",
    "NormalizedQuery",
    "OrderBy",
    "Orientation",
    "ProviderResult",
    "SourceOutcome",
    "SourceSummary",
]
