"""
Domain Entities: Media search

Provider-agnostic representation of a search request and its results.
Pure domain entities with no source-specific factory methods.
Source mapping is handled by the Infrastructure layer adapters.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Literal

from media_hunter.core.exceptions import InvalidParameterError

MAX_PER_PAGE = 50
DEFAULT_PER_PAGE = 20

ALL_TYPES = "all"


class MediaType(str, Enum):
    """Kind of media an item represents."""

    IMAGE = "image"
    VIDEO = "video"
    AUDIO = "audio"
    GIF = "gif"


class MediaSource(str, Enum):
    """Provider identifier. Declaration order is the fixed source order."""

    PEXELS = "pexels"
    PIXABAY = "pixabay"
    GIPHY = "giphy"
    FREESOUND = "freesound"

    @property
    def display_name(self) -> str:
        return self.value.capitalize()


class Orientation(str, Enum):
    LANDSCAPE = "landscape"
    PORTRAIT = "portrait"
    SQUARE = "square"


class OrderBy(str, Enum):
    RELEVANT = "relevant"
    POPULAR = "popular"
    LATEST = "latest"


@dataclass(frozen=True)
class NormalizedQuery:
    """
    Search request after normalization at the HTTP boundary.

    Immutable once constructed and shared read-only by every adapter.
    """

    text: str
    media_type: MediaType | Literal["all"] = ALL_TYPES
    page: int = 1
    per_page: int = DEFAULT_PER_PAGE
    orientation: Orientation | None = None
    color: str | None = None
    order_by: OrderBy | None = None

    def __post_init__(self) -> None:
        if self.page < 1:
            raise InvalidParameterError("page", self.page, "an integer >= 1")
        if not 1 <= self.per_page <= MAX_PER_PAGE:
            raise InvalidParameterError("per_page", self.per_page, f"an integer in 1..{MAX_PER_PAGE}")

    @property
    def has_text(self) -> bool:
        return bool(self.text.strip())

    def wants(self, media_type: MediaType) -> bool:
        """Whether items of ``media_type`` are requested ("all" matches everything)."""
        return self.media_type == ALL_TYPES or self.media_type == media_type


@dataclass(frozen=True)
class DownloadOption:
    """One downloadable rendition of a media item."""

    label: str
    url: str
    format: str
    quality: str | None = None
    width: int | None = None
    height: int | None = None
    size: int | None = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"label": self.label, "url": self.url, "format": self.format}
        for key in ("quality", "width", "height", "size"):
            value = getattr(self, key)
            if value is not None:
                data[key] = value
        return data


@dataclass(frozen=True)
class MediaItem:
    """
    Normalized search result shared across all sources.

    ``id`` is globally unique: ``{source}-{provider-native-id}``, with a
    shape infix for providers serving several shapes (``pexels-photo-1``).
    """

    id: str
    type: MediaType
    source: MediaSource
    title: str
    thumbnail: str
    preview: str
    author: str
    source_url: str
    downloads: tuple[DownloadOption, ...] = ()
    description: str | None = None
    author_url: str | None = None
    duration: int | float | None = None
    width: int | None = None
    height: int | None = None
    tags: tuple[str, ...] = ()

    @property
    def text_signature(self) -> str:
        """Title, description and tags joined by whitespace, used for embedding."""
        parts = [self.title, self.description or "", " ".join(self.tags)]
        return " ".join(parts).strip()

    def to_dict(self) -> dict[str, Any]:
        """Serialize with the camelCase keys the browser client expects."""
        data: dict[str, Any] = {
            "id": self.id,
            "type": self.type.value,
            "source": self.source.value,
            "title": self.title,
            "thumbnail": self.thumbnail,
            "preview": self.preview,
            "author": self.author,
            "sourceUrl": self.source_url,
            "downloads": [d.to_dict() for d in self.downloads],
        }
        if self.description is not None:
            data["description"] = self.description
        if self.author_url is not None:
            data["authorUrl"] = self.author_url
        if self.duration is not None:
            data["duration"] = self.duration
        if self.width is not None:
            data["width"] = self.width
        if self.height is not None:
            data["height"] = self.height
        if self.tags:
            data["tags"] = list(self.tags)
        return data


@dataclass
class ProviderResult:
    """What one adapter returns for one query."""

    items: list[MediaItem] = field(default_factory=list)
    total: int = 0

    @classmethod
    def empty(cls) -> ProviderResult:
        return cls(items=[], total=0)


@dataclass
class SourceOutcome:
    """Per-provider outcome of one aggregation call. Never persisted."""

    source: MediaSource
    items: list[MediaItem] = field(default_factory=list)
    total: int = 0
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass
class SourceSummary:
    """Diagnostic entry reported to the caller for every configured source."""

    source: MediaSource
    count: int
    error: str | None = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"source": self.source.value, "count": self.count}
        if self.error is not None:
            data["error"] = self.error
        return data


@dataclass
class AggregateResult:
    """Merged, ordered result set returned by the aggregator."""

    items: list[MediaItem]
    total_results: int
    page: int
    per_page: int
    sources: list[SourceSummary] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "items": [item.to_dict() for item in self.items],
            "totalResults": self.total_results,
            "page": self.page,
            "perPage": self.per_page,
            "sources": [s.to_dict() for s in self.sources],
        }
