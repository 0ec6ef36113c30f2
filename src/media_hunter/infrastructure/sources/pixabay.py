"""
Pixabay Integration

Royalty-free images and videos via the Pixabay API.

API Documentation: https://pixabay.com/api/docs/

Notes:
- API key sent as the ``key`` query parameter
- Orientation vocabulary differs: horizontal / vertical / all
- Only "popular" and "latest" sort orders exist
- ``per_page`` accepts 3..200; smaller page sizes are requested as 3 and
  trimmed locally
"""

from __future__ import annotations

import logging
from typing import Any

from media_hunter.domain.entities.media import (
    DownloadOption,
    MediaItem,
    MediaSource,
    MediaType,
    NormalizedQuery,
    OrderBy,
    Orientation,
    ProviderResult,
)
from media_hunter.infrastructure.sources.base_client import BaseMediaProvider

logger = logging.getLogger(__name__)

PIXABAY_API_BASE = "https://pixabay.com/api"
PIXABAY_MIN_PER_PAGE = 3

_ORIENTATION_MAP = {
    Orientation.LANDSCAPE: "horizontal",
    Orientation.PORTRAIT: "vertical",
    Orientation.SQUARE: "all",
}

# Pixabay has no "relevance" order; its default "popular" is the closest match
_ORDER_MAP = {
    OrderBy.RELEVANT: "popular",
    OrderBy.POPULAR: "popular",
    OrderBy.LATEST: "latest",
}


class PixabayClient(BaseMediaProvider):
    """
    Pixabay API client.

    Usage:
        client = PixabayClient(api_key="...")
        result = await client.search(NormalizedQuery(text="forest", media_type=MediaType.VIDEO))
    """

    source = MediaSource.PIXABAY
    supported_types = frozenset({MediaType.IMAGE, MediaType.VIDEO})
    _service_name = "Pixabay"
    _api_key_env = "PIXABAY_API_KEY"

    def __init__(self, api_key: str | None, timeout: float = 10.0):
        super().__init__(api_key, base_url=PIXABAY_API_BASE, timeout=timeout)

    async def _search(self, query: NormalizedQuery) -> ProviderResult:
        if query.media_type == MediaType.IMAGE:
            return await self.search_images(query)
        if query.media_type == MediaType.VIDEO:
            return await self.search_videos(query)
        return await self._search_branches(
            {
                "image": self.search_images(query),
                "video": self.search_videos(query),
            }
        )

    def _base_params(self, query: NormalizedQuery) -> dict[str, Any]:
        params: dict[str, Any] = {
            "key": self._api_key,
            "q": query.text,
            "page": query.page,
            "per_page": max(query.per_page, PIXABAY_MIN_PER_PAGE),
        }
        if query.order_by:
            params["order"] = _ORDER_MAP[query.order_by]
        return params

    async def search_images(self, query: NormalizedQuery) -> ProviderResult:
        """Search Pixabay images."""
        params = self._base_params(query)
        if query.orientation:
            params["orientation"] = _ORIENTATION_MAP[query.orientation]
        if query.color:
            params["colors"] = query.color

        data = await self._make_request("/", params=params)
        hits = self._require(data, "hits")
        return ProviderResult(
            items=[self._map_image(h) for h in hits[: query.per_page]],
            total=int(data.get("totalHits") or 0),
        )

    async def search_videos(self, query: NormalizedQuery) -> ProviderResult:
        """Search Pixabay videos (no orientation/colour filters upstream)."""
        data = await self._make_request("/videos/", params=self._base_params(query))
        hits = self._require(data, "hits")
        return ProviderResult(
            items=[self._map_video(h) for h in hits[: query.per_page]],
            total=int(data.get("totalHits") or 0),
        )

    def _map_image(self, img: dict[str, Any]) -> MediaItem:
        image_id = self._require(img, "id")
        tags = _split_tags(img.get("tags"))
        width = img.get("imageWidth")
        height = img.get("imageHeight")
        large = img.get("largeImageURL", "")

        downloads = [
            DownloadOption(
                label="Full HD",
                url=img.get("fullHDURL") or large,
                format="jpg",
                quality="fullhd",
                width=width,
                height=height,
            ),
            DownloadOption(label="Large", url=large, format="jpg", quality="large"),
            DownloadOption(label="Web", url=img.get("webformatURL", ""), format="jpg", quality="web"),
        ]

        return MediaItem(
            id=f"pixabay-img-{image_id}",
            type=MediaType.IMAGE,
            source=self.source,
            title=tags[0] if tags else self._fallback_title("Image", image_id),
            thumbnail=img.get("previewURL", ""),
            preview=img.get("webformatURL", ""),
            author=img.get("user", ""),
            source_url=img.get("pageURL", ""),
            downloads=tuple(d for d in downloads if d.url),
            width=width,
            height=height,
            tags=tuple(tags),
        )

    def _map_video(self, vid: dict[str, Any]) -> MediaItem:
        video_id = self._require(vid, "id")
        tags = _split_tags(vid.get("tags"))
        renditions = vid.get("videos") or {}

        def url_of(name: str) -> str:
            return (renditions.get(name) or {}).get("url") or ""

        downloads = []
        for name, label in (("large", "Large"), ("medium", "Medium"), ("small", "Small")):
            rendition = renditions.get(name) or {}
            if rendition.get("url"):
                downloads.append(
                    DownloadOption(
                        label=label,
                        url=rendition["url"],
                        format="mp4",
                        quality=name,
                        width=rendition.get("width"),
                        height=rendition.get("height"),
                        size=rendition.get("size"),
                    )
                )

        return MediaItem(
            id=f"pixabay-vid-{video_id}",
            type=MediaType.VIDEO,
            source=self.source,
            title=tags[0] if tags else self._fallback_title("Video", video_id),
            thumbnail=url_of("tiny") or url_of("small"),
            preview=url_of("small") or url_of("medium"),
            author=vid.get("user", ""),
            source_url=vid.get("pageURL", ""),
            downloads=tuple(downloads),
            duration=vid.get("duration"),
            tags=tuple(tags),
        )


def _split_tags(raw: str | None) -> list[str]:
    """Pixabay tags arrive as one comma-separated string."""
    if not raw:
        return []
    return [t.strip() for t in raw.split(",") if t.strip()]
