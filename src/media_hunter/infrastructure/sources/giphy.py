"""
Giphy Integration

Animated GIF search via the Giphy API.

API Documentation: https://developers.giphy.com/docs/api/endpoint#search

Notes:
- Offset/limit pagination: offset = (page - 1) * per_page
- Rendition dimensions and sizes are returned as strings
- Results restricted to rating "g"
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
    ProviderResult,
)
from media_hunter.infrastructure.sources.base_client import BaseMediaProvider

logger = logging.getLogger(__name__)

GIPHY_API_BASE = "https://api.giphy.com/v1/gifs"


class GiphyClient(BaseMediaProvider):
    """
    Giphy API client.

    Usage:
        client = GiphyClient(api_key="...")
        result = await client.search(NormalizedQuery(text="cat", media_type=MediaType.GIF))
    """

    source = MediaSource.GIPHY
    supported_types = frozenset({MediaType.GIF})
    _service_name = "Giphy"
    _api_key_env = "GIPHY_API_KEY"

    def __init__(self, api_key: str | None, timeout: float = 10.0, rating: str = "g", lang: str = "en"):
        super().__init__(api_key, base_url=GIPHY_API_BASE, timeout=timeout)
        self._rating = rating
        self._lang = lang

    async def _search(self, query: NormalizedQuery) -> ProviderResult:
        params = {
            "api_key": self._api_key,
            "q": query.text,
            "limit": query.per_page,
            "offset": (query.page - 1) * query.per_page,
            "rating": self._rating,
            "lang": self._lang,
        }
        data = await self._make_request("/search", params=params)
        gifs = self._require(data, "data")
        pagination = data.get("pagination") or {}
        return ProviderResult(
            items=[self._map_gif(g) for g in gifs],
            total=int(pagination.get("total_count") or 0),
        )

    def _map_gif(self, gif: dict[str, Any]) -> MediaItem:
        gif_id = self._require(gif, "id")
        images = gif.get("images") or {}
        original = images.get("original") or {}
        medium = images.get("downsized_medium") or {}
        small = images.get("downsized_small") or {}
        user = gif.get("user") or {}

        width = _to_int(original.get("width"))
        height = _to_int(original.get("height"))

        downloads = [
            DownloadOption(
                label="Original",
                url=original.get("url", ""),
                format="gif",
                quality="original",
                width=width,
                height=height,
                size=_to_int(original.get("size")),
            ),
            DownloadOption(
                label="Medium",
                url=medium.get("url", ""),
                format="gif",
                quality="medium",
                width=_to_int(medium.get("width")),
                height=_to_int(medium.get("height")),
            ),
            DownloadOption(label="Small", url=small.get("url", ""), format="gif", quality="small"),
        ]
        if original.get("mp4"):
            downloads.append(DownloadOption(label="MP4", url=original["mp4"], format="mp4", quality="original"))

        thumbnail = (images.get("preview_gif") or {}).get("url") or (images.get("fixed_height_small") or {}).get(
            "url", ""
        )

        return MediaItem(
            id=f"giphy-{gif_id}",
            type=MediaType.GIF,
            source=self.source,
            title=gif.get("title") or self._fallback_title("GIF", gif_id),
            thumbnail=thumbnail,
            preview=(images.get("fixed_height") or {}).get("url", ""),
            author=user.get("display_name") or gif.get("username") or "Unknown",
            author_url=user.get("profile_url") or None,
            source_url=gif.get("url", ""),
            downloads=tuple(d for d in downloads if d.url),
            width=width,
            height=height,
        )


def _to_int(value: Any) -> int | None:
    """Giphy numbers come as strings; unparseable values are omitted."""
    if value is None or value == "":
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None
