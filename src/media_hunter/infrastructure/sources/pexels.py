"""
Pexels Integration

Free stock photos and videos via the Pexels API.

API Documentation: https://www.pexels.com/api/documentation/

Notes:
- API key sent in the ``Authorization`` header
- Photos and videos live behind separate endpoints; ``type=all`` queries both
- No sort parameter: results are always ordered by relevance
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

PEXELS_API_BASE = "https://api.pexels.com"
PEXELS_PHOTO_SEARCH_PATH = "/v1/search"
PEXELS_VIDEO_SEARCH_PATH = "/videos/search"


class PexelsClient(BaseMediaProvider):
    """
    Pexels API client.

    Usage:
        client = PexelsClient(api_key="...")
        result = await client.search(NormalizedQuery(text="mountains"))
    """

    source = MediaSource.PEXELS
    supported_types = frozenset({MediaType.IMAGE, MediaType.VIDEO})
    _service_name = "Pexels"
    _api_key_env = "PEXELS_API_KEY"

    def __init__(self, api_key: str | None, timeout: float = 10.0):
        super().__init__(
            api_key,
            base_url=PEXELS_API_BASE,
            timeout=timeout,
            headers={"Authorization": api_key or ""},
        )

    async def _search(self, query: NormalizedQuery) -> ProviderResult:
        if query.media_type == MediaType.IMAGE:
            return await self.search_photos(query)
        if query.media_type == MediaType.VIDEO:
            return await self.search_videos(query)
        return await self._search_branches(
            {
                "photo": self.search_photos(query),
                "video": self.search_videos(query),
            }
        )

    async def search_photos(self, query: NormalizedQuery) -> ProviderResult:
        """Search Pexels photos."""
        params: dict[str, Any] = {
            "query": query.text,
            "page": query.page,
            "per_page": query.per_page,
        }
        if query.orientation:
            params["orientation"] = query.orientation.value
        if query.color:
            params["color"] = query.color

        data = await self._make_request(PEXELS_PHOTO_SEARCH_PATH, params=params)
        photos = self._require(data, "photos")
        return ProviderResult(
            items=[self._map_photo(p) for p in photos],
            total=int(data.get("total_results") or 0),
        )

    async def search_videos(self, query: NormalizedQuery) -> ProviderResult:
        """Search Pexels videos. Colour filtering is photo-only upstream."""
        params: dict[str, Any] = {
            "query": query.text,
            "page": query.page,
            "per_page": query.per_page,
        }
        if query.orientation:
            params["orientation"] = query.orientation.value

        data = await self._make_request(PEXELS_VIDEO_SEARCH_PATH, params=params)
        videos = self._require(data, "videos")
        return ProviderResult(
            items=[self._map_video(v) for v in videos],
            total=int(data.get("total_results") or 0),
        )

    def _map_photo(self, photo: dict[str, Any]) -> MediaItem:
        photo_id = self._require(photo, "id")
        src = photo.get("src") or {}
        width = photo.get("width")
        height = photo.get("height")

        downloads = [
            DownloadOption(
                label="Original",
                url=src.get("original", ""),
                format="jpg",
                quality="original",
                width=width,
                height=height,
            ),
            DownloadOption(label="Large", url=src.get("large2x", ""), format="jpg", quality="large"),
            DownloadOption(label="Medium", url=src.get("medium", ""), format="jpg", quality="medium"),
            DownloadOption(label="Small", url=src.get("small", ""), format="jpg", quality="small"),
        ]

        return MediaItem(
            id=f"pexels-photo-{photo_id}",
            type=MediaType.IMAGE,
            source=self.source,
            title=photo.get("alt") or self._fallback_title("Photo", photo_id),
            thumbnail=src.get("tiny", ""),
            preview=src.get("medium", ""),
            author=photo.get("photographer", ""),
            author_url=photo.get("photographer_url"),
            source_url=photo.get("url", ""),
            downloads=tuple(d for d in downloads if d.url),
            width=width,
            height=height,
        )

    def _map_video(self, video: dict[str, Any]) -> MediaItem:
        video_id = self._require(video, "id")
        files = video.get("video_files") or []
        pictures = video.get("video_pictures") or []
        user = video.get("user") or {}

        ordered_files = sorted(files, key=lambda f: f.get("width") or 0, reverse=True)
        downloads = tuple(
            DownloadOption(
                label=f"{f.get('quality')} ({f.get('width')}x{f.get('height')})",
                url=f["link"],
                format=_file_format(f.get("file_type")),
                quality=f.get("quality"),
                width=f.get("width"),
                height=f.get("height"),
                size=f.get("size"),
            )
            for f in ordered_files
            if f.get("link")
        )

        sd_file = next((f for f in files if f.get("quality") == "sd" and f.get("link")), None)
        preview = (sd_file or (files[0] if files else {})).get("link", "")

        return MediaItem(
            id=f"pexels-video-{video_id}",
            type=MediaType.VIDEO,
            source=self.source,
            title=self._fallback_title("Video", video_id),
            thumbnail=pictures[0].get("picture", "") if pictures else "",
            preview=preview,
            author=user.get("name", ""),
            author_url=user.get("url"),
            source_url=video.get("url", ""),
            downloads=downloads,
            duration=video.get("duration"),
            width=video.get("width"),
            height=video.get("height"),
        )


def _file_format(file_type: str | None) -> str:
    """``video/mp4`` -> ``mp4``."""
    if file_type and "/" in file_type:
        return file_type.split("/", 1)[1] or "mp4"
    return "mp4"
