"""
Freesound Integration

Creative Commons sound effects and audio clips via the Freesound APIv2.

API Documentation: https://freesound.org/docs/api/resources_apiv2.html#search-resources

Notes:
- Token auth via the ``token`` query parameter
- Downloads point at the public preview renditions (original files need OAuth2)
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
    ProviderResult,
)
from media_hunter.infrastructure.sources.base_client import BaseMediaProvider

logger = logging.getLogger(__name__)

FREESOUND_API_BASE = "https://freesound.org/apiv2"
FREESOUND_FIELDS = "id,name,description,tags,duration,username,url,previews,images,download,filesize,type,samplerate,channels"
DESCRIPTION_MAX_CHARS = 200

_SORT_MAP = {
    OrderBy.RELEVANT: "score",
    OrderBy.POPULAR: "downloads_desc",
    OrderBy.LATEST: "created_desc",
}

_PREVIEWS = (
    ("preview-hq-mp3", "HQ MP3", "mp3", "high"),
    ("preview-hq-ogg", "HQ OGG", "ogg", "high"),
    ("preview-lq-mp3", "LQ MP3", "mp3", "low"),
)


class FreesoundClient(BaseMediaProvider):
    """
    Freesound API client.

    Usage:
        client = FreesoundClient(api_key="...")
        result = await client.search(NormalizedQuery(text="rain", media_type=MediaType.AUDIO))
    """

    source = MediaSource.FREESOUND
    supported_types = frozenset({MediaType.AUDIO})
    _service_name = "Freesound"
    _api_key_env = "FREESOUND_API_KEY"

    def __init__(self, api_key: str | None, timeout: float = 10.0):
        super().__init__(api_key, base_url=FREESOUND_API_BASE, timeout=timeout)

    async def _search(self, query: NormalizedQuery) -> ProviderResult:
        params = {
            "token": self._api_key,
            "query": query.text,
            "page": query.page,
            "page_size": query.per_page,
            "sort": _SORT_MAP[query.order_by or OrderBy.RELEVANT],
            "fields": FREESOUND_FIELDS,
        }
        data = await self._make_request("/search/text/", params=params)
        results = self._require(data, "results")
        return ProviderResult(
            items=[self._map_sound(s) for s in results],
            total=int(data.get("count") or 0),
        )

    def _map_sound(self, sound: dict[str, Any]) -> MediaItem:
        sound_id = self._require(sound, "id")
        previews = sound.get("previews") or {}
        images = sound.get("images") or {}
        description = (sound.get("description") or "")[:DESCRIPTION_MAX_CHARS]
        duration = sound.get("duration")

        downloads = tuple(
            DownloadOption(label=label, url=previews[key], format=fmt, quality=quality)
            for key, label, fmt, quality in _PREVIEWS
            if previews.get(key)
        )

        return MediaItem(
            id=f"freesound-{sound_id}",
            type=MediaType.AUDIO,
            source=self.source,
            title=sound.get("name") or self._fallback_title("Audio", sound_id),
            description=description or None,
            thumbnail=images.get("waveform_m", ""),
            preview=previews.get("preview-hq-mp3", ""),
            author=sound.get("username", ""),
            source_url=sound.get("url", ""),
            downloads=downloads,
            duration=round(duration) if duration is not None else None,
            tags=tuple(sound.get("tags") or ()),
        )
