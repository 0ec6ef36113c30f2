"""Tests for the Pexels adapter."""

from __future__ import annotations

from unittest.mock import AsyncMock, patch

import pytest

from media_hunter.core.exceptions import ConfigurationError, NetworkError, ParseError
from media_hunter.domain.entities.media import MediaSource, MediaType, NormalizedQuery, Orientation
from media_hunter.infrastructure.sources.pexels import PexelsClient

PHOTO = {
    "id": 101,
    "width": 4000,
    "height": 3000,
    "url": "https://www.pexels.com/photo/101/",
    "photographer": "Ann Lee",
    "photographer_url": "https://www.pexels.com/@ann",
    "alt": "Waves crashing on rocks",
    "src": {
        "original": "https://images.pexels.com/101/original.jpg",
        "large2x": "https://images.pexels.com/101/large2x.jpg",
        "medium": "https://images.pexels.com/101/medium.jpg",
        "small": "https://images.pexels.com/101/small.jpg",
        "tiny": "https://images.pexels.com/101/tiny.jpg",
    },
}

VIDEO = {
    "id": 42,
    "width": 1920,
    "height": 1080,
    "duration": 12,
    "url": "https://www.pexels.com/video/42/",
    "user": {"name": "Bo", "url": "https://www.pexels.com/@bo"},
    "video_pictures": [{"picture": "https://images.pexels.com/42/pic0.jpg"}],
    "video_files": [
        {"quality": "sd", "file_type": "video/mp4", "width": 640, "height": 360, "link": "https://v/sd.mp4"},
        {"quality": "hd", "file_type": "video/mp4", "width": 1920, "height": 1080, "link": "https://v/hd.mp4", "size": 9},
    ],
}


@pytest.fixture
def client():
    return PexelsClient(api_key="pexels-key")


class TestInit:
    def test_missing_key(self):
        with pytest.raises(ConfigurationError, match="PEXELS_API_KEY"):
            PexelsClient(api_key=None)

    def test_authorization_header(self, client):
        assert client._client.headers["Authorization"] == "pexels-key"


class TestSearchDispatch:
    @pytest.mark.asyncio
    async def test_image_only_hits_photo_endpoint(self, client):
        with patch.object(client, "_make_request", new=AsyncMock(return_value={"photos": [PHOTO], "total_results": 9})) as req:
            result = await client.search(NormalizedQuery(text="waves", media_type=MediaType.IMAGE))
        req.assert_awaited_once()
        assert req.call_args.args[0] == "/v1/search"
        assert result.total == 9
        assert [i.id for i in result.items] == ["pexels-photo-101"]

    @pytest.mark.asyncio
    async def test_video_only_hits_video_endpoint(self, client):
        with patch.object(client, "_make_request", new=AsyncMock(return_value={"videos": [VIDEO], "total_results": 3})) as req:
            result = await client.search(NormalizedQuery(text="waves", media_type=MediaType.VIDEO))
        assert req.call_args.args[0] == "/videos/search"
        assert [i.id for i in result.items] == ["pexels-video-42"]

    @pytest.mark.asyncio
    async def test_all_merges_photos_and_videos(self, client):
        async def fake_request(path, *, params=None, headers=None):
            if path == "/v1/search":
                return {"photos": [PHOTO], "total_results": 10}
            return {"videos": [VIDEO], "total_results": 5}

        with patch.object(client, "_make_request", new=AsyncMock(side_effect=fake_request)) as req:
            result = await client.search(NormalizedQuery(text="waves"))
        assert req.await_count == 2
        assert result.total == 15
        assert {i.type for i in result.items} == {MediaType.IMAGE, MediaType.VIDEO}

    @pytest.mark.asyncio
    async def test_all_tolerates_one_failed_branch(self, client):
        async def fake_request(path, *, params=None, headers=None):
            if path == "/v1/search":
                raise NetworkError("down", source="Pexels")
            return {"videos": [VIDEO], "total_results": 5}

        with patch.object(client, "_make_request", new=AsyncMock(side_effect=fake_request)):
            result = await client.search(NormalizedQuery(text="waves"))
        assert result.total == 5
        assert [i.id for i in result.items] == ["pexels-video-42"]

    @pytest.mark.asyncio
    async def test_gif_query_makes_no_request(self, client):
        with patch.object(client, "_make_request", new=AsyncMock()) as req:
            result = await client.search(NormalizedQuery(text="waves", media_type=MediaType.GIF))
        req.assert_not_awaited()
        assert result.items == []

    @pytest.mark.asyncio
    async def test_photo_params(self, client):
        with patch.object(client, "_make_request", new=AsyncMock(return_value={"photos": [], "total_results": 0})) as req:
            await client.search_photos(
                NormalizedQuery(text="sea", page=2, per_page=5, orientation=Orientation.PORTRAIT, color="blue")
            )
        assert req.call_args.kwargs["params"] == {
            "query": "sea",
            "page": 2,
            "per_page": 5,
            "orientation": "portrait",
            "color": "blue",
        }

    @pytest.mark.asyncio
    async def test_video_params_omit_color(self, client):
        with patch.object(client, "_make_request", new=AsyncMock(return_value={"videos": [], "total_results": 0})) as req:
            await client.search_videos(NormalizedQuery(text="sea", color="blue"))
        assert "color" not in req.call_args.kwargs["params"]

    @pytest.mark.asyncio
    async def test_malformed_payload(self, client):
        with patch.object(client, "_make_request", new=AsyncMock(return_value={"unexpected": []})):
            with pytest.raises(ParseError):
                await client.search(NormalizedQuery(text="sea", media_type=MediaType.IMAGE))


class TestMapping:
    def test_map_photo(self, client):
        item = client._map_photo(PHOTO)
        assert item.source == MediaSource.PEXELS
        assert item.title == "Waves crashing on rocks"
        assert item.thumbnail == PHOTO["src"]["tiny"]
        assert item.preview == PHOTO["src"]["medium"]
        assert item.author == "Ann Lee"
        assert item.author_url == "https://www.pexels.com/@ann"
        assert item.source_url == PHOTO["url"]
        assert [d.label for d in item.downloads] == ["Original", "Large", "Medium", "Small"]
        assert item.downloads[0].width == 4000

    def test_map_photo_fallback_title(self, client):
        item = client._map_photo({**PHOTO, "alt": ""})
        assert item.title == "Pexels Photo 101"

    def test_map_video(self, client):
        item = client._map_video(VIDEO)
        assert item.title == "Pexels Video 42"
        assert item.thumbnail == "https://images.pexels.com/42/pic0.jpg"
        assert item.preview == "https://v/sd.mp4"
        assert item.duration == 12
        assert [d.label for d in item.downloads] == ["hd (1920x1080)", "sd (640x360)"]
        assert item.downloads[0].format == "mp4"
        assert item.downloads[0].size == 9

    def test_map_video_without_sd(self, client):
        video = {**VIDEO, "video_files": [VIDEO["video_files"][1]]}
        assert client._map_video(video).preview == "https://v/hd.mp4"

    def test_map_video_without_files(self, client):
        item = client._map_video({"id": 1})
        assert item.preview == ""
        assert item.downloads == ()
        assert item.thumbnail == ""
