"""Tests for media domain entities."""

import pytest

from media_hunter.core.exceptions import InvalidParameterError
from media_hunter.domain.entities.media import (
    ALL_TYPES,
    AggregateResult,
    DownloadOption,
    MediaItem,
    MediaSource,
    MediaType,
    NormalizedQuery,
    ProviderResult,
    SourceOutcome,
    SourceSummary,
)


class TestNormalizedQuery:
    def test_defaults(self):
        q = NormalizedQuery(text="cats")
        assert q.media_type == ALL_TYPES
        assert q.page == 1
        assert q.per_page == 20
        assert q.orientation is None

    def test_frozen(self):
        q = NormalizedQuery(text="cats")
        with pytest.raises(AttributeError):
            q.text = "dogs"  # type: ignore[misc]

    @pytest.mark.parametrize("page", [0, -1])
    def test_page_below_one_rejected(self, page):
        with pytest.raises(InvalidParameterError):
            NormalizedQuery(text="cats", page=page)

    @pytest.mark.parametrize("per_page", [0, 51])
    def test_per_page_out_of_range_rejected(self, per_page):
        with pytest.raises(InvalidParameterError):
            NormalizedQuery(text="cats", per_page=per_page)

    def test_wants_all(self):
        q = NormalizedQuery(text="cats")
        assert all(q.wants(t) for t in MediaType)

    def test_wants_specific(self):
        q = NormalizedQuery(text="cats", media_type=MediaType.GIF)
        assert q.wants(MediaType.GIF)
        assert not q.wants(MediaType.IMAGE)

    def test_has_text(self):
        assert NormalizedQuery(text="cats").has_text
        assert not NormalizedQuery(text="   ").has_text


class TestMediaSource:
    def test_declaration_order(self):
        assert [s.value for s in MediaSource] == ["pexels", "pixabay", "giphy", "freesound"]

    def test_display_name(self):
        assert MediaSource.FREESOUND.display_name == "Freesound"


class TestMediaItem:
    def _item(self, **kwargs):
        defaults = dict(
            id="pexels-photo-1",
            type=MediaType.IMAGE,
            source=MediaSource.PEXELS,
            title="Blue sea",
            thumbnail="t",
            preview="p",
            author="Ann",
            source_url="https://pexels.com/photo/1",
        )
        defaults.update(kwargs)
        return MediaItem(**defaults)

    def test_text_signature(self):
        item = self._item(description="waves at dusk", tags=("ocean", "water"))
        assert item.text_signature == "Blue sea waves at dusk ocean water"

    def test_text_signature_title_only(self):
        assert self._item().text_signature == "Blue sea"

    def test_to_dict_camel_case(self):
        item = self._item(
            author_url="https://pexels.com/@ann",
            width=100,
            height=50,
            downloads=(DownloadOption(label="Original", url="u", format="jpg"),),
        )
        d = item.to_dict()
        assert d["sourceUrl"] == "https://pexels.com/photo/1"
        assert d["authorUrl"] == "https://pexels.com/@ann"
        assert d["type"] == "image"
        assert d["source"] == "pexels"
        assert d["downloads"] == [{"label": "Original", "url": "u", "format": "jpg"}]

    def test_to_dict_omits_absent_optionals(self):
        d = self._item().to_dict()
        for key in ("description", "authorUrl", "duration", "width", "height", "tags"):
            assert key not in d

    def test_frozen(self):
        item = self._item()
        with pytest.raises(AttributeError):
            item.title = "x"  # type: ignore[misc]


class TestDownloadOption:
    def test_to_dict_keeps_present_fields(self):
        d = DownloadOption(label="HD", url="u", format="mp4", quality="hd", width=1920, height=1080, size=10).to_dict()
        assert d == {
            "label": "HD",
            "url": "u",
            "format": "mp4",
            "quality": "hd",
            "width": 1920,
            "height": 1080,
            "size": 10,
        }


class TestResults:
    def test_provider_result_empty(self):
        r = ProviderResult.empty()
        assert r.items == []
        assert r.total == 0
        assert ProviderResult.empty() is not r

    def test_source_outcome_ok(self):
        assert SourceOutcome(source=MediaSource.GIPHY).ok
        assert not SourceOutcome(source=MediaSource.GIPHY, error="boom").ok

    def test_source_summary_to_dict(self):
        assert SourceSummary(MediaSource.PEXELS, 3).to_dict() == {"source": "pexels", "count": 3}
        assert SourceSummary(MediaSource.PEXELS, 0, "timeout").to_dict() == {
            "source": "pexels",
            "count": 0,
            "error": "timeout",
        }

    def test_aggregate_result_to_dict(self):
        result = AggregateResult(
            items=[],
            total_results=7,
            page=2,
            per_page=10,
            sources=[SourceSummary(MediaSource.GIPHY, 0)],
        )
        assert result.to_dict() == {
            "items": [],
            "totalResults": 7,
            "page": 2,
            "perPage": 10,
            "sources": [{"source": "giphy", "count": 0}],
        }
