"""
Unit Tests for YtDlpCatalog

Tests for the yt-dlp backed media catalog:
- Payload parsing and coercion
- Option building
- Full and flat extraction into tracks
- Related items from the radio list
- Stream URL selection
- Error handling

YoutubeDL itself is always mocked.
"""

from unittest.mock import MagicMock, patch

import pytest

from discord_home_player.config.settings import MediaSettings
from discord_home_player.domain.shared.exceptions import TransientMediaError
from discord_home_player.infrastructure.audio.models import YtDlpEntryInfo, YtDlpOpts
from discord_home_player.infrastructure.audio.ytdlp_catalog import YtDlpCatalog

YDL_PATH = "discord_home_player.infrastructure.audio.ytdlp_catalog.YoutubeDL"

# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def catalog():
    return YtDlpCatalog(MediaSettings(user_agent="TestAgent/1.0"))


@pytest.fixture
def full_info():
    return {
        "id": "dQw4w9WgXcQ",
        "webpage_url": "https://www.youtube.com/watch?v=dQw4w9WgXcQ",
        "title": "Test Song",
        "url": "https://example.com/stream.m4a",
        "duration": 213,
        "thumbnail": "https://example.com/thumb.jpg",
    }


def mock_ydl(return_value=None, side_effect=None):
    """Patch YoutubeDL so extract_info yields ``return_value``."""
    patcher = patch(YDL_PATH)
    mock_cls = patcher.start()
    ydl = mock_cls.return_value.__enter__.return_value
    if side_effect is not None:
        ydl.extract_info.side_effect = side_effect
    else:
        ydl.extract_info.return_value = return_value
    return patcher, mock_cls, ydl


@pytest.fixture
def ydl_patch():
    patchers = []

    def _start(return_value=None, side_effect=None):
        patcher, mock_cls, ydl = mock_ydl(return_value, side_effect)
        patchers.append(patcher)
        return mock_cls, ydl

    yield _start
    for patcher in patchers:
        patcher.stop()


# =============================================================================
# Model Tests
# =============================================================================


class TestYtDlpEntryInfo:
    """Tests for payload coercion and track conversion."""

    def test_garbage_values_coerced(self):
        info = YtDlpEntryInfo.model_validate(
            {"id": "", "title": None, "duration": "abc", "thumbnails": "nope", "formats": None}
        )
        assert info.id is None
        assert info.title == "Unknown Title"
        assert info.duration is None
        assert info.thumbnails == []
        assert info.formats == []

    def test_negative_duration_dropped(self):
        assert YtDlpEntryInfo(duration=-5).duration is None

    def test_first_thumbnail_from_list(self):
        info = YtDlpEntryInfo.model_validate(
            {"thumbnails": [{"url": None}, {"url": "https://t/1.jpg"}, {"url": "https://t/2.jpg"}]}
        )
        assert info.first_thumbnail == "https://t/1.jpg"

    def test_flat_entry_page_url_from_id(self):
        info = YtDlpEntryInfo.model_validate({"id": "abc", "url": "abc", "title": "Flat"})
        assert info.page_url(flat=True) == "https://www.youtube.com/watch?v=abc"

    def test_flat_entry_page_url_from_http_url(self):
        info = YtDlpEntryInfo.model_validate({"url": "https://www.youtube.com/watch?v=abc"})
        assert info.page_url(flat=True) == "https://www.youtube.com/watch?v=abc"

    def test_stream_url_falls_back_to_audio_format(self):
        info = YtDlpEntryInfo.model_validate(
            {
                "formats": [
                    {"url": "https://v/video", "acodec": "none"},
                    {"url": "https://a/low", "acodec": "opus"},
                    {"url": "https://a/high", "acodec": "opus"},
                ]
            }
        )
        assert info.stream_url() == "https://a/high"

    def test_to_track(self, full_info):
        track = YtDlpEntryInfo.model_validate(full_info).to_track(flat=False)

        assert track.title == "Test Song"
        assert track.source_ref == "https://www.youtube.com/watch?v=dQw4w9WgXcQ"
        assert track.duration_display == "3:33"
        assert track.thumbnail_ref == "https://example.com/thumb.jpg"

    def test_to_track_without_reference(self):
        assert YtDlpEntryInfo(title="Orphan").to_track(flat=True) is None


class TestYtDlpOpts:
    def test_none_values_excluded(self):
        params = YtDlpOpts().to_params()
        assert "format" not in params
        assert "playlistend" not in params
        assert params["quiet"] is True

    def test_user_agent_header_sent(self, catalog):
        params = catalog._get_opts().to_params()
        assert params["http_headers"] == {"User-Agent": "TestAgent/1.0"}
        assert params["format"] == "bestaudio/best"

    def test_flat_opts(self, catalog):
        params = catalog._get_flat_opts(playlistend=5).to_params()
        assert params["extract_flat"] == "in_playlist"
        assert params["noplaylist"] is False
        assert params["playlistend"] == 5


# =============================================================================
# Catalog Tests
# =============================================================================


class TestFetchTrack:
    async def test_full_extraction(self, catalog, ydl_patch, full_info):
        _, ydl = ydl_patch(full_info)

        track = await catalog.fetch_track("https://youtu.be/dQw4w9WgXcQ")

        assert track.title == "Test Song"
        ydl.extract_info.assert_called_once_with("https://youtu.be/dQw4w9WgXcQ", download=False)

    async def test_extraction_error_is_transient(self, catalog, ydl_patch):
        ydl_patch(side_effect=Exception("Video unavailable"))

        with pytest.raises(TransientMediaError) as exc_info:
            await catalog.fetch_track("https://youtu.be/gone")

        assert exc_info.value.reference == "https://youtu.be/gone"

    async def test_non_dict_result_is_transient(self, catalog, ydl_patch):
        ydl_patch(None)

        with pytest.raises(TransientMediaError):
            await catalog.fetch_track("https://youtu.be/x")


class TestSearch:
    async def test_search_prefix_and_limit(self, catalog, ydl_patch):
        entries = [{"id": f"id{i}", "title": f"Result {i}"} for i in range(3)]
        _, ydl = ydl_patch({"entries": entries})

        tracks = await catalog.search("never gonna", 2)

        assert [t.title for t in tracks] == ["Result 0", "Result 1"]
        ydl.extract_info.assert_called_once_with("ytsearch2:never gonna", download=False)

    async def test_unusable_entries_skipped(self, catalog, ydl_patch):
        ydl_patch({"entries": [None, {"title": "No id"}, {"id": "ok", "title": "Good"}]})

        tracks = await catalog.search("q", 5)

        assert [t.title for t in tracks] == ["Good"]

    async def test_search_failure_raises(self, catalog, ydl_patch):
        ydl_patch(side_effect=Exception("network"))

        with pytest.raises(TransientMediaError):
            await catalog.search("q", 1)


class TestPlaylistAndRelated:
    async def test_fetch_playlist(self, catalog, ydl_patch):
        ydl_patch({"entries": [{"id": "a", "title": "A"}, {"id": "b", "title": "B"}]})

        tracks = await catalog.fetch_playlist("https://www.youtube.com/playlist?list=PL1")

        assert [t.source_ref for t in tracks] == [
            "https://www.youtube.com/watch?v=a",
            "https://www.youtube.com/watch?v=b",
        ]

    async def test_related_skips_seed(self, catalog, ydl_patch):
        entries = [{"id": "seed", "title": "Seed"}] + [
            {"id": f"r{i}", "title": f"Related {i}"} for i in range(5)
        ]
        mock_cls, ydl = ydl_patch({"entries": entries})

        tracks = await catalog.fetch_related("seed", 3)

        assert [t.title for t in tracks] == ["Related 0", "Related 1", "Related 2"]
        ydl.extract_info.assert_called_once_with(
            "https://www.youtube.com/watch?v=seed&list=RDseed", download=False
        )
        assert mock_cls.call_args.kwargs["params"]["playlistend"] == 4


class TestResolveStream:
    async def test_direct_url(self, catalog, ydl_patch, full_info):
        ydl_patch(full_info)
        assert await catalog.resolve_stream("ref") == "https://example.com/stream.m4a"

    async def test_no_stream_raises(self, catalog, ydl_patch):
        ydl_patch({"title": "No formats"})

        with pytest.raises(TransientMediaError):
            await catalog.resolve_stream("ref")
