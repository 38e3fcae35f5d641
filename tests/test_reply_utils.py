"""Tests for reply formatting helpers."""

from discord_home_player.application.services.playback_models import QueueInfo
from discord_home_player.domain.music.value_objects import PlaylistKind
from discord_home_player.utils.reply import format_queue, playlist_kind_label, truncate

from conftest import make_track


class TestTruncate:
    def test_short_text_unchanged(self):
        assert truncate("hello") == "hello"

    def test_long_text_truncated_with_ellipsis(self):
        result = truncate("x" * 100, 10)
        assert len(result) == 10
        assert result.endswith("…")


class TestPlaylistKindLabel:
    def test_labels(self):
        assert playlist_kind_label(PlaylistKind.MIX) == "Mix"
        assert playlist_kind_label(PlaylistKind.WATCH_LATER) == "Watch Later"
        assert playlist_kind_label(PlaylistKind.LIKES) == "Liked Videos"
        assert playlist_kind_label(PlaylistKind.REGULAR) == "Playlist"


class TestFormatQueue:
    """Tests for the queue listing."""

    def test_now_playing_and_upcoming(self):
        info = QueueInfo(
            current_track=make_track("now"),
            upcoming=[make_track("a"), make_track("b")],
            total=3,
        )
        text = format_queue(info)

        assert "**Now Playing:** Song now" in text
        assert "**Queue:**" in text
        assert "1. Song a" in text
        assert "2. Song b" in text
        assert "more songs" not in text

    def test_only_first_ten_listed(self):
        upcoming = [make_track(str(i)) for i in range(15)]
        info = QueueInfo(current_track=None, upcoming=upcoming, total=15)
        text = format_queue(info)

        assert "10. Song 9" in text
        assert "11." not in text
        assert "... and 5 more songs" in text

    def test_current_only(self):
        info = QueueInfo(current_track=make_track("now"), upcoming=[], total=1)
        text = format_queue(info)

        assert "**Queue:**" not in text
        assert "Song now" in text
