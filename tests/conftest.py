import asyncio

import pytest
import pytest_asyncio

from discord_home_player.application.interfaces.media_catalog import MediaCatalog
from discord_home_player.application.interfaces.voice_adapter import VoiceAdapter
from discord_home_player.domain.music.entities import Track
from discord_home_player.domain.shared.exceptions import TransientMediaError

HOME_CHANNEL = 100000000000000001
CHANNEL_A = 200000000000000002
CHANNEL_B = 300000000000000003


def make_track(name: str, **kwargs) -> Track:
    return Track(
        title=kwargs.pop("title", f"Song {name}"),
        source_ref=kwargs.pop("source_ref", f"https://www.youtube.com/watch?v={name}"),
        **kwargs,
    )


# ============================================================================
# Fakes
# ============================================================================


class FakeVoiceAdapter(VoiceAdapter):
    """In-memory voice transport.

    ``connect_results`` maps channel id to the outcome of a connect attempt
    (default True). ``connect_gate`` (when set) holds every connect until
    the event is released.
    """

    def __init__(self) -> None:
        self.channel_id: int | None = None
        self.connect_calls: list[int] = []
        self.disconnect_calls = 0
        self.connect_results: dict[int, bool] = {}
        self.connect_gate: asyncio.Event | None = None
        self.play_result = True
        self.played: list[tuple[Track, str, int]] = []
        self.stop_calls = 0
        self.paused = False
        self.playing = False
        self.on_track_end = None
        self.on_connection_lost = None

    async def connect(self, channel_id: int, *, timeout: float) -> bool:
        self.connect_calls.append(channel_id)
        if self.connect_gate is not None:
            await self.connect_gate.wait()
        ok = self.connect_results.get(channel_id, True)
        if ok:
            self.channel_id = channel_id
        return ok

    async def disconnect(self) -> None:
        self.disconnect_calls += 1
        self.channel_id = None
        self.playing = False
        self.paused = False

    def is_connected(self) -> bool:
        return self.channel_id is not None

    def get_current_channel_id(self) -> int | None:
        return self.channel_id

    async def play(self, track: Track, stream_url: str, *, token: int) -> bool:
        if not self.play_result or self.channel_id is None:
            return False
        self.played.append((track, stream_url, token))
        self.playing = True
        self.paused = False
        return True

    async def stop(self) -> None:
        self.stop_calls += 1
        self.playing = False
        self.paused = False

    async def pause(self) -> bool:
        if not self.playing:
            return False
        self.playing = False
        self.paused = True
        return True

    async def resume(self) -> bool:
        if not self.paused:
            return False
        self.paused = False
        self.playing = True
        return True

    def set_on_track_end_callback(self, callback) -> None:
        self.on_track_end = callback

    def set_on_connection_lost_callback(self, callback) -> None:
        self.on_connection_lost = callback

    # Test helpers

    @property
    def played_titles(self) -> list[str]:
        return [track.title for track, _, _ in self.played]

    @property
    def last_token(self) -> int:
        return self.played[-1][2]

    async def finish_current(self, error: Exception | None = None, token: int | None = None) -> None:
        """Simulate the end of the current stream."""
        self.playing = False
        await self.on_track_end(self.last_token if token is None else token, error)

    async def drop(self, channel_id: int, reason: str = "kicked") -> None:
        """Simulate the transport losing the connection."""
        self.channel_id = None
        self.playing = False
        await self.on_connection_lost(channel_id, reason)


class FakeMediaCatalog(MediaCatalog):
    """In-memory media catalog keyed by reference strings."""

    def __init__(self) -> None:
        self.tracks: dict[str, Track] = {}
        self.search_results: dict[str, list[Track]] = {}
        self.playlists: dict[str, list[Track]] = {}
        self.related: dict[str, list[Track]] = {}
        self.failing: set[str] = set()
        self.stream_failures: set[str] = set()
        self.fetch_calls: list[str] = []
        self.search_calls: list[tuple[str, int]] = []
        self.related_calls: list[tuple[str, int]] = []
        self.playlist_calls: list[str] = []
        self.stream_calls: list[str] = []
        self.delay: float = 0.0

    def _fail(self, reference: str) -> None:
        if reference in self.failing:
            raise TransientMediaError(f"Lookup failed for {reference}", reference=reference)

    async def fetch_track(self, reference: str) -> Track:
        self.fetch_calls.append(reference)
        if self.delay:
            await asyncio.sleep(self.delay)
        self._fail(reference)
        if reference not in self.tracks:
            raise TransientMediaError(f"Lookup failed for {reference}", reference=reference)
        return self.tracks[reference]

    async def fetch_related(self, item_id: str, limit: int) -> list[Track]:
        self.related_calls.append((item_id, limit))
        self._fail(item_id)
        return list(self.related.get(item_id, []))[:limit]

    async def search(self, query: str, limit: int) -> list[Track]:
        self.search_calls.append((query, limit))
        if self.delay:
            await asyncio.sleep(self.delay)
        self._fail(query)
        return list(self.search_results.get(query, []))[:limit]

    async def fetch_playlist(self, reference: str) -> list[Track]:
        self.playlist_calls.append(reference)
        self._fail(reference)
        return list(self.playlists.get(reference, []))

    async def resolve_stream(self, source_ref: str) -> str:
        self.stream_calls.append(source_ref)
        if source_ref in self.stream_failures:
            raise TransientMediaError(f"No stream URL found for {source_ref}", reference=source_ref)
        return f"https://stream.example/{source_ref.rsplit('=', 1)[-1]}"


# ============================================================================
# Global state fixtures
# ============================================================================


@pytest.fixture(autouse=True)
def reset_event_bus():
    """Give every test a fresh global event bus."""
    from discord_home_player.domain.shared.events import reset_event_bus as _reset

    _reset()
    yield
    _reset()


@pytest.fixture(autouse=True)
def reset_settings_cache():
    from discord_home_player.config.settings import clear_settings_cache

    clear_settings_cache()
    yield
    clear_settings_cache()


# ============================================================================
# Component fixtures
# ============================================================================


@pytest.fixture
def voice():
    return FakeVoiceAdapter()


@pytest.fixture
def catalog():
    return FakeMediaCatalog()


@pytest.fixture
def sample_track():
    """Create a sample track for testing."""
    return Track(
        title="Test Track",
        source_ref="https://www.youtube.com/watch?v=test123",
        duration_display="3:00",
        thumbnail_ref="https://i.ytimg.com/vi/test123/hqdefault.jpg",
    )


@pytest_asyncio.fixture
async def idle_timer():
    from discord_home_player.application.services.idle_timer import IdleTimer

    timer = IdleTimer()
    yield timer
    timer.cancel()


@pytest.fixture
def session_manager(voice):
    from discord_home_player.application.services.session_manager import SessionManager

    return SessionManager(voice_adapter=voice, connect_timeout_s=1.0)


@pytest.fixture
def engine(voice, catalog, session_manager, idle_timer):
    from discord_home_player.application.services.playback_engine import PlaybackEngine

    return PlaybackEngine(
        voice_adapter=voice,
        catalog=catalog,
        session_manager=session_manager,
        idle_timer=idle_timer,
        idle_timeout_ms=60_000,
        retry_delay_ms=0,
        stream_timeout_s=1.0,
    )


@pytest.fixture
def track_resolver(catalog):
    from discord_home_player.application.services.track_cache import TrackInfoCache
    from discord_home_player.application.services.track_resolver import TrackResolver

    return TrackResolver(catalog=catalog, cache=TrackInfoCache(), lookup_timeout_s=1.0)


@pytest.fixture
def playlist_resolver(catalog, track_resolver):
    from discord_home_player.application.services.playlist_resolver import PlaylistResolver

    return PlaylistResolver(catalog=catalog, track_resolver=track_resolver, playlist_timeout_s=1.0)


@pytest.fixture
def orchestrator(engine, session_manager, idle_timer, track_resolver, playlist_resolver):
    from discord_home_player.application.services.orchestrator import PlaybackOrchestrator

    return PlaybackOrchestrator(
        engine=engine,
        session_manager=session_manager,
        idle_timer=idle_timer,
        track_resolver=track_resolver,
        playlist_resolver=playlist_resolver,
        home_channel_id=HOME_CHANNEL,
        leave_grace_ms=0,
        startup_join_delay_s=0.0,
    )
