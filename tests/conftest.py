import pytest

from discord_music_remote.application.interfaces.audio_resolver import AudioResolver
from discord_music_remote.application.interfaces.chat_platform import ChatPlatform, VoiceChannelInfo
from discord_music_remote.application.interfaces.observer_transport import ObserverTransport
from discord_music_remote.application.interfaces.voice_adapter import VoiceAdapter
from discord_music_remote.domain.music.entities import GuildQueue, Track, UserRef
from discord_music_remote.domain.music.value_objects import TrackId

GUILD_ID = 111111111111111111
VOICE_CHANNEL_ID = 222222222222222222
TEXT_CHANNEL_ID = 333333333333333333
USER_ID = "444444444444444444"


def make_track(n: int = 1, **overrides) -> Track:
    """Build a resolvable, seekable track numbered *n*."""
    fields = {
        "id": TrackId(f"track-{n}"),
        "title": f"Song {n}",
        "url": f"https://www.youtube.com/watch?v=video{n:05d}x",
        "stream_url": f"https://stream.example.com/{n}",
        "duration_seconds": 180,
        "uploader": f"Artist {n}",
    }
    fields.update(overrides)
    return Track(**fields)


# ============================================================================
# Port fakes
# ============================================================================


class FakeVoiceAdapter(VoiceAdapter):
    """Records engine calls. Stopping a loaded source fires the track-end
    callback the way discord.py does."""

    def __init__(self) -> None:
        self.connect_ok = True
        self.play_ok = True
        self.plays: list[tuple[int, Track, float, float]] = []
        self.stops: list[int] = []
        self.volumes: list[tuple[int, float]] = []
        self.active: set[int] = set()
        self.paused: set[int] = set()
        self.disconnected_all = False
        self._callback = None

    async def ensure_connected(self, guild_id, channel_id) -> bool:
        return self.connect_ok

    async def disconnect(self, guild_id) -> bool:
        return True

    async def disconnect_all(self) -> None:
        self.disconnected_all = True

    async def play(self, guild_id, track, *, start_seconds=0.0, volume=0.5) -> bool:
        if not self.play_ok:
            return False
        self.plays.append((guild_id, track, start_seconds, volume))
        self.active.add(guild_id)
        self.paused.discard(guild_id)
        return True

    async def stop(self, guild_id) -> bool:
        self.stops.append(guild_id)
        if guild_id in self.active:
            self.active.discard(guild_id)
            self.paused.discard(guild_id)
            await self.finish(guild_id)
        return True

    async def pause(self, guild_id) -> bool:
        if guild_id not in self.active or guild_id in self.paused:
            return False
        self.paused.add(guild_id)
        return True

    async def resume(self, guild_id) -> bool:
        if guild_id not in self.paused:
            return False
        self.paused.discard(guild_id)
        return True

    def set_volume(self, guild_id, volume) -> bool:
        self.volumes.append((guild_id, volume))
        return guild_id in self.active

    def is_connected(self, guild_id) -> bool:
        return True

    def is_active(self, guild_id) -> bool:
        return guild_id in self.active

    def set_on_track_end_callback(self, callback) -> None:
        self._callback = callback

    async def finish(self, guild_id, error: Exception | None = None) -> None:
        """Simulate the engine reporting the end of the loaded source."""
        self.active.discard(guild_id)
        if self._callback is not None:
            await self._callback(guild_id, error)


class FakeAudioResolver(AudioResolver):
    def __init__(self) -> None:
        self.tracks: dict[str, Track] = {}
        self.search_results: list[Track] = []
        self.search_error: Exception | None = None
        self.resolved: list[str] = []
        self._counter = 0

    async def resolve(self, query):
        self.resolved.append(query)
        if query in self.tracks:
            return self.tracks[query]
        if not query.startswith("https://"):
            return None
        self._counter += 1
        return make_track(self._counter, url=query, title=f"Resolved {self._counter}")

    async def search(self, query, limit=10):
        if self.search_error is not None:
            raise self.search_error
        return self.search_results[:limit]

    def is_url(self, query) -> bool:
        return query.startswith(("http://", "https://"))


class FakeChatPlatform(ChatPlatform):
    def __init__(self, voice_channel_id: int = VOICE_CHANNEL_ID, guild_id: int = GUILD_ID) -> None:
        self.channels: dict[int, VoiceChannelInfo] = {
            voice_channel_id: VoiceChannelInfo(channel_id=voice_channel_id, guild_id=guild_id, name="Music"),
        }
        self.users: dict[str, UserRef] = {
            USER_ID: UserRef(id=USER_ID, display_name="Alice", avatar_url="https://cdn.example.com/a.png"),
        }
        self.sent: list[tuple[int, str]] = []
        self.deleted: list[tuple[str, int]] = []
        self.announcement_channel: int | None = TEXT_CHANNEL_ID

    async def fetch_channel(self, channel_id):
        return self.channels.get(channel_id)

    async def fetch_user(self, user_id):
        return self.users.get(user_id)

    async def find_announcement_channel(self, guild_id, preferred_id):
        return preferred_id or self.announcement_channel

    async def send_message(self, channel_id, content) -> None:
        self.sent.append((channel_id, content))

    async def delete_direct_message(self, user_id, message_id) -> bool:
        self.deleted.append((user_id, message_id))
        return True


class FakeTransport(ObserverTransport):
    def __init__(self) -> None:
        self.broadcasts: list[tuple[str, object, str | None]] = []
        self.direct: list[tuple[str, str, object]] = []
        self.fail = False

    async def emit_to_all(self, event, payload, *, skip=None) -> None:
        if self.fail:
            from discord_music_remote.domain.shared.exceptions import DeliveryFailureError

            raise DeliveryFailureError("all observers")
        self.broadcasts.append((event, payload, skip))

    async def emit_to(self, connection_id, event, payload) -> None:
        self.direct.append((connection_id, event, payload))

    def events(self, name: str) -> list:
        return [payload for event, payload, _ in self.broadcasts if event == name]


# ============================================================================
# Fixtures
# ============================================================================


@pytest.fixture
def voice_adapter():
    return FakeVoiceAdapter()


@pytest.fixture
def audio_resolver():
    return FakeAudioResolver()


@pytest.fixture
def chat_platform():
    return FakeChatPlatform()


@pytest.fixture
def transport():
    return FakeTransport()


@pytest.fixture
def settings():
    from discord_music_remote.config.settings import Settings

    return Settings(
        _env_file=None,
        discord_token="test-token",
        voice_channel_id=VOICE_CHANNEL_ID,
        text_channel_id=TEXT_CHANNEL_ID,
        web_ui_url="https://music.example.com/",
    )


@pytest.fixture
def container(settings, voice_adapter, audio_resolver, chat_platform, transport):
    """Real container wired to the port fakes."""
    from discord_music_remote.config.container import Container

    return Container(
        settings=settings,
        _voice_adapter=voice_adapter,
        _audio_resolver=audio_resolver,
        _chat_platform=chat_platform,
        _observer_transport=transport,
    )


@pytest.fixture
def sample_track():
    return make_track(1)


@pytest.fixture
def sample_user():
    return UserRef(id=USER_ID, display_name="Alice", avatar_url="https://cdn.example.com/a.png")


@pytest.fixture
def playing_queue(container):
    """A queue with Song 1 playing and Songs 2-4 upcoming, stored in the container."""
    queue = GuildQueue(guild_id=GUILD_ID, voice_channel_id=VOICE_CHANNEL_ID, text_channel_id=TEXT_CHANNEL_ID)
    for n in range(1, 5):
        queue.enqueue(make_track(n))
    queue.start_clock(0.0)
    container.queue_repository._queues[GUILD_ID] = queue
    container.voice_adapter.active.add(GUILD_ID)
    return queue
