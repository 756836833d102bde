"""Dependency Injection Container

Manages the application's dependency graph, providing lazy initialization
and lifecycle management for all services, repositories, adapters, and handlers.
Components are created on-demand and cached for reuse throughout the application.

Every piece of process-wide state (queues, sessions, observers, the event
bus) is owned here, created on first use and cleared on shutdown.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import timedelta
from typing import TYPE_CHECKING

from ..domain.shared.messages import LogTemplates

logger = logging.getLogger(__name__)

if TYPE_CHECKING:
    import socketio
    from discord.ext.commands import Bot

    from ..application.commands.edit_queue import RemoveTrackHandler, ReorderQueueHandler
    from ..application.commands.play_track import PlayTrackHandler
    from ..application.commands.playback_controls import (
        PausePlaybackHandler,
        ResumePlaybackHandler,
        SetVolumeHandler,
        SkipTrackHandler,
        StopPlaybackHandler,
    )
    from ..application.commands.seek_track import SeekTrackHandler
    from ..application.interfaces.audio_resolver import AudioResolver
    from ..application.interfaces.chat_platform import ChatPlatform
    from ..application.interfaces.observer_transport import ObserverTransport
    from ..application.interfaces.voice_adapter import VoiceAdapter
    from ..application.queries.get_queue import GetQueueHandler
    from ..application.queries.search_tracks import SearchTracksHandler
    from ..application.services.broadcaster import QueueBroadcaster
    from ..application.services.observer_roster import ObserverRoster
    from ..application.services.playback_service import PlaybackApplicationService
    from ..application.services.queue_gateway import QueueGateway
    from ..application.services.session_registry import SessionRegistry
    from ..domain.music.repository import QueueRepository
    from ..domain.shared.events import EventBus
    from ..infrastructure.background.cleanup import SessionSweepJob
    from ..infrastructure.web.realtime import RealtimeHub
    from .settings import Settings


@dataclass
class Container:
    """Dependency injection container.

    This container manages all application dependencies and their lifecycle.
    Components are lazily initialized when first accessed; adapters can be
    passed in up front to replace the Discord and yt-dlp implementations.
    """

    settings: Settings
    _bot: Bot | None = None

    # Process-scoped state
    _event_bus: EventBus | None = None
    _queue_repository: QueueRepository | None = None
    _session_registry: SessionRegistry | None = None
    _observer_roster: ObserverRoster | None = None

    # Infrastructure adapters
    _audio_resolver: AudioResolver | None = None
    _voice_adapter: VoiceAdapter | None = None
    _chat_platform: ChatPlatform | None = None
    _socket_server: socketio.AsyncServer | None = None
    _observer_transport: ObserverTransport | None = None

    # Application services
    _queue_gateway: QueueGateway | None = None
    _playback_service: PlaybackApplicationService | None = None
    _broadcaster: QueueBroadcaster | None = None
    _realtime_hub: RealtimeHub | None = None

    # Command handlers
    _play_track_handler: PlayTrackHandler | None = None
    _skip_track_handler: SkipTrackHandler | None = None
    _stop_playback_handler: StopPlaybackHandler | None = None
    _pause_playback_handler: PausePlaybackHandler | None = None
    _resume_playback_handler: ResumePlaybackHandler | None = None
    _set_volume_handler: SetVolumeHandler | None = None
    _seek_track_handler: SeekTrackHandler | None = None
    _reorder_queue_handler: ReorderQueueHandler | None = None
    _remove_track_handler: RemoveTrackHandler | None = None

    # Query handlers
    _get_queue_handler: GetQueueHandler | None = None
    _search_tracks_handler: SearchTracksHandler | None = None

    # Background jobs
    _session_sweep_job: SessionSweepJob | None = None

    def set_bot(self, bot: Bot) -> None:
        """Set the Discord bot instance."""
        self._bot = bot
        logger.debug(LogTemplates.CONTAINER_BOT_ATTACHED)

    @property
    def bot(self) -> Bot:
        """Get the Discord bot instance."""
        if self._bot is None:
            raise RuntimeError("Bot not initialized. Call set_bot() first.")
        return self._bot

    # === Process-scoped state ===

    @property
    def event_bus(self) -> EventBus:
        if self._event_bus is None:
            from ..domain.shared.events import EventBus

            self._event_bus = EventBus()
        return self._event_bus

    @property
    def queue_repository(self) -> QueueRepository:
        """Get the in-memory queue repository."""
        if self._queue_repository is None:
            from ..infrastructure.persistence.memory_queue_repository import (
                InMemoryQueueRepository,
            )

            self._queue_repository = InMemoryQueueRepository()
        return self._queue_repository

    @property
    def session_registry(self) -> SessionRegistry:
        if self._session_registry is None:
            from ..application.services.session_registry import SessionRegistry

            self._session_registry = SessionRegistry(
                ttl=timedelta(hours=self.settings.sessions.ttl_hours),
                token_bytes=self.settings.sessions.token_bytes,
            )
        return self._session_registry

    @property
    def observer_roster(self) -> ObserverRoster:
        if self._observer_roster is None:
            from ..application.services.observer_roster import ObserverRoster

            self._observer_roster = ObserverRoster()
        return self._observer_roster

    # === Infrastructure Adapters ===

    @property
    def audio_resolver(self) -> AudioResolver:
        """Get the audio resolver."""
        if self._audio_resolver is None:
            from ..infrastructure.audio.ytdlp_resolver import YtDlpResolver

            self._audio_resolver = YtDlpResolver(self.settings.audio)
        return self._audio_resolver

    @property
    def voice_adapter(self) -> VoiceAdapter:
        """Get the voice adapter."""
        if self._voice_adapter is None:
            from ..infrastructure.audio.ffmpeg_player import FFmpegSourceFactory
            from ..infrastructure.discord.adapters.voice_adapter import DiscordVoiceAdapter

            self._voice_adapter = DiscordVoiceAdapter(
                self.bot, FFmpegSourceFactory(self.settings.audio)
            )
        return self._voice_adapter

    @property
    def chat_platform(self) -> ChatPlatform:
        if self._chat_platform is None:
            from ..infrastructure.discord.adapters.chat_platform import DiscordChatPlatform

            self._chat_platform = DiscordChatPlatform(self.bot)
        return self._chat_platform

    @property
    def socket_server(self) -> socketio.AsyncServer:
        """Get the Socket.IO server shared by the web app and the broadcaster."""
        if self._socket_server is None:
            import socketio

            origins = list(self.settings.web.cors_origins)
            self._socket_server = socketio.AsyncServer(
                async_mode="asgi",
                cors_allowed_origins="*" if origins == ["*"] else origins,
            )
        return self._socket_server

    @property
    def observer_transport(self) -> ObserverTransport:
        if self._observer_transport is None:
            from ..infrastructure.web.realtime import SocketIOTransport

            self._observer_transport = SocketIOTransport(self.socket_server)
        return self._observer_transport

    # === Application Services ===

    @property
    def queue_gateway(self) -> QueueGateway:
        if self._queue_gateway is None:
            from ..application.services.queue_gateway import QueueGateway

            self._queue_gateway = QueueGateway(
                voice_channel_id=self.settings.voice_channel_id,
                chat_platform=self.chat_platform,
                queue_repository=self.queue_repository,
            )
        return self._queue_gateway

    @property
    def playback_service(self) -> PlaybackApplicationService:
        """Get the playback application service."""
        if self._playback_service is None:
            from ..application.services.playback_service import PlaybackApplicationService

            self._playback_service = PlaybackApplicationService(
                queue_repository=self.queue_repository,
                voice_adapter=self.voice_adapter,
                audio_resolver=self.audio_resolver,
                event_bus=self.event_bus,
            )
        return self._playback_service

    @property
    def broadcaster(self) -> QueueBroadcaster:
        if self._broadcaster is None:
            from ..application.services.broadcaster import QueueBroadcaster

            self._broadcaster = QueueBroadcaster(
                queue_repository=self.queue_repository,
                transport=self.observer_transport,
                event_bus=self.event_bus,
            )
        return self._broadcaster

    @property
    def realtime_hub(self) -> RealtimeHub:
        if self._realtime_hub is None:
            from ..infrastructure.web.realtime import RealtimeHub

            self._realtime_hub = RealtimeHub(
                transport=self.observer_transport,
                session_registry=self.session_registry,
                observer_roster=self.observer_roster,
                get_queue_handler=self.get_queue_handler,
            )
        return self._realtime_hub

    # === Command Handlers ===

    def _queue_handler_deps(self) -> dict:
        return {
            "gateway": self.queue_gateway,
            "playback_service": self.playback_service,
            "broadcaster": self.broadcaster,
        }

    @property
    def play_track_handler(self) -> PlayTrackHandler:
        """Get the play track command handler."""
        if self._play_track_handler is None:
            from ..application.commands.play_track import PlayTrackHandler

            self._play_track_handler = PlayTrackHandler(
                gateway=self.queue_gateway,
                queue_repository=self.queue_repository,
                audio_resolver=self.audio_resolver,
                voice_adapter=self.voice_adapter,
                chat_platform=self.chat_platform,
                playback_service=self.playback_service,
                broadcaster=self.broadcaster,
                event_bus=self.event_bus,
                text_channel_id=self.settings.text_channel_id,
                default_volume=self.settings.audio.default_volume,
            )
        return self._play_track_handler

    @property
    def skip_track_handler(self) -> SkipTrackHandler:
        if self._skip_track_handler is None:
            from ..application.commands.playback_controls import SkipTrackHandler

            self._skip_track_handler = SkipTrackHandler(**self._queue_handler_deps())
        return self._skip_track_handler

    @property
    def stop_playback_handler(self) -> StopPlaybackHandler:
        if self._stop_playback_handler is None:
            from ..application.commands.playback_controls import StopPlaybackHandler

            self._stop_playback_handler = StopPlaybackHandler(**self._queue_handler_deps())
        return self._stop_playback_handler

    @property
    def pause_playback_handler(self) -> PausePlaybackHandler:
        if self._pause_playback_handler is None:
            from ..application.commands.playback_controls import PausePlaybackHandler

            self._pause_playback_handler = PausePlaybackHandler(**self._queue_handler_deps())
        return self._pause_playback_handler

    @property
    def resume_playback_handler(self) -> ResumePlaybackHandler:
        if self._resume_playback_handler is None:
            from ..application.commands.playback_controls import ResumePlaybackHandler

            self._resume_playback_handler = ResumePlaybackHandler(**self._queue_handler_deps())
        return self._resume_playback_handler

    @property
    def set_volume_handler(self) -> SetVolumeHandler:
        if self._set_volume_handler is None:
            from ..application.commands.playback_controls import SetVolumeHandler

            self._set_volume_handler = SetVolumeHandler(**self._queue_handler_deps())
        return self._set_volume_handler

    @property
    def seek_track_handler(self) -> SeekTrackHandler:
        if self._seek_track_handler is None:
            from ..application.commands.seek_track import SeekTrackHandler

            self._seek_track_handler = SeekTrackHandler(**self._queue_handler_deps())
        return self._seek_track_handler

    @property
    def reorder_queue_handler(self) -> ReorderQueueHandler:
        if self._reorder_queue_handler is None:
            from ..application.commands.edit_queue import ReorderQueueHandler

            self._reorder_queue_handler = ReorderQueueHandler(**self._queue_handler_deps())
        return self._reorder_queue_handler

    @property
    def remove_track_handler(self) -> RemoveTrackHandler:
        if self._remove_track_handler is None:
            from ..application.commands.edit_queue import RemoveTrackHandler

            self._remove_track_handler = RemoveTrackHandler(**self._queue_handler_deps())
        return self._remove_track_handler

    # === Query Handlers ===

    @property
    def get_queue_handler(self) -> GetQueueHandler:
        """Get the get queue query handler."""
        if self._get_queue_handler is None:
            from ..application.queries.get_queue import GetQueueHandler

            self._get_queue_handler = GetQueueHandler(gateway=self.queue_gateway)
        return self._get_queue_handler

    @property
    def search_tracks_handler(self) -> SearchTracksHandler:
        if self._search_tracks_handler is None:
            from ..application.queries.search_tracks import SearchTracksHandler

            self._search_tracks_handler = SearchTracksHandler(
                audio_resolver=self.audio_resolver,
                limit=self.settings.audio.search_limit,
            )
        return self._search_tracks_handler

    # === Background Jobs ===

    @property
    def session_sweep_job(self) -> SessionSweepJob:
        if self._session_sweep_job is None:
            from ..infrastructure.background.cleanup import SessionSweepJob

            self._session_sweep_job = SessionSweepJob(
                session_registry=self.session_registry,
                interval_minutes=self.settings.sessions.sweep_interval_minutes,
            )
        return self._session_sweep_job

    # === Lifecycle ===

    async def initialize(self) -> None:
        """Wire event subscribers and start background jobs."""
        self.broadcaster.start()
        self.session_sweep_job.start()
        logger.info(LogTemplates.CONTAINER_INITIALIZED)

    async def shutdown(self) -> None:
        """Stop jobs, leave voice, and drop all process-scoped state."""
        if self._session_sweep_job is not None:
            await self._session_sweep_job.stop()

        if self._broadcaster is not None:
            self._broadcaster.stop()

        if self._playback_service is not None:
            try:
                await self._playback_service.shutdown()
            except Exception as exc:
                logger.warning("Failed stopping playback: %r", exc)

        if self._queue_repository is not None:
            await self._queue_repository.clear()
        if self._session_registry is not None:
            self._session_registry.clear()
        if self._observer_roster is not None:
            self._observer_roster.clear()
        if self._event_bus is not None:
            self._event_bus.clear()

        logger.info(LogTemplates.CONTAINER_SHUTDOWN)


def create_container(settings: Settings) -> Container:
    """Create a new dependency injection container."""
    return Container(settings)
