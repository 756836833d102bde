"""Command and handler for playing a track from a URL."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict, field_validator

from discord_music_remote.domain.music.entities import Track, UserRef
from discord_music_remote.domain.shared.events import TrackAddedToQueue
from discord_music_remote.domain.shared.exceptions import (
    ChannelNotJoinableError,
    DomainError,
    EngineFailureError,
)
from discord_music_remote.domain.shared.messages import ErrorMessages, LogTemplates, ResponseMessages
from discord_music_remote.domain.shared.types import NonEmptyStr, NonNegativeInt, VolumePercent

if TYPE_CHECKING:
    from ...domain.music.repository import QueueRepository
    from ...domain.shared.events import EventBus
    from ..interfaces.audio_resolver import AudioResolver
    from ..interfaces.chat_platform import ChatPlatform
    from ..interfaces.voice_adapter import VoiceAdapter
    from ..services.broadcaster import QueueBroadcaster
    from ..services.playback_service import PlaybackApplicationService
    from ..services.queue_gateway import QueueGateway

logger = logging.getLogger(__name__)


class PlayTrackCommand(BaseModel):
    """Request to resolve a URL, queue the track, and start playback if the queue is new."""

    model_config = ConfigDict(frozen=True, strict=True)

    url: NonEmptyStr
    user_id: NonEmptyStr

    @field_validator("url", "user_id", mode="before")
    @classmethod
    def _strip(cls, v: str) -> str:
        if isinstance(v, str):
            return v.strip()
        return v


class PlayTrackResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    message: str
    track: Track
    queue_position: NonNegativeInt
    started_playing: bool = False


class PlayTrackHandler:
    """Resolves a track, appends it to the guild queue, and starts playback if it became current."""

    def __init__(
        self,
        *,
        gateway: QueueGateway,
        queue_repository: QueueRepository,
        audio_resolver: AudioResolver,
        voice_adapter: VoiceAdapter,
        chat_platform: ChatPlatform,
        playback_service: PlaybackApplicationService,
        broadcaster: QueueBroadcaster,
        event_bus: EventBus,
        text_channel_id: int | None = None,
        default_volume: VolumePercent = 50,
    ) -> None:
        self._gateway = gateway
        self._queue_repo = queue_repository
        self._audio_resolver = audio_resolver
        self._voice_adapter = voice_adapter
        self._chat_platform = chat_platform
        self._playback_service = playback_service
        self._broadcaster = broadcaster
        self._event_bus = event_bus
        self._text_channel_id = text_channel_id
        self._default_volume = default_volume

    async def _requester(self, user_id: str) -> UserRef:
        try:
            user = await self._chat_platform.fetch_user(user_id)
        except Exception as exc:
            logger.warning(LogTemplates.USER_FETCH_FAILED, user_id, exc)
            user = None
        return user or UserRef.unknown(user_id)

    async def _resolve_track(self, url: str) -> Track:
        try:
            track = await self._audio_resolver.resolve(url)
        except DomainError:
            raise
        except Exception as exc:
            raise EngineFailureError(str(exc) or ErrorMessages.TRACK_RESOLVE_FAILED.format(query=url)) from exc
        if track is None:
            raise EngineFailureError(ErrorMessages.TRACK_RESOLVE_FAILED.format(query=url))
        return track

    async def handle(self, command: PlayTrackCommand) -> PlayTrackResult:
        channel = await self._gateway.resolve_voice_channel()
        requester = await self._requester(command.user_id)
        track = (await self._resolve_track(command.url)).with_requester(requester)

        if not await self._voice_adapter.ensure_connected(channel.guild_id, channel.channel_id):
            raise ChannelNotJoinableError(channel.channel_id)

        queue, created = await self._queue_repo.get_or_create(channel.guild_id)
        position = queue.enqueue(track)
        logger.info(LogTemplates.QUEUE_ENQUEUED, track.title, position, channel.guild_id)

        if created:
            queue.voice_channel_id = channel.channel_id
            queue.volume = self._default_volume
            queue.text_channel_id = await self._chat_platform.find_announcement_channel(
                channel.guild_id, self._text_channel_id
            )
            logger.info(LogTemplates.QUEUE_CREATED, channel.guild_id)

        started = False
        if position == 0:
            started = await self._playback_service.start_current(channel.guild_id)
            if not started:
                await self._broadcaster.broadcast(channel.guild_id)
                raise EngineFailureError(ErrorMessages.ENGINE_OPERATION_FAILED.format(operation="start playback"))
        else:
            await self._event_bus.publish(
                TrackAddedToQueue(
                    guild_id=channel.guild_id,
                    track_id=track.id,
                    track_title=track.title,
                    duration_seconds=track.duration_seconds,
                    added_by_name=requester.display_name,
                    queue_position=position,
                    text_channel_id=queue.text_channel_id,
                )
            )

        await self._broadcaster.broadcast(channel.guild_id)
        return PlayTrackResult(
            message=ResponseMessages.PLAY_ACCEPTED,
            track=track,
            queue_position=position,
            started_playing=started,
        )
