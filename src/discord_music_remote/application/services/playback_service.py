"""Playback Application Service - drives the playback engine for a queue."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from ...domain.shared.events import (
    PlaybackFailed,
    QueueExhausted,
    TrackFinishedPlaying,
    TrackStartedPlaying,
)
from ...domain.shared.exceptions import EngineFailureError
from ...domain.shared.messages import ErrorMessages, LogTemplates
from ...domain.shared.types import DiscordSnowflake

if TYPE_CHECKING:
    from ...domain.music.entities import GuildQueue, Track
    from ...domain.music.repository import QueueRepository
    from ...domain.shared.events import EventBus
    from ..interfaces.audio_resolver import AudioResolver
    from ..interfaces.voice_adapter import VoiceAdapter

logger = logging.getLogger(__name__)


class PlaybackApplicationService:
    """Orchestrates audio playback across the queue, voice adapter, and audio resolver.

    Commands call in here for anything that touches the engine; the engine
    calls back in through ``_on_voice_track_end`` when a track ends by itself.
    """

    _MAX_RESOLVE_RETRIES: int = 3

    def __init__(
        self,
        *,
        queue_repository: QueueRepository,
        voice_adapter: VoiceAdapter,
        audio_resolver: AudioResolver,
        event_bus: EventBus,
    ) -> None:
        self._queue_repo = queue_repository
        self._voice_adapter = voice_adapter
        self._audio_resolver = audio_resolver
        self._event_bus = event_bus

        # When we intentionally stop audio (skip/stop/seek), discord.py still fires
        # the "after" callback. Suppress the next event per guild to avoid double-advancing.
        self._ignore_next_voice_track_end: set[DiscordSnowflake] = set()

        self._voice_adapter.set_on_track_end_callback(self._on_voice_track_end)

    # ── Engine-driven transitions ───────────────────────────────────

    async def _on_voice_track_end(self, guild_id: DiscordSnowflake, error: Exception | None) -> None:
        if guild_id in self._ignore_next_voice_track_end:
            self._ignore_next_voice_track_end.discard(guild_id)
            logger.debug(LogTemplates.PLAYBACK_IGNORING_CALLBACK, guild_id)
            return

        queue = await self._queue_repo.get(guild_id)
        if queue is None or queue.current is None:
            return

        await self.handle_track_finished(queue, queue.current, error=error)

    async def handle_track_finished(
        self, queue: GuildQueue, track: Track, *, error: Exception | None = None
    ) -> None:
        """Advance past a track that ended on its own.

        The queue is advanced and the next track started before any event is
        published, so a command running while subscribers are notified sees
        the queue already moved on.
        """
        guild_id = queue.guild_id
        if queue.current is not track:
            logger.debug(LogTemplates.PLAYBACK_IGNORING_CALLBACK, guild_id)
            return

        logger.info(LogTemplates.TRACK_FINISHED, track.title, guild_id)

        if queue.advance() is not None:
            await self.start_current(guild_id)

        if error is not None:
            await self._event_bus.publish(
                PlaybackFailed(
                    guild_id=guild_id,
                    track_title=track.title,
                    error=str(error),
                    text_channel_id=queue.text_channel_id,
                )
            )

        if queue.is_empty:
            if await self._queue_repo.get(guild_id) is queue:
                await self._queue_repo.delete(guild_id)
            logger.info(LogTemplates.QUEUE_EXHAUSTED, guild_id)
            await self._event_bus.publish(
                QueueExhausted(
                    guild_id=guild_id,
                    last_track_id=track.id,
                    last_track_title=track.title,
                    text_channel_id=queue.text_channel_id,
                )
            )
            return

        await self._event_bus.publish(
            TrackFinishedPlaying(guild_id=guild_id, track_id=track.id, track_title=track.title)
        )

    # ── Starting tracks ─────────────────────────────────────────────

    async def start_current(self, guild_id: DiscordSnowflake) -> bool:
        """Start the queue's current track from the beginning.

        If the track cannot be resolved or the engine refuses it, the track is
        dropped and the next one is tried, up to ``_MAX_RESOLVE_RETRIES`` times.
        A queue left empty by dropped tracks is deleted.
        """
        for attempt in range(self._MAX_RESOLVE_RETRIES):
            queue = await self._queue_repo.get(guild_id)
            if queue is None or queue.current is None:
                return False

            track = queue.current
            try:
                track = await self._ensure_stream_url(track)
                queue.songs[0] = track
                await self._start_voice_playback(queue, track, start_seconds=0.0)
            except Exception as exc:
                logger.exception(LogTemplates.PLAYBACK_FAILED_START, track.title)
                logger.warning(
                    LogTemplates.PLAYBACK_RESOLVE_RETRY, track.title, attempt + 1, self._MAX_RESOLVE_RETRIES
                )
                await self._drop_current(queue, track, exc)
                continue

            await self._event_bus.publish(
                TrackStartedPlaying(
                    guild_id=guild_id,
                    track_id=track.id,
                    track_title=track.title,
                    duration_seconds=track.duration_seconds,
                    added_by_name=track.added_by.display_name if track.added_by else None,
                    text_channel_id=queue.text_channel_id,
                )
            )
            return True

        return False

    async def _ensure_stream_url(self, track: Track) -> Track:
        if track.stream_url:
            return track

        resolved = await self._audio_resolver.resolve(track.url)
        if resolved is None or not resolved.stream_url:
            raise EngineFailureError(ErrorMessages.TRACK_RESOLVE_FAILED.format(query=track.url))
        return track.with_stream_url(resolved.stream_url)

    async def _start_voice_playback(self, queue: GuildQueue, track: Track, *, start_seconds: float) -> None:
        success = await self._voice_adapter.play(
            queue.guild_id,
            track,
            start_seconds=start_seconds,
            volume=queue.volume / 100,
        )
        if not success:
            raise EngineFailureError(ErrorMessages.ENGINE_OPERATION_FAILED.format(operation="start playback"))
        queue.start_clock(start_seconds)
        logger.info(LogTemplates.PLAYBACK_STARTED, track.title, queue.guild_id)

    async def _drop_current(self, queue: GuildQueue, track: Track, exc: Exception) -> None:
        queue.advance()
        logger.warning(LogTemplates.TRACK_DROPPED, track.title, queue.guild_id)
        await self._event_bus.publish(
            PlaybackFailed(
                guild_id=queue.guild_id,
                track_title=track.title,
                error=str(exc),
                text_channel_id=queue.text_channel_id,
            )
        )
        if queue.is_empty:
            await self._queue_repo.delete(queue.guild_id)
            logger.info(LogTemplates.QUEUE_DELETED, queue.guild_id)

    # ── Command-driven transitions ──────────────────────────────────

    def _suppress_next_track_end(self, guild_id: DiscordSnowflake) -> None:
        # discord.py only fires "after" for a source that is still loaded.
        if self._voice_adapter.is_active(guild_id):
            self._ignore_next_voice_track_end.add(guild_id)

    async def _stop_engine(self, guild_id: DiscordSnowflake) -> bool:
        self._suppress_next_track_end(guild_id)
        try:
            await self._voice_adapter.stop(guild_id)
            return True
        except Exception:
            # Stop failed; the voice callback may still fire normally,
            # so remove the suppression flag to avoid stalling the queue.
            self._ignore_next_voice_track_end.discard(guild_id)
            logger.exception(LogTemplates.PLAYBACK_FAILED_STOP, guild_id)
            return False

    async def skip(self, guild_id: DiscordSnowflake) -> Track | None:
        """Drop the current track and start the next one.

        Returns the skipped track, or None if nothing was skipped.
        """
        queue = await self._queue_repo.get(guild_id)
        if queue is None or queue.current is None:
            return None

        skipped = queue.current
        if not await self._stop_engine(guild_id):
            return None

        if queue.advance() is not None:
            await self.start_current(guild_id)
        if queue.is_empty:
            await self._queue_repo.delete(guild_id)

        logger.info(LogTemplates.TRACK_SKIPPED, skipped.title, guild_id)
        return skipped

    async def stop(self, guild_id: DiscordSnowflake) -> bool:
        """Halt playback, clear the queue and forget it. Stays in the voice channel."""
        queue = await self._queue_repo.get(guild_id)
        if not await self._stop_engine(guild_id):
            return False

        if queue is not None:
            count = queue.clear()
            logger.info(LogTemplates.QUEUE_CLEARED, count, guild_id)
        await self._queue_repo.delete(guild_id)
        logger.info(LogTemplates.PLAYBACK_STOPPED, guild_id)
        return True

    async def seek(self, guild_id: DiscordSnowflake, position: float) -> bool:
        """Restart the current track at *position* seconds, keeping pause state.

        A track the engine cannot restart is dropped and the next one started.
        """
        queue = await self._queue_repo.get(guild_id)
        if queue is None or queue.current is None:
            return False

        track = queue.current
        was_paused = queue.paused
        if not await self._stop_engine(guild_id):
            return False

        try:
            await self._start_voice_playback(queue, track, start_seconds=position)
        except Exception as exc:
            logger.exception(LogTemplates.PLAYBACK_ERROR, guild_id, track.title)
            await self._drop_current(queue, track, exc)
            if not queue.is_empty:
                await self.start_current(guild_id)
            return False

        if was_paused:
            try:
                paused = await self._voice_adapter.pause(guild_id)
            except Exception:
                logger.exception(LogTemplates.PLAYBACK_FAILED_PAUSE, guild_id)
                paused = False
            if not paused:
                # Audio is running again; let the queue say so.
                queue.resume()

        queue.seek_to(position)
        return True

    async def pause(self, guild_id: DiscordSnowflake) -> bool:
        queue = await self._queue_repo.get(guild_id)
        if queue is None:
            return False

        try:
            if not await self._voice_adapter.pause(guild_id):
                return False
        except Exception:
            logger.exception(LogTemplates.PLAYBACK_FAILED_PAUSE, guild_id)
            return False

        queue.pause()
        logger.info(LogTemplates.PLAYBACK_PAUSED, guild_id)
        return True

    async def resume(self, guild_id: DiscordSnowflake) -> bool:
        queue = await self._queue_repo.get(guild_id)
        if queue is None:
            return False

        try:
            if not await self._voice_adapter.resume(guild_id):
                return False
        except Exception:
            logger.exception(LogTemplates.PLAYBACK_FAILED_RESUME, guild_id)
            return False

        queue.resume()
        logger.info(LogTemplates.PLAYBACK_RESUMED, guild_id)
        return True

    async def set_volume(self, guild_id: DiscordSnowflake, level: int) -> bool:
        queue = await self._queue_repo.get(guild_id)
        if queue is None:
            return False

        queue.set_volume(level)
        try:
            # False only means no source is loaded yet; the next play() picks the level up.
            self._voice_adapter.set_volume(guild_id, level / 100)
        except Exception:
            logger.exception(LogTemplates.PLAYBACK_FAILED_VOLUME, guild_id)
            return False

        logger.info(LogTemplates.PLAYBACK_VOLUME_SET, level, guild_id)
        return True

    async def shutdown(self) -> None:
        """Stop every queue and leave voice."""
        for queue in await self._queue_repo.all():
            await self._stop_engine(queue.guild_id)
        await self._queue_repo.clear()
        try:
            await self._voice_adapter.disconnect_all()
        except Exception:
            logger.debug(LogTemplates.VOICE_CLEANUP_ERROR)
