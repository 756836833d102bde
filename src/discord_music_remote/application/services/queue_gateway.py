"""Queue Access Gateway: the one lookup path to "the queue".

The deployment is bound to a single configured voice channel. Every command
resolves its queue here, so there is exactly one authoritative queue per
process.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from ...domain.shared.exceptions import ChannelNotFoundError, NoActiveQueueError, NotConfiguredError
from ...domain.shared.messages import LogTemplates

if TYPE_CHECKING:
    from ...domain.music.entities import GuildQueue
    from ...domain.music.repository import QueueRepository
    from ..interfaces.chat_platform import ChatPlatform, VoiceChannelInfo

logger = logging.getLogger(__name__)


class QueueGateway:
    def __init__(
        self,
        *,
        voice_channel_id: int | None,
        chat_platform: ChatPlatform,
        queue_repository: QueueRepository,
    ) -> None:
        self._voice_channel_id = voice_channel_id
        self._chat_platform = chat_platform
        self._queue_repo = queue_repository

    @property
    def voice_channel_id(self) -> int | None:
        return self._voice_channel_id

    async def resolve_voice_channel(self) -> VoiceChannelInfo:
        """Resolve the configured channel.

        Raises:
            NotConfiguredError: No channel id is configured.
            ChannelNotFoundError: The platform cannot resolve it, or it is not a voice channel.
        """
        if not self._voice_channel_id:
            logger.error(LogTemplates.GATEWAY_NOT_CONFIGURED)
            raise NotConfiguredError()

        try:
            channel = await self._chat_platform.fetch_channel(self._voice_channel_id)
        except Exception as exc:
            logger.warning(LogTemplates.GATEWAY_CHANNEL_NOT_FOUND, self._voice_channel_id)
            raise ChannelNotFoundError(self._voice_channel_id) from exc

        if channel is None or not channel.is_voice:
            logger.warning(LogTemplates.GATEWAY_CHANNEL_NOT_FOUND, self._voice_channel_id)
            raise ChannelNotFoundError(self._voice_channel_id)
        return channel

    async def resolve_queue(self) -> GuildQueue:
        """Resolve channel, then guild, then the guild's queue.

        Raises:
            NotConfiguredError, ChannelNotFoundError: See :meth:`resolve_voice_channel`.
            NoActiveQueueError: The guild has no playback queue.
        """
        channel = await self.resolve_voice_channel()
        queue = await self._queue_repo.get(channel.guild_id)
        if queue is None:
            raise NoActiveQueueError(channel.guild_id)
        return queue
