"""Query for searching tracks to add from the web UI."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from discord_music_remote.application.services.queue_models import SearchHit
from discord_music_remote.domain.shared.exceptions import EngineFailureError, InvalidInputError
from discord_music_remote.domain.shared.messages import ErrorMessages, LogTemplates

if TYPE_CHECKING:
    from ..interfaces.audio_resolver import AudioResolver

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SearchTracksQuery:
    query: str | None


class SearchTracksHandler:
    def __init__(self, *, audio_resolver: AudioResolver, limit: int = 10) -> None:
        self._audio_resolver = audio_resolver
        self._limit = limit

    async def handle(self, query: SearchTracksQuery) -> list[SearchHit]:
        text = (query.query or "").strip()
        if not text:
            raise InvalidInputError(ErrorMessages.SEARCH_QUERY_REQUIRED, field="q")

        try:
            tracks = await self._audio_resolver.search(text, limit=self._limit)
        except Exception as exc:
            logger.exception(LogTemplates.YTDLP_FAILED_SEARCH, text)
            raise EngineFailureError(str(exc)) from exc

        return [SearchHit.from_track(track) for track in tracks[: self._limit]]
