"""Request and response bodies of the HTTP API.

Request fields are deliberately untyped: the command objects do the
validation, so a wrong type reads as the same 400 as a missing field.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, ValidationError
from pydantic.alias_generators import to_camel

from discord_music_remote.application.commands.play_track import PlayTrackCommand
from discord_music_remote.application.services.queue_models import SearchHit, WireModel
from discord_music_remote.domain.music.entities import UserRef
from discord_music_remote.domain.sessions.entities import Observer
from discord_music_remote.domain.shared.exceptions import InvalidInputError
from discord_music_remote.domain.shared.messages import ErrorMessages


class LooseRequest(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")


class PlayRequest(LooseRequest):
    url: Any = None
    user_id: Any = None

    def to_command(self) -> PlayTrackCommand:
        user_id = self.user_id
        # Snowflakes sent as JSON numbers.
        if isinstance(user_id, int) and not isinstance(user_id, bool):
            user_id = str(user_id)
        try:
            return PlayTrackCommand(url=self.url, user_id=user_id)
        except ValidationError as exc:
            raise InvalidInputError(ErrorMessages.PLAY_FIELDS_REQUIRED) from exc


class SeekRequest(LooseRequest):
    time: Any = None


class ReorderRequest(LooseRequest):
    old_index: Any = None
    new_index: Any = None


class RemoveRequest(LooseRequest):
    index: Any = None


class VolumeRequest(LooseRequest):
    volume: Any = None


# ── Responses ───────────────────────────────────────────────────────


class MessageResponse(WireModel):
    message: str


class SuccessResponse(MessageResponse):
    success: bool = True


class SeekResponse(MessageResponse):
    requested_seek_time: float


class UserInfoResponse(WireModel):
    user_id: str
    user_name: str
    user_avatar: str | None = None

    @classmethod
    def from_user(cls, user: UserRef) -> UserInfoResponse:
        return cls(user_id=user.id, user_name=user.display_name, user_avatar=user.avatar_url)


class ObserverView(UserInfoResponse):
    connection_id: str

    @classmethod
    def from_observer(cls, observer: Observer) -> ObserverView:
        user = observer.user
        return cls(
            connection_id=observer.connection_id,
            user_id=user.id,
            user_name=user.display_name,
            user_avatar=user.avatar_url,
        )


class SearchResponse(WireModel):
    items: list[SearchHit]


class HealthResponse(WireModel):
    status: str = "ok"
