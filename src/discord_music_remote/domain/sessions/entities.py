"""Entities for control sessions and live observers."""

from __future__ import annotations

from datetime import datetime, timedelta

from pydantic import BaseModel, ConfigDict, Field

from discord_music_remote.domain.music.entities import UserRef
from discord_music_remote.domain.shared.datetime_utils import utcnow
from discord_music_remote.domain.shared.types import NonEmptyStr, SessionTokenStr, UtcDatetimeField


class ControlSession(BaseModel):
    """A control link handed to one user.

    Multi-use until it expires; nobody revokes it on first use.
    """

    model_config = ConfigDict(frozen=True, strict=True)

    token: SessionTokenStr
    user: UserRef
    created_at: UtcDatetimeField = Field(default_factory=utcnow)

    def expires_at(self, ttl: timedelta) -> datetime:
        return self.created_at + ttl

    def is_expired(self, ttl: timedelta, now: datetime | None = None) -> bool:
        return (now or utcnow()) >= self.expires_at(ttl)


class Observer(BaseModel):
    """One identified live connection, shown in the "who's listening" list."""

    model_config = ConfigDict(frozen=True, strict=True)

    connection_id: NonEmptyStr
    user: UserRef
