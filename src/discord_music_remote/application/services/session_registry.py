"""Session Registry: opaque control-link tokens mapped to the user who asked for them."""

from __future__ import annotations

import logging
import secrets
from collections.abc import Awaitable, Callable
from datetime import datetime, timedelta

from ...domain.music.entities import UserRef
from ...domain.sessions.entities import ControlSession
from ...domain.shared.datetime_utils import utcnow
from ...domain.shared.exceptions import InvalidSessionError, SessionExpiredError
from ...domain.shared.messages import LogTemplates

logger = logging.getLogger(__name__)

DEFAULT_TTL = timedelta(hours=24)
DEFAULT_TOKEN_BYTES = 16

DeleteMessage = Callable[[str, int], Awaitable[bool]]

CONTROL_PAGE = "index.html"


def build_control_link(base_url: str, token: str) -> str:
    """The URL a user opens to control playback as themselves."""
    return f"{base_url.rstrip('/')}/{CONTROL_PAGE}?session_token={token}"


class SessionRegistry:
    """Process-wide token map. Nothing is persisted; a restart forgets every link.

    Expired entries are removed both lazily on :meth:`resolve` and by a
    periodic :meth:`sweep`. Both only delete, so they never conflict.
    """

    def __init__(self, *, ttl: timedelta = DEFAULT_TTL, token_bytes: int = DEFAULT_TOKEN_BYTES) -> None:
        self._ttl = ttl
        self._token_bytes = token_bytes
        self._sessions: dict[str, ControlSession] = {}
        # user id -> id of the last link message sent to them
        self._link_messages: dict[str, int] = {}

    @property
    def ttl(self) -> timedelta:
        return self._ttl

    @property
    def ttl_hours(self) -> int:
        return int(self._ttl.total_seconds() // 3600)

    def __len__(self) -> int:
        return len(self._sessions)

    def issue(self, user: UserRef, now: datetime | None = None) -> ControlSession:
        token = secrets.token_hex(self._token_bytes)
        session = ControlSession(token=token, user=user, created_at=now or utcnow())
        self._sessions[token] = session
        logger.info(LogTemplates.SESSION_ISSUED, user.display_name)
        return session

    def resolve(self, token: str, now: datetime | None = None) -> UserRef:
        """Return the identity behind a token. Multi-use until the TTL runs out.

        Raises:
            InvalidSessionError: The token is unknown.
            SessionExpiredError: The token outlived the TTL (it is removed).
        """
        session = self._sessions.get(token)
        if session is None:
            raise InvalidSessionError()

        if session.is_expired(self._ttl, now):
            self._sessions.pop(token, None)
            logger.info(LogTemplates.SESSION_EXPIRED, session.user.display_name)
            raise SessionExpiredError()

        return session.user

    def sweep(self, now: datetime | None = None) -> int:
        """Remove every expired session, used or not. Returns how many were removed."""
        now = now or utcnow()
        expired = [token for token, session in self._sessions.items() if session.is_expired(self._ttl, now)]
        for token in expired:
            session = self._sessions.pop(token, None)
            if session is not None:
                logger.debug(LogTemplates.SESSION_EXPIRED, session.user.display_name)
        return len(expired)

    def remember_link(self, user_id: str, message_id: int) -> None:
        self._link_messages[user_id] = message_id

    async def revoke_obsolete(self, user_id: str, delete_message: DeleteMessage) -> bool:
        """Best-effort deletion of the previous link message sent to a user.

        Failures are logged and swallowed; this is never worth failing a
        new link over.
        """
        message_id = self._link_messages.pop(user_id, None)
        if message_id is None:
            return False

        try:
            deleted = await delete_message(user_id, message_id)
        except Exception as exc:
            logger.warning(LogTemplates.SESSION_REVOKE_FAILED, user_id, exc)
            return False

        if deleted:
            logger.info(LogTemplates.SESSION_REVOKED, message_id, user_id)
        return deleted

    def clear(self) -> None:
        self._sessions.clear()
        self._link_messages.clear()
