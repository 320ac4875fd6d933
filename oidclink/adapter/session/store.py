"""Session store with encrypted secrets.

Session secrets (tokens) are serialized to JSON and encrypted with Fernet
before they are kept; authentication data is kept as is.
"""

import json
import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Any

from cryptography.fernet import Fernet, InvalidToken

from oidclink.adapter.error import SessionStoreError
from oidclink.domain.repository.session import SessionStore
from oidclink.domain.value import SessionId, UserId

logger = logging.getLogger(__name__)

# Idle lifetime of a session not (yet) logged in
ANONYMOUS_SESSION_TTL = timedelta(minutes=15)

# Minimum time between sweeps of expired sessions
SWEEP_INTERVAL = timedelta(minutes=1)


def create_fernet(secret_key: str | None) -> Fernet:
    """Build the cipher for session secrets.

    Without a configured key a random one is generated, so secrets do not
    survive a restart.
    """
    if secret_key is None:
        logger.warning("SESSION__SECRET_KEY not set, using an ephemeral key")
        return Fernet(Fernet.generate_key())
    return Fernet(secret_key.encode("ascii"))


@dataclass
class _Session:
    expires_at: datetime
    data: dict[str, Any] = field(default_factory=dict)
    secrets: dict[str, bytes] = field(default_factory=dict)
    user_id: UserId | None = None


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class InMemorySessionStore(SessionStore):
    """In-memory session store.

    Sessions do not survive a restart; users log in again. With several
    processes, route users to the same process or use a shared store.

    Sessions expire after a period without use: logged-in sessions after
    max_age, sessions of a login in progress after ANONYMOUS_SESSION_TTL.
    Expired sessions are dropped when read. Creating a session also sweeps
    the expired ones, at most once per SWEEP_INTERVAL.
    """

    def __init__(
        self,
        fernet: Fernet,
        max_age: timedelta = timedelta(days=1),
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        """Initialize empty session store.

        Args:
            fernet: Cipher for session secrets
            max_age: Idle lifetime of a logged-in session
            clock: Source of the current time
        """
        self._fernet = fernet
        self._max_age = max_age
        self._clock = clock
        self._sessions: dict[SessionId, _Session] = {}
        self._next_sweep = clock()

    def _touch(self, session: _Session, now: datetime) -> _Session:
        ttl = self._max_age if session.user_id is not None else ANONYMOUS_SESSION_TTL
        session.expires_at = now + ttl
        return session

    def _live(self, session_id: SessionId) -> _Session | None:
        session = self._sessions.get(session_id)
        if session is None:
            return None
        now = self._clock()
        if session.expires_at <= now:
            del self._sessions[session_id]
            return None
        return self._touch(session, now)

    def _session(self, session_id: SessionId) -> _Session:
        session = self._live(session_id)
        if session is None:
            now = self._clock()
            self._purge_expired(now)
            session = self._touch(_Session(expires_at=now), now)
            self._sessions[session_id] = session
        return session

    def _purge_expired(self, now: datetime) -> None:
        if now < self._next_sweep:
            return
        self._next_sweep = now + SWEEP_INTERVAL
        expired = [
            session_id
            for session_id, session in self._sessions.items()
            if session.expires_at <= now
        ]
        for session_id in expired:
            del self._sessions[session_id]
        if expired:
            logger.debug("Dropped %d expired sessions", len(expired))

    async def get_data(self, session_id: SessionId, key: str) -> Any:
        session = self._live(session_id)
        return session.data.get(key) if session else None

    async def set_data(self, session_id: SessionId, key: str, value: Any) -> None:
        self._session(session_id).data[key] = value

    async def get_secret(self, session_id: SessionId, key: str) -> Any:
        session = self._live(session_id)
        if session is None or key not in session.secrets:
            return None
        try:
            plaintext = self._fernet.decrypt(session.secrets[key])
        except InvalidToken as e:
            raise SessionStoreError(f"Session secret {key} cannot be decrypted") from e
        return json.loads(plaintext)

    async def set_secret(self, session_id: SessionId, key: str, value: Any) -> None:
        plaintext = json.dumps(value).encode("utf-8")
        self._session(session_id).secrets[key] = self._fernet.encrypt(plaintext)

    async def bind_user(self, session_id: SessionId, user_id: UserId) -> None:
        session = self._session(session_id)
        session.user_id = user_id
        self._touch(session, self._clock())

    async def get_user_id(self, session_id: SessionId) -> UserId | None:
        session = self._live(session_id)
        return session.user_id if session else None

    async def rotate(self, session_id: SessionId, new_session_id: SessionId) -> None:
        session = self._live(session_id)
        self._sessions.pop(session_id, None)
        if session is not None:
            self._sessions[new_session_id] = session

    async def clear(self, session_id: SessionId) -> None:
        self._sessions.pop(session_id, None)

    async def invalidate_user(self, user_id: UserId) -> int:
        session_ids = [
            session_id
            for session_id, session in self._sessions.items()
            if session.user_id == user_id
        ]
        for session_id in session_ids:
            del self._sessions[session_id]
        logger.info("Invalidated %d sessions of user %s", len(session_ids), user_id)
        return len(session_ids)
