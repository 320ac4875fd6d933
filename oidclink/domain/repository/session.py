"""Session store interface."""

from abc import ABC, abstractmethod
from typing import Any

from oidclink.domain.value import SessionId, UserId


class SessionStore(ABC):
    """Per-session storage of the host.

    A session holds two bags: authentication data (plain values such as
    the subject and issuer) and secrets (tokens), which implementations
    must not store in the clear.
    """

    @abstractmethod
    async def get_data(self, session_id: SessionId, key: str) -> Any:
        """Get an authentication data value, or None."""
        pass

    @abstractmethod
    async def set_data(self, session_id: SessionId, key: str, value: Any) -> None:
        """Set an authentication data value."""
        pass

    @abstractmethod
    async def get_secret(self, session_id: SessionId, key: str) -> Any:
        """Get a session secret, or None."""
        pass

    @abstractmethod
    async def set_secret(self, session_id: SessionId, key: str, value: Any) -> None:
        """Set a session secret."""
        pass

    @abstractmethod
    async def bind_user(self, session_id: SessionId, user_id: UserId) -> None:
        """Mark a session as logged in to an account."""
        pass

    @abstractmethod
    async def get_user_id(self, session_id: SessionId) -> UserId | None:
        """Get the account a session is logged in to, or None."""
        pass

    @abstractmethod
    async def rotate(self, session_id: SessionId, new_session_id: SessionId) -> None:
        """Move a session to a new id; the old id no longer refers to it."""
        pass

    @abstractmethod
    async def clear(self, session_id: SessionId) -> None:
        """Drop all data, secrets and the account binding of a session."""
        pass

    @abstractmethod
    async def invalidate_user(self, user_id: UserId) -> int:
        """Clear every session logged in to an account.

        Returns:
            Number of sessions cleared
        """
        pass
