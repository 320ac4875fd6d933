"""Domain value objects.

Value objects are immutable and defined by their values, not identity.
"""

from enum import Enum
from typing import Any

from oidclink.domain.value.common import ValueObject
from oidclink.domain.value.identifiers import UserId


class AuthPlugin(str, Enum):
    """Authentication plugin that established a session."""

    OPENID_CONNECT = "openid_connect"
    LOCAL = "local"


class AuthContext(ValueObject):
    """How the current session was authenticated.

    Group synchronization only acts on sessions established by the
    OpenID Connect plugin.
    """

    plugin: AuthPlugin
    config_id: str | None = None


class ProviderTokens(ValueObject):
    """Tokens and parsed payloads returned by a completed handshake.

    ``id_token_payload`` holds only claims whose signature was verified.
    ``access_token_payload`` is empty when the access token is opaque.
    """

    access_token: str
    access_token_payload: dict[str, Any] = {}
    id_token: str | None = None
    id_token_payload: dict[str, Any] = {}
    refresh_token: str | None = None

    def verified_claim(self, name: str) -> Any:
        """Get a claim from the verified ID token, or None."""
        return self.id_token_payload.get(name)

    @property
    def attributes(self) -> dict[str, Any]:
        """ID token claims overlaid with access token claims."""
        return {**self.id_token_payload, **self.access_token_payload}


class LogoutClaims(ValueObject):
    """Verified claims of a back-channel logout token."""

    issuer: str
    subject: str | None = None
    session_id: str | None = None  # `sid` claim


class AuthenticationResult(ValueObject):
    """Outcome of one authentication attempt.

    ``user_id`` is None for a successful attempt that needs a new account;
    ``username`` is then the name to create it under.
    """

    authenticated: bool
    user_id: UserId | None = None
    username: str | None = None
    real_name: str | None = None
    email: str | None = None
    error_message: str | None = None

    @classmethod
    def failure(cls, message: str) -> "AuthenticationResult":
        """Build a failed result."""
        return cls(authenticated=False, error_message=message)
