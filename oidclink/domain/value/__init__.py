"""Domain value objects."""

from oidclink.domain.value.identifiers import ConfigId, SessionId, UserId
from oidclink.domain.value.types import (
    AuthContext,
    AuthenticationResult,
    AuthPlugin,
    LogoutClaims,
    ProviderTokens,
)
from oidclink.domain.value.username import (
    DEFAULT_USERNAME,
    MAX_USERNAME_BYTES,
    UsernameRigor,
    canonicalize_username,
)

__all__ = [
    # Identifiers
    "UserId",
    "ConfigId",
    "SessionId",
    # Types
    "AuthPlugin",
    "AuthContext",
    "AuthenticationResult",
    "LogoutClaims",
    "ProviderTokens",
    # Usernames
    "DEFAULT_USERNAME",
    "MAX_USERNAME_BYTES",
    "UsernameRigor",
    "canonicalize_username",
]
