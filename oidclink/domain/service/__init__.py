"""Domain services."""

from .access_token_service import AccessTokenService
from .auth_service import AuthService, OpenIDConnectClient
from .base import Service
from .group_sync_service import GroupSyncService
from .identity_link_service import IdentityLinkService
from .migration_service import MigrationService
from .session_token_service import SessionTokenService
from .user_service import UserService
from .username_service import UsernameService

__all__ = [
    "AccessTokenService",
    "AuthService",
    "GroupSyncService",
    "IdentityLinkService",
    "MigrationService",
    "OpenIDConnectClient",
    "Service",
    "SessionTokenService",
    "UserService",
    "UsernameService",
]
