"""Domain layer DI providers."""

from dishka import Scope, provide

from oidclink.config import OpenIDConnectSettings, Settings
from oidclink.domain.repository import (
    IdentityLinkRepository,
    SessionStore,
    UserGroupRepository,
    UserRepository,
)
from oidclink.domain.service import (
    AccessTokenService,
    AuthService,
    GroupSyncService,
    IdentityLinkService,
    MigrationService,
    OpenIDConnectClient,
    SessionTokenService,
    UserService,
    UsernameService,
)
from oidclink.util.di.base import ProviderBase


class ProdDomainProvider(ProviderBase):
    """Production domain services provider - concrete, no mocks needed.

    Domain services are REQUEST-scoped to align with repository/session lifecycle.
    Each HTTP request gets fresh service instances with their own transaction.
    """

    scope = Scope.REQUEST

    @provide(scope=Scope.APP)
    def get_oidc_settings(self, settings: Settings) -> OpenIDConnectSettings:
        """Provide OpenID Connect settings."""
        return settings.oidc

    @provide
    def get_auth_service(
        self, oidc_clients: dict[str, OpenIDConnectClient]
    ) -> AuthService:
        """Provide authentication domain service.

        Args:
            oidc_clients: Dictionary mapping config ids to protocol clients

        Returns:
            AuthService configured with every issuer's client
        """
        return AuthService(clients=oidc_clients)

    @provide
    def get_identity_link_service(
        self, identity_link_repository: IdentityLinkRepository
    ) -> IdentityLinkService:
        """Provide identity link domain service."""
        return IdentityLinkService(identity_link_repository=identity_link_repository)

    @provide
    def get_migration_service(
        self, identity_link_repository: IdentityLinkRepository
    ) -> MigrationService:
        """Provide migration domain service."""
        return MigrationService(identity_link_repository=identity_link_repository)

    @provide
    def get_username_service(self, user_repository: UserRepository) -> UsernameService:
        """Provide username domain service."""
        return UsernameService(user_repository=user_repository)

    @provide
    def get_session_token_service(
        self, session_store: SessionStore
    ) -> SessionTokenService:
        """Provide session token domain service."""
        return SessionTokenService(session_store=session_store)

    @provide
    def get_access_token_service(
        self,
        auth_service: AuthService,
        session_token_service: SessionTokenService,
    ) -> AccessTokenService:
        """Provide access token domain service."""
        return AccessTokenService(
            auth_service=auth_service,
            session_token_service=session_token_service,
        )

    @provide
    def get_group_sync_service(
        self,
        user_group_repository: UserGroupRepository,
        identity_link_repository: IdentityLinkRepository,
        access_token_service: AccessTokenService,
        session_token_service: SessionTokenService,
        oidc_settings: OpenIDConnectSettings,
    ) -> GroupSyncService:
        """Provide group synchronization domain service."""
        return GroupSyncService(
            user_group_repository=user_group_repository,
            identity_link_repository=identity_link_repository,
            access_token_service=access_token_service,
            session_token_service=session_token_service,
            settings=oidc_settings,
        )

    @provide
    def get_user_service(
        self,
        user_repository: UserRepository,
        user_group_repository: UserGroupRepository,
    ) -> UserService:
        """Provide user domain service."""
        return UserService(
            user_repository=user_repository,
            user_group_repository=user_group_repository,
        )
