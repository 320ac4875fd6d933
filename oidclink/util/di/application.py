"""Application layer DI providers."""

from dishka import Scope, provide

from oidclink.application.usecase.auth import (
    AuthenticateUseCase,
    BackchannelLogoutUseCase,
    FinalizeLoginUseCase,
    GetCurrentUserUseCase,
    InitiateLoginUseCase,
    LogoutUseCase,
    PopulateGroupsUseCase,
)
from oidclink.config import Settings
from oidclink.domain.repository import SessionStore
from oidclink.domain.service import (
    AccessTokenService,
    AuthService,
    GroupSyncService,
    IdentityLinkService,
    MigrationService,
    SessionTokenService,
    UserService,
    UsernameService,
)
from oidclink.util.di.base import ProviderBase


class ProdApplicationProvider(ProviderBase):
    """Production application use cases provider - concrete, no mocks needed."""

    @provide(scope=Scope.REQUEST)
    def get_initiate_login_use_case(
        self, auth_service: AuthService
    ) -> InitiateLoginUseCase:
        """Provide initiate login use case."""
        return InitiateLoginUseCase(auth_service=auth_service)

    @provide(scope=Scope.REQUEST)
    def get_authenticate_use_case(
        self,
        auth_service: AuthService,
        identity_link_service: IdentityLinkService,
        migration_service: MigrationService,
        username_service: UsernameService,
        session_token_service: SessionTokenService,
        settings: Settings,
    ) -> AuthenticateUseCase:
        """Provide authenticate use case."""
        return AuthenticateUseCase(
            auth_service=auth_service,
            identity_link_service=identity_link_service,
            migration_service=migration_service,
            username_service=username_service,
            session_token_service=session_token_service,
            settings=settings,
        )

    @provide(scope=Scope.REQUEST)
    def get_finalize_login_use_case(
        self,
        user_service: UserService,
        identity_link_service: IdentityLinkService,
        session_token_service: SessionTokenService,
        group_sync_service: GroupSyncService,
    ) -> FinalizeLoginUseCase:
        """Provide finalize login use case."""
        return FinalizeLoginUseCase(
            user_service=user_service,
            identity_link_service=identity_link_service,
            session_token_service=session_token_service,
            group_sync_service=group_sync_service,
        )

    @provide(scope=Scope.REQUEST)
    def get_populate_groups_use_case(
        self,
        user_service: UserService,
        session_token_service: SessionTokenService,
        group_sync_service: GroupSyncService,
    ) -> PopulateGroupsUseCase:
        """Provide populate groups use case."""
        return PopulateGroupsUseCase(
            user_service=user_service,
            session_token_service=session_token_service,
            group_sync_service=group_sync_service,
        )

    @provide(scope=Scope.REQUEST)
    def get_logout_use_case(
        self,
        auth_service: AuthService,
        session_token_service: SessionTokenService,
        settings: Settings,
    ) -> LogoutUseCase:
        """Provide logout use case."""
        return LogoutUseCase(
            auth_service=auth_service,
            session_token_service=session_token_service,
            settings=settings,
        )

    @provide(scope=Scope.REQUEST)
    def get_backchannel_logout_use_case(
        self,
        auth_service: AuthService,
        identity_link_service: IdentityLinkService,
        session_store: SessionStore,
    ) -> BackchannelLogoutUseCase:
        """Provide back-channel logout use case."""
        return BackchannelLogoutUseCase(
            auth_service=auth_service,
            identity_link_service=identity_link_service,
            session_store=session_store,
        )

    @provide(scope=Scope.REQUEST)
    def get_current_user_use_case(
        self,
        user_service: UserService,
        identity_link_service: IdentityLinkService,
        session_token_service: SessionTokenService,
        access_token_service: AccessTokenService,
    ) -> GetCurrentUserUseCase:
        """Provide get current user use case."""
        return GetCurrentUserUseCase(
            user_service=user_service,
            identity_link_service=identity_link_service,
            session_token_service=session_token_service,
            access_token_service=access_token_service,
        )
