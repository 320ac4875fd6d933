"""Finalize login use case.

The host side of a successful authentication: create the account if the
result asks for one, link it, refresh the profile, synchronize groups and
log the session in. A failed group sync leaves the session logged out.
"""

import logfire
from pydantic import BaseModel

from oidclink.application.usecase.base import BaseUseCase
from oidclink.domain.error import AuthenticationError
from oidclink.domain.service import (
    GroupSyncService,
    IdentityLinkService,
    SessionTokenService,
    UserService,
)
from oidclink.domain.value import (
    AuthContext,
    AuthenticationResult,
    AuthPlugin,
    SessionId,
    UserId,
)


class FinalizeLoginRequest(BaseModel):
    """Result of an authentication attempt to act on."""

    config_id: str
    session_id: SessionId
    result: AuthenticationResult


class FinalizeLoginResponse(BaseModel):
    """Logged-in account."""

    user_id: UserId
    username: str
    created: bool  # A new account was registered
    groups: list[str]


class FinalizeLoginUseCase(BaseUseCase):
    """Use case completing a login on the host."""

    def __init__(
        self,
        user_service: UserService,
        identity_link_service: IdentityLinkService,
        session_token_service: SessionTokenService,
        group_sync_service: GroupSyncService,
    ) -> None:
        """Initialize finalize login use case.

        Args:
            user_service: User domain service
            identity_link_service: Identity link domain service
            session_token_service: Session token cache
            group_sync_service: Group synchronization domain service
        """
        self.user_service = user_service
        self.identity_link_service = identity_link_service
        self.session_token_service = session_token_service
        self.group_sync_service = group_sync_service

    async def execute(self, request: FinalizeLoginRequest) -> FinalizeLoginResponse:
        """Finalize a login.

        Raises:
            AuthenticationError: If the attempt failed
        """
        result = request.result
        if not result.authenticated:
            raise AuthenticationError(result.error_message or "Authentication failed")

        with logfire.span("finalize_login", config_id=request.config_id):
            created = result.user_id is None
            if created:
                if not result.username:
                    raise AuthenticationError("No username allocated for new account")
                user = await self.user_service.create_user(
                    result.username, result.real_name, result.email
                )
                await self.save_link(user.id, request.session_id)
            else:
                user = await self.user_service.get_by_id(result.user_id)
                user = await self.user_service.update_profile(
                    user, result.real_name, result.email
                )

            context = AuthContext(
                plugin=AuthPlugin.OPENID_CONNECT, config_id=request.config_id
            )
            try:
                await self.group_sync_service.populate_groups(
                    user, context, request.session_id
                )
            except Exception:
                # The account may be rolled back; the session must not point at it
                await self.session_token_service.clear(request.session_id)
                raise
            await self.session_token_service.login(request.session_id, user.id, context)

            logfire.info(
                "Login finalized", user_id=user.id, username=user.name, created=created
            )
            return FinalizeLoginResponse(
                user_id=user.id,
                username=user.name,
                created=created,
                groups=await self.user_service.get_groups(user.id),
            )

    async def save_link(self, user_id: UserId, session_id: SessionId) -> None:
        """Link a newly created account to the identity remembered in the session.

        Raises:
            AuthenticationError: If the session holds no identity
        """
        subject, issuer = await self.session_token_service.get_identity(session_id)
        if not subject or not issuer:
            raise AuthenticationError("No identity in session to link")
        await self.identity_link_service.save_link(user_id, subject, issuer)
