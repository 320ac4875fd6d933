"""Get current user use case."""

from typing import Any

from pydantic import BaseModel

from oidclink.application.usecase.base import BaseUseCase
from oidclink.domain.error import NotFoundError
from oidclink.domain.service import (
    AccessTokenService,
    IdentityLinkService,
    SessionTokenService,
    UserService,
)
from oidclink.domain.value import AuthPlugin, SessionId, UserId


class GetCurrentUserRequest(BaseModel):
    """Get current user request."""

    session_id: SessionId


class GetCurrentUserResponse(BaseModel):
    """Get current user response."""

    user_id: UserId
    username: str
    real_name: str | None
    email: str | None
    groups: list[str]
    config_id: str | None  # Issuer the session was authenticated with
    subject: str | None
    issuer: str | None
    attributes: dict[str, Any]  # ID token claims overlaid with access token claims


class GetCurrentUserUseCase(BaseUseCase):
    """Use case describing the account a session is logged in to."""

    def __init__(
        self,
        user_service: UserService,
        identity_link_service: IdentityLinkService,
        session_token_service: SessionTokenService,
        access_token_service: AccessTokenService,
    ) -> None:
        self.user_service = user_service
        self.identity_link_service = identity_link_service
        self.session_token_service = session_token_service
        self.access_token_service = access_token_service

    async def execute(self, request: GetCurrentUserRequest) -> GetCurrentUserResponse:
        """Get the logged-in user of a session.

        Raises:
            NotFoundError: If the session is not logged in
        """
        user_id = await self.session_token_service.get_user_id(request.session_id)
        if user_id is None:
            raise NotFoundError("Session", request.session_id)
        user = await self.user_service.get_by_id(user_id)

        context = await self.session_token_service.get_context(request.session_id)
        link = await self.identity_link_service.get_link(user.id)
        attributes: dict[str, Any] = {}
        config_id = None
        if context is not None and context.plugin is AuthPlugin.OPENID_CONNECT:
            config_id = context.config_id
            if config_id:
                attributes = await self.access_token_service.get_attributes(
                    request.session_id, config_id
                )

        return GetCurrentUserResponse(
            user_id=user.id,
            username=user.name,
            real_name=user.real_name,
            email=user.email,
            groups=await self.user_service.get_groups(user.id),
            config_id=config_id,
            subject=link.subject if link else None,
            issuer=link.issuer if link else None,
            attributes=attributes,
        )
