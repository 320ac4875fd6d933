"""Back-channel logout use case."""

import logfire
from pydantic import BaseModel

from oidclink.application.usecase.base import BaseUseCase
from oidclink.domain.repository import SessionStore
from oidclink.domain.service import AuthService, IdentityLinkService


class BackchannelLogoutRequest(BaseModel):
    """Logout token posted by an issuer."""

    config_id: str
    logout_token: str


class BackchannelLogoutResponse(BaseModel):
    """Outcome, as the HTTP status and body the issuer expects."""

    status_code: int = 200
    error: str | None = None
    error_description: str | None = None
    sessions_invalidated: int = 0


class BackchannelLogoutUseCase(BaseUseCase):
    """Use case ending every session of a user on the issuer's request."""

    def __init__(
        self,
        auth_service: AuthService,
        identity_link_service: IdentityLinkService,
        session_store: SessionStore,
    ) -> None:
        self.auth_service = auth_service
        self.identity_link_service = identity_link_service
        self.session_store = session_store

    async def execute(
        self, request: BackchannelLogoutRequest
    ) -> BackchannelLogoutResponse:
        """Verify the logout token and invalidate the linked user's sessions.

        A verified token for an identity with no linked account succeeds
        without invalidating anything.

        Raises:
            ConfigurationError: If the issuer is not configured
        """
        self.auth_service.client(request.config_id)

        with logfire.span("backchannel_logout", config_id=request.config_id):
            try:
                claims = await self.auth_service.verify_logout_token(
                    request.config_id, request.logout_token
                )
                if claims is None:
                    logfire.warn(
                        "Logout token not verified", config_id=request.config_id
                    )
                    return BackchannelLogoutResponse(
                        status_code=400,
                        error="not-verified",
                        error_description="The provided logout token could not be verified",
                    )

                if not claims.subject:
                    logfire.info("Logout token without subject", issuer=claims.issuer)
                    return BackchannelLogoutResponse()

                user = await self.identity_link_service.find_user(
                    claims.subject, claims.issuer
                )
                if user is None:
                    return BackchannelLogoutResponse()

                count = await self.session_store.invalidate_user(user.id)
                logfire.info(
                    "Sessions invalidated by back-channel logout",
                    user_id=user.id,
                    username=user.name,
                    sessions=count,
                )
                return BackchannelLogoutResponse(sessions_invalidated=count)
            except Exception as e:
                logfire.error(
                    "Back-channel logout failed",
                    config_id=request.config_id,
                    error_type=type(e).__name__,
                    error=str(e),
                )
                return BackchannelLogoutResponse(
                    status_code=400,
                    error=type(e).__name__,
                    error_description=str(e),
                )
