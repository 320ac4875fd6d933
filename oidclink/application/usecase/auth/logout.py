"""Logout use case."""

from urllib.parse import urljoin, urlsplit

import logfire
from pydantic import BaseModel

from oidclink.adapter.error import ProviderError
from oidclink.application.usecase.base import BaseUseCase
from oidclink.config import Settings
from oidclink.domain.service import AuthService, SessionTokenService
from oidclink.domain.value import AuthPlugin, SessionId


class LogoutRequest(BaseModel):
    """Log a session out."""

    session_id: SessionId
    returnto: str | None = None  # Local page to land on afterwards


class LogoutResponse(BaseModel):
    """Where to send the user after logout."""

    redirect_url: str
    single_logout: bool  # True if redirect_url is the provider's end-session URL


class LogoutUseCase(BaseUseCase):
    """Use case ending a session, at the provider too when single logout is on."""

    def __init__(
        self,
        auth_service: AuthService,
        session_token_service: SessionTokenService,
        settings: Settings,
    ) -> None:
        self.auth_service = auth_service
        self.session_token_service = session_token_service
        self.settings = settings

    async def execute(self, request: LogoutRequest) -> LogoutResponse:
        """Clear the session and compute the post-logout redirect.

        The session is cleared first. If the provider's end-session URL
        cannot be built, the user is sent to the local return page.
        """
        return_url = self._return_url(request.returnto)
        context = await self.session_token_service.get_context(request.session_id)
        wants_single_logout = (
            context is not None
            and context.plugin is AuthPlugin.OPENID_CONNECT
            and context.config_id in self.settings.oidc.issuers
            and self.settings.oidc.plugin_options(context.config_id).single_logout
        )

        with logfire.span("logout", single_logout=False) as span:
            id_token = None
            if wants_single_logout:
                id_token = await self.session_token_service.get_id_token(
                    request.session_id
                )
            await self.session_token_service.clear(request.session_id)

            redirect_url = return_url
            single_logout = False
            if wants_single_logout:
                try:
                    redirect_url = await self.auth_service.sign_out_url(
                        context.config_id, id_token, return_url
                    )
                    single_logout = True
                    span.set_attribute("single_logout", True)
                except ProviderError as e:
                    logfire.warn(
                        "End-session URL unavailable, logging out locally",
                        config_id=context.config_id,
                        error=str(e),
                    )

            logfire.info("Session logged out", single_logout=single_logout)
            return LogoutResponse(redirect_url=redirect_url, single_logout=single_logout)

    def _return_url(self, returnto: str | None) -> str:
        base = self.settings.api.base_url + "/"
        if returnto:
            parts = urlsplit(returnto)
            # Only pages on this site
            if not parts.scheme and not parts.netloc:
                return urljoin(base, returnto.lstrip("/"))
        return urljoin(base, self.settings.main_page.lstrip("/"))
