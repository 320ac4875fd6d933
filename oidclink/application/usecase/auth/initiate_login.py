"""Initiate login use case."""

import secrets

import logfire
from pydantic import BaseModel

from oidclink.application.usecase.base import BaseUseCase
from oidclink.domain.service import AuthService


class InitiateLoginRequest(BaseModel):
    """Start a login at an issuer."""

    config_id: str


class InitiateLoginResponse(BaseModel):
    """Where to send the user, and the state to check on return."""

    authorization_url: str
    state: str


class InitiateLoginUseCase(BaseUseCase):
    """Use case building the authorization redirect."""

    def __init__(self, auth_service: AuthService) -> None:
        self.auth_service = auth_service

    async def execute(self, request: InitiateLoginRequest) -> InitiateLoginResponse:
        """Generate a state and build the authorization URL.

        Raises:
            ConfigurationError: If the issuer is not configured
        """
        state = secrets.token_urlsafe(32)
        url = await self.auth_service.initiate_login(request.config_id, state)
        logfire.info("Login initiated", config_id=request.config_id)
        return InitiateLoginResponse(authorization_url=url, state=state)
