"""Authenticate use case.

Resolves the identity asserted by an OpenID Connect provider to a local
account, in this order:

1. an account already linked to (subject, issuer)
2. the oldest unlinked account with the same email (if enabled)
3. an unlinked account named like the preferred username (if enabled)
4. a fresh username for a new account (random, or preferred + suffix)

Links are written for migrated accounts only; new accounts are linked by
the host once they exist (see FinalizeLoginUseCase).
"""

import logfire
from pydantic import BaseModel
from sqlalchemy.exc import SQLAlchemyError

from oidclink.application.usecase.base import BaseUseCase
from oidclink.config import PluginOptions, Settings
from oidclink.domain.error import AuthenticationError
from oidclink.domain.service import (
    AuthService,
    IdentityLinkService,
    MigrationService,
    SessionTokenService,
    UsernameService,
)
from oidclink.domain.value import AuthenticationResult, SessionId, UserId


class AuthenticateRequest(BaseModel):
    """Authentication request from the provider callback."""

    config_id: str  # Which issuer is handling this login
    code: str  # Authorization code
    state: str  # State parameter for CSRF verification
    session_id: SessionId  # Host session the tokens are cached in


class AuthenticateUseCase(BaseUseCase):
    """Use case mapping a provider login to a local account."""

    def __init__(
        self,
        auth_service: AuthService,
        identity_link_service: IdentityLinkService,
        migration_service: MigrationService,
        username_service: UsernameService,
        session_token_service: SessionTokenService,
        settings: Settings,
    ) -> None:
        """Initialize authenticate use case.

        Args:
            auth_service: Protocol client router
            identity_link_service: Identity link domain service
            migration_service: Account migration domain service
            username_service: Username resolution domain service
            session_token_service: Session token cache
            settings: Application settings
        """
        self.auth_service = auth_service
        self.identity_link_service = identity_link_service
        self.migration_service = migration_service
        self.username_service = username_service
        self.session_token_service = session_token_service
        self.settings = settings

    async def execute(self, request: AuthenticateRequest) -> AuthenticationResult:
        """Execute one authentication attempt.

        Any failure clears the session and yields a failed result carrying
        the error message. Storage failures are re-raised after the session
        is cleared.

        Args:
            request: Callback parameters and session id

        Returns:
            Authentication result; ``user_id`` is None when a new account
            must be created under ``username``

        Raises:
            ConfigurationError: If the issuer is not configured
            SQLAlchemyError: If the identity store is unavailable
        """
        options = self.settings.oidc.plugin_options(request.config_id)
        self.auth_service.client(request.config_id)

        with logfire.span("authenticate", config_id=request.config_id):
            try:
                return await self._authenticate(request, options)
            except SQLAlchemyError:
                await self.session_token_service.clear(request.session_id)
                raise
            except Exception as e:
                logfire.warn(
                    "Authentication failed",
                    config_id=request.config_id,
                    error_type=type(e).__name__,
                    error=str(e),
                )
                await self.session_token_service.clear(request.session_id)
                return AuthenticationResult.failure(
                    f"{type(e).__name__}: {e}" if str(e) else type(e).__name__
                )

    async def _authenticate(
        self, request: AuthenticateRequest, options: PluginOptions
    ) -> AuthenticationResult:
        config_id = request.config_id
        tokens = await self.auth_service.complete_login(
            config_id, request.code, request.state
        )

        real_name = await self.auth_service.get_claim(config_id, tokens, "name")
        email = await self.auth_service.get_claim(config_id, tokens, "email")
        subject = await self.auth_service.get_claim(config_id, tokens, "sub")
        if not subject:
            raise AuthenticationError("Provider did not assert a subject")
        issuer = self.auth_service.provider_url(config_id)

        await self.session_token_service.store_identity(
            request.session_id, subject, issuer
        )
        await self.session_token_service.store_tokens(request.session_id, tokens)

        attributes = tokens.attributes
        real_name = options.real_name_processor(real_name, attributes)
        email = options.email_processor(email, attributes)

        logfire.info("Claims extracted", config_id=config_id, issuer=issuer)

        user = await self.identity_link_service.find_user(subject, issuer)
        if user:
            return self._success(user.id, user.name, real_name, email)

        migrated = await self.migration_service.by_email(email, options)
        if migrated:
            await self.identity_link_service.save_link(migrated.id, subject, issuer)
            return self._success(migrated.id, migrated.name, real_name, email)

        claim_value = await self.auth_service.get_claim(
            config_id, tokens, options.preferred_username_claim
        )
        preferred = self.username_service.resolve_preferred_username(
            claim_value, real_name, email, attributes, options
        )

        user_id = await self.migration_service.by_username(preferred, options)
        if user_id is not None:
            await self.identity_link_service.save_link(user_id, subject, issuer)
            return self._success(user_id, preferred, real_name, email)

        if options.use_random_usernames:
            username = await self.username_service.resolve_random_username()
        else:
            username = await self.username_service.resolve_available_username(
                preferred
            )
        logfire.info("New account needed", config_id=config_id, username=username)
        return self._success(None, username, real_name, email)

    @staticmethod
    def _success(
        user_id: UserId | None,
        username: str | None,
        real_name: str | None,
        email: str | None,
    ) -> AuthenticationResult:
        return AuthenticationResult(
            authenticated=True,
            user_id=user_id,
            username=username,
            real_name=real_name,
            email=email,
        )
