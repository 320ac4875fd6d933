"""Mock OpenID Connect providers for testing."""

from dishka import Scope, provide

from oidclink.adapter.oidc import MockOpenIDConnectClient
from oidclink.config import Settings
from oidclink.domain.service import OpenIDConnectClient
from oidclink.util.di.infrastructure.oidc import OIDCProvider


class MockOIDCProvider(OIDCProvider):
    """Mock provider with a mock protocol client per configured issuer."""

    __is_mock__ = True

    @provide(scope=Scope.APP)
    def get_oidc_clients(self, settings: Settings) -> dict[str, OpenIDConnectClient]:
        """Provide mock protocol clients keyed by config id."""
        return {
            config_id: MockOpenIDConnectClient(provider_url=issuer.provider_url)
            for config_id, issuer in settings.oidc.issuers.items()
        }
