"""OpenID Connect infrastructure providers."""

from dishka import Scope, provide

from oidclink.adapter.oidc import RealOpenIDConnectClient
from oidclink.config import Settings
from oidclink.domain.service import OpenIDConnectClient
from oidclink.util.di.base import ProviderBase


class OIDCProvider(ProviderBase):
    """OpenID Connect component base."""

    __mock_component__ = "oidc"


class ProdOIDCProvider(OIDCProvider):
    """Production provider with one protocol client per configured issuer."""

    __is_mock__ = False

    @provide(scope=Scope.APP)
    def get_oidc_clients(self, settings: Settings) -> dict[str, OpenIDConnectClient]:
        """Provide protocol clients keyed by config id.

        Clients live for the whole application so discovery documents and
        signing keys are fetched once per issuer.

        Args:
            settings: Application settings

        Returns:
            Dictionary mapping config id to protocol client
        """
        clients: dict[str, OpenIDConnectClient] = {}
        for config_id, issuer in settings.oidc.issuers.items():
            options = settings.oidc.plugin_options(config_id)
            clients[config_id] = RealOpenIDConnectClient(
                issuer=issuer,
                redirect_uri=settings.callback_url(config_id),
                force_reauth=options.force_reauth,
            )
        return clients
