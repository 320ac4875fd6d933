"""Core DI providers."""

from dishka import Scope, provide
from pydantic import ValidationError

from oidclink.config import Settings
from oidclink.util.di.base import ProviderBase
from oidclink.util.error import ConfigurationError


class ConfigProvider(ProviderBase):
    """Config component base."""

    __mock_component__ = "config"


class ProdConfigProvider(ConfigProvider):
    """Production config provider.

    Settings are loaded from environment variables and .env file automatically.
    """

    __is_mock__ = False

    @provide(scope=Scope.APP)
    def provide_settings(self) -> Settings:
        """Provide application settings from environment."""
        try:
            return Settings()
        except ValidationError as e:
            raise ConfigurationError(f"Invalid configuration: {e}") from e
