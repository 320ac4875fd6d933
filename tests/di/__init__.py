"""Mock providers for testing."""

from .config import MOCK_CONFIG_ID, MOCK_PROVIDER_URL, MockConfigProvider
from .oidc import MockOIDCProvider
from .persistence import MockPersistenceProvider
from .container import build_test_container

__all__ = [
    "MOCK_CONFIG_ID",
    "MOCK_PROVIDER_URL",
    "MockConfigProvider",
    "MockOIDCProvider",
    "MockPersistenceProvider",
    "build_test_container",
]
