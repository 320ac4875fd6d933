"""Infrastructure providers."""

# Import bases
from .oidc import OIDCProvider
from .persistence import PersistenceProvider
from .session import SessionProvider

# Import implementations (needed for __subclasses__())
from .oidc import ProdOIDCProvider  # noqa: F401
from .persistence import ProdPersistenceProvider  # noqa: F401

__all__ = [
    "OIDCProvider",
    "PersistenceProvider",
    "ProdOIDCProvider",
    "ProdPersistenceProvider",
    "SessionProvider",
]
