"""Dependency injection module.

Each entry of ``PROVIDERS`` is either a concrete provider or the base of a
mockable component. ``get_provider`` resolves a base to its production or
mock subclass; mock subclasses live under ``tests/di`` and register
themselves by being imported.
"""

from typing import Type

from oidclink.util.di.application import ProdApplicationProvider
from oidclink.util.di.base import Component, ProviderBase
from oidclink.util.di.core import ConfigProvider, ProdConfigProvider
from oidclink.util.di.domain import ProdDomainProvider
from oidclink.util.di.infrastructure import (
    OIDCProvider,
    PersistenceProvider,
    ProdOIDCProvider,
    ProdPersistenceProvider,
    SessionProvider,
)

PROVIDERS: list[Type[ProviderBase]] = [
    ConfigProvider,
    ProdDomainProvider,
    ProdApplicationProvider,
    SessionProvider,
    OIDCProvider,
    PersistenceProvider,
]


def get_provider(
    base: Type[ProviderBase], use_mock: bool = False
) -> Type[ProviderBase]:
    """Resolve a provider base to the class to instantiate.

    Args:
        base: Entry of ``PROVIDERS``
        use_mock: Pick the mock subclass of a mockable component

    Returns:
        ``base`` itself for a concrete provider, else the subclass whose
        ``__is_mock__`` equals ``use_mock``

    Raises:
        ValueError: If the component has no such implementation
    """
    subclasses = base.__subclasses__()
    if not subclasses:
        return base

    for impl in subclasses:
        if impl.__is_mock__ == use_mock:
            return impl

    kind = "mock" if use_mock else "production"
    raise ValueError(
        f"No {kind} implementation for {base.__mock_component__ or base.__name__}"
    )


__all__ = [
    "PROVIDERS",
    "Component",
    "ConfigProvider",
    "OIDCProvider",
    "PersistenceProvider",
    "ProdApplicationProvider",
    "ProdConfigProvider",
    "ProdDomainProvider",
    "ProdOIDCProvider",
    "ProdPersistenceProvider",
    "ProviderBase",
    "SessionProvider",
    "get_provider",
]
