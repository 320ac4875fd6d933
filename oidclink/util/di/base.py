"""Base classes for dependency injection providers."""

from typing import ClassVar, Literal

from dishka import Provider

# Components that have a mock provider for tests
Component = Literal["config", "oidc", "persistence"]


class ProviderBase(Provider):
    """Provider carrying the metadata used to pick prod or mock implementations.

    A mockable component has a base class naming the component, with one
    production and one mock subclass. Concrete providers leave
    ``__mock_component__`` unset.
    """

    __mock_component__: ClassVar[Component | None] = None
    __is_mock__: ClassVar[bool] = False
