"""Test container builder with selective unmocking."""

from dishka import AsyncContainer, make_async_container
from dishka.integrations.fastapi import FastapiProvider

from oidclink.util.di import PROVIDERS, Component, get_provider

MOCKABLE: frozenset[str] = frozenset(
    base.__mock_component__ for base in PROVIDERS if base.__mock_component__
)


def build_test_container(unmock: set[Component] | None = None) -> AsyncContainer:
    """Build a container with mocks for every component not in ``unmock``.

    Settings come from the mock config provider unless ``config`` is
    unmocked, so tests do not depend on the environment. The mock config
    points at an in-memory SQLite database, which is what ``persistence``
    uses when unmocked.

    Args:
        unmock: Components to use production implementations for

    Returns:
        Configured test container

    Raises:
        ValueError: If unknown components are requested

    Examples:
        # Unit tests - all mocks
        container = build_test_container()

        # Integration tests - real SQL repositories on SQLite
        container = build_test_container(unmock={"persistence"})
    """
    unmock = unmock or set()
    unknown = set(unmock) - MOCKABLE
    if unknown:
        raise ValueError(f"Unknown components: {sorted(unknown)}")

    providers = []
    for base in PROVIDERS:
        component = base.__mock_component__
        use_mock = component is not None and component not in unmock
        providers.append(get_provider(base, use_mock=use_mock)())

    return make_async_container(*providers, FastapiProvider())
