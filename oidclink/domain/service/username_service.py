"""Username resolution domain service."""

import uuid
from collections.abc import Callable
from typing import Any

import logfire

from oidclink.config import PluginOptions
from oidclink.domain.repository.user import UserRepository
from oidclink.domain.value import (
    DEFAULT_USERNAME,
    UsernameRigor,
    canonicalize_username,
)

from .base import Service


def _email_local_part(email: str) -> str:
    at = email.find("@")
    return email[:at] if at > 0 else email


class UsernameService(Service):
    """Derives and allocates usernames for new accounts."""

    def __init__(
        self,
        user_repository: UserRepository,
        id_factory: Callable[[], Any] = uuid.uuid4,
    ) -> None:
        """Initialize username service.

        Args:
            user_repository: User repository used for availability checks
            id_factory: Source of random names (uuid4 by default)
        """
        self.user_repository = user_repository
        self.id_factory = id_factory

    @staticmethod
    def resolve_preferred_username(
        claim_value: Any,
        real_name: str | None,
        email: str | None,
        attributes: dict[str, Any],
        options: PluginOptions,
    ) -> str | None:
        """Derive the username the identity would like to have.

        The preferred-username claim wins. Without it, the real name and then
        the local part of the email address are used when enabled. The
        configured processor then sees the candidate (possibly None) and the
        result is canonicalized.

        Args:
            claim_value: Value of the preferred-username claim
            real_name: Real name after processing
            email: Email address after processing
            attributes: Merged token claims, passed to the processor
            options: Effective plugin options

        Returns:
            Canonical username, or None if nothing usable was derived
        """
        preferred = claim_value if claim_value else None
        if preferred is None:
            if options.use_real_name_as_username and real_name:
                preferred = real_name
            elif options.use_email_name_as_username and email:
                preferred = _email_local_part(email)

        preferred = options.preferred_username_processor(preferred, attributes)
        if not preferred:
            return None

        return canonicalize_username(str(preferred))

    async def is_registered(self, name: str) -> bool:
        """Check whether an account with this name exists."""
        return await self.user_repository.find_by_name(name) is not None

    async def resolve_available_username(self, preferred: str | None) -> str:
        """Allocate a free username based on a preferred one.

        Args:
            preferred: Preferred username, or None

        Returns:
            ``preferred`` (default "User") if free, else the first free
            ``preferred`` + N for N = 1, 2, ...
        """
        base = preferred if preferred is not None else DEFAULT_USERNAME
        with logfire.span("username_service.resolve_available_username", base=base):
            if not await self.is_registered(base):
                return base

            count = 1
            while await self.is_registered(f"{base}{count}"):
                count += 1

            logfire.info(
                "Username taken, using suffix", base=base, username=f"{base}{count}"
            )
            return f"{base}{count}"

    async def resolve_random_username(self) -> str:
        """Allocate a free username made of a random UUID."""
        with logfire.span("username_service.resolve_random_username"):
            while True:
                name = canonicalize_username(
                    str(self.id_factory()), UsernameRigor.CREATABLE
                )
                if name and not await self.is_registered(name):
                    return name
