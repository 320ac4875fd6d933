"""User domain service."""

import logfire

from oidclink.domain.error import NotFoundError
from oidclink.domain.model import User
from oidclink.domain.repository import UserGroupRepository, UserRepository
from oidclink.domain.value import UserId

from .base import Service


class UserService(Service):
    """Domain service for local accounts."""

    def __init__(
        self,
        user_repository: UserRepository,
        user_group_repository: UserGroupRepository,
    ) -> None:
        """Initialize user service.

        Args:
            user_repository: User repository
            user_group_repository: Group membership repository
        """
        self.user_repository = user_repository
        self.user_group_repository = user_group_repository

    async def get_by_id(self, user_id: UserId) -> User:
        """Get user by ID.

        Raises:
            NotFoundError: If user not found
        """
        with logfire.span("user_service.get_by_id", user_id=user_id):
            user = await self.user_repository.find_by_id(user_id)
            if not user:
                logfire.warn("User not found", user_id=user_id)
                raise NotFoundError("User", str(user_id))
            return user

    async def create_user(
        self, name: str, real_name: str | None, email: str | None
    ) -> User:
        """Register a new account.

        Args:
            name: Canonical username
            real_name: Display name
            email: Email address

        Returns:
            The created user
        """
        with logfire.span("user_service.create_user", name=name):
            user = await self.user_repository.create(name, real_name, email)
            logfire.info("User created", user_id=user.id, name=user.name)
            return user

    async def update_profile(
        self, user: User, real_name: str | None, email: str | None
    ) -> User:
        """Copy real name and email from the provider when they changed.

        Empty values from the provider never overwrite stored ones.
        """
        updates = {}
        if real_name and real_name != user.real_name:
            updates["real_name"] = real_name
        if email and email != user.email:
            updates["email"] = email
        if not updates:
            return user

        with logfire.span("user_service.update_profile", user_id=user.id):
            saved = await self.user_repository.save(user.model_copy(update=updates))
            logfire.info("User profile updated", user_id=user.id, fields=sorted(updates))
            return saved

    async def get_groups(self, user_id: UserId) -> list[str]:
        """Get all groups of a user, sorted."""
        return sorted(await self.user_group_repository.list_groups(user_id))
