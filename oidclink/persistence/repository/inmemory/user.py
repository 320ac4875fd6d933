"""In-memory user repository for testing."""

from datetime import datetime, timezone

from oidclink.domain.model.user import User
from oidclink.domain.repository.user import UserRepository
from oidclink.domain.value import UserId


class InMemoryUserRepository(UserRepository):
    """In-memory implementation of UserRepository for testing."""

    def __init__(self) -> None:
        self._users: dict[UserId, User] = {}
        self._next_id = 1

    async def find_by_id(self, user_id: UserId) -> User | None:
        """Find user by ID."""
        return self._users.get(user_id)

    async def find_by_name(self, name: str) -> User | None:
        """Find user by canonical username."""
        for user in self._users.values():
            if user.name == name:
                return user
        return None

    async def create(
        self, name: str, real_name: str | None = None, email: str | None = None
    ) -> User:
        """Create a user with the next free id."""
        if await self.find_by_name(name) is not None:
            raise ValueError(f"Username already taken: {name}")
        user = User(
            id=UserId(self._next_id),
            name=name,
            real_name=real_name,
            email=email,
            registration=datetime.now(timezone.utc),
        )
        self._users[user.id] = user
        self._next_id += 1
        return user

    async def save(self, user: User) -> User:
        """Save user, also used by tests to seed accounts with fixed ids."""
        self._users[user.id] = user
        self._next_id = max(self._next_id, user.id + 1)
        return user

    def all(self) -> list[User]:
        """All users, in id order."""
        return [self._users[user_id] for user_id in sorted(self._users)]
