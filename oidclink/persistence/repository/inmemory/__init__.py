"""In-memory repository implementations for testing."""

from .identity_link import InMemoryIdentityLinkRepository
from .user import InMemoryUserRepository
from .user_group import InMemoryUserGroupRepository

__all__ = [
    "InMemoryIdentityLinkRepository",
    "InMemoryUserGroupRepository",
    "InMemoryUserRepository",
]
