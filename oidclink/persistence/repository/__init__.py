"""PostgreSQL repository implementations."""

from oidclink.persistence.repository.identity_link import (
    PostgresIdentityLinkRepository,
)
from oidclink.persistence.repository.user import PostgresUserRepository
from oidclink.persistence.repository.user_group import PostgresUserGroupRepository

__all__ = [
    "PostgresIdentityLinkRepository",
    "PostgresUserGroupRepository",
    "PostgresUserRepository",
]
