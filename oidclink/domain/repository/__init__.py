"""Repository interfaces.

Repository interfaces are defined in the domain layer (dependency inversion).
Implementations live in the persistence and adapter layers.
"""

from oidclink.domain.repository.identity_link import IdentityLinkRepository
from oidclink.domain.repository.session import SessionStore
from oidclink.domain.repository.user import UserRepository
from oidclink.domain.repository.user_group import UserGroupRepository

__all__ = [
    "IdentityLinkRepository",
    "SessionStore",
    "UserGroupRepository",
    "UserRepository",
]
