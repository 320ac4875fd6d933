"""Domain model entities."""

from oidclink.domain.model.identity_link import IdentityLink
from oidclink.domain.model.user import User

__all__ = [
    "IdentityLink",
    "User",
]
