"""Mappers for converting between database rows and domain models.

Domain models are immutable pydantic models, so rows are mapped by hand
instead of through SQLAlchemy's ORM.
"""

from typing import Any, Mapping

from oidclink.domain.model import IdentityLink, User
from oidclink.domain.value import UserId


def row_to_user(row: Mapping[str, Any]) -> User:
    """Convert database row to User domain model.

    Args:
        row: Database row as mapping

    Returns:
        User domain model
    """
    return User(
        id=UserId(row["id"]),
        name=row["name"],
        real_name=row.get("real_name"),
        email=row.get("email"),
        registration=row.get("registration"),
    )


def user_to_dict(user: User) -> dict[str, Any]:
    """Convert User domain model to database dict.

    Args:
        user: User domain model

    Returns:
        Dict suitable for database insertion/update
    """
    return user.model_dump()


def row_to_identity_link(row: Mapping[str, Any]) -> IdentityLink:
    """Convert database row to IdentityLink domain model."""
    return IdentityLink(
        user_id=UserId(row["user_id"]),
        subject=row["subject"],
        issuer=row["issuer"],
    )
