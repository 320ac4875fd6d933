"""Local user account."""

from datetime import datetime

from oidclink.domain.model.common import DomainModel
from oidclink.domain.value import UserId


class User(DomainModel):
    """A local account on the host.

    ``name`` is the canonical username. ``registration`` orders accounts
    that share an email address; accounts imported from older systems may
    not have one.
    """

    id: UserId
    name: str
    real_name: str | None = None
    email: str | None = None
    registration: datetime | None = None
