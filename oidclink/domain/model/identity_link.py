"""Identity link entity.

Associates a local account with the identity an OpenID Connect provider
asserts for it.
"""

from oidclink.domain.model.common import DomainModel
from oidclink.domain.value import UserId


class IdentityLink(DomainModel):
    """The (subject, issuer) pair bound to a local account.

    At most one link exists per account. Re-linking an account overwrites
    its subject and issuer.
    """

    user_id: UserId
    subject: str  # `sub` claim, stable per issuer
    issuer: str  # provider URL of the configured client
