"""Group synchronization domain service.

Mirrors roles found in the access token into local groups. Every group this
service manages starts with ``oidc_``; groups without that prefix belong to
the host and are never touched.
"""

from collections.abc import Iterable, Mapping, Sequence
from typing import Any

import logfire

from oidclink.config import OpenIDConnectSettings, RoleMapping
from oidclink.domain.model.user import User
from oidclink.domain.repository.identity_link import IdentityLinkRepository
from oidclink.domain.repository.user_group import UserGroupRepository
from oidclink.domain.service.access_token_service import AccessTokenService
from oidclink.domain.service.session_token_service import SessionTokenService
from oidclink.domain.value import AuthContext, AuthPlugin, SessionId

from .base import Service

GROUP_PREFIX = "oidc_"

_MISSING = object()


def get_nested_property_as_list(obj: Any, path: Sequence[str]) -> list[Any]:
    """Walk a claim path through mappings and attribute objects.

    Args:
        obj: Root object (usually the access token payload)
        path: Keys to follow

    Returns:
        The value at the end of the path as a list: empty if any step is
        missing, a one-element list for a scalar
    """
    if obj is None:
        return []
    for key in path:
        if isinstance(obj, Mapping):
            obj = obj.get(key, _MISSING)
        else:
            obj = getattr(obj, key, _MISSING)
        if obj is _MISSING:
            return []
    if isinstance(obj, (list, tuple)):
        return list(obj)
    return [obj]


def build_groups(payload: Any, mappings: Iterable[RoleMapping | None]) -> list[str]:
    """Build the managed group names for a token payload.

    Args:
        payload: Access token payload
        mappings: Role mappings to apply (None entries are skipped)

    Returns:
        Deduplicated group names, in first-seen order
    """
    groups: list[str] = []
    for mapping in mappings:
        if mapping is None or not mapping.path:
            continue
        for role in get_nested_property_as_list(payload, mapping.path):
            for prefix in mapping.prefix:
                group = f"{GROUP_PREFIX}{prefix}{role}"
                if group not in groups:
                    groups.append(group)
    return groups


class GroupSyncService(Service):
    """Domain service reconciling a user's ``oidc_`` groups with their token."""

    def __init__(
        self,
        user_group_repository: UserGroupRepository,
        identity_link_repository: IdentityLinkRepository,
        access_token_service: AccessTokenService,
        session_token_service: SessionTokenService,
        settings: OpenIDConnectSettings,
    ) -> None:
        """Initialize group sync service.

        Args:
            user_group_repository: Group membership repository
            identity_link_repository: Used to check the token belongs to the user
            access_token_service: Source of the (refreshed) access token
            session_token_service: Session token cache
            settings: OpenID Connect settings with per-issuer role mappings
        """
        self.user_group_repository = user_group_repository
        self.identity_link_repository = identity_link_repository
        self.access_token_service = access_token_service
        self.session_token_service = session_token_service
        self.settings = settings

    async def populate_groups(
        self, user: User, context: AuthContext | None, session_id: SessionId
    ) -> bool:
        """Reconcile a user's managed groups with the current access token.

        Nothing happens unless the session was established by the OpenID
        Connect plugin with a configured issuer and holds an access token
        issued for this user.

        Args:
            user: The logged-in user
            context: How the session was authenticated
            session_id: Host session id

        Returns:
            True if groups were reconciled, False if the sync was skipped
        """
        if context is None or context.plugin is not AuthPlugin.OPENID_CONNECT:
            return False
        issuer = self.settings.issuers.get(context.config_id or "")
        if issuer is None:
            logfire.debug("No issuer config for group sync", config_id=context.config_id)
            return False

        with logfire.span(
            "group_sync_service.populate_groups",
            user_id=user.id,
            config_id=context.config_id,
        ):
            payload = await self._access_token_for(user, context.config_id, session_id)
            if payload is None:
                return False

            current = {
                group
                for group in await self.user_group_repository.list_groups(user.id)
                if group.startswith(GROUP_PREFIX)
            }
            target = set(build_groups(payload, (issuer.global_roles, issuer.wiki_roles)))

            for group in sorted(current - target):
                await self.user_group_repository.remove_group(user.id, group)
            for group in sorted(target - current):
                await self.user_group_repository.add_group(user.id, group)

            logfire.info(
                "Groups synchronized",
                user_id=user.id,
                removed=sorted(current - target),
                added=sorted(target - current),
            )
            return True

    async def _access_token_for(
        self, user: User, config_id: str, session_id: SessionId
    ) -> dict[str, Any] | None:
        payload = await self.access_token_service.get_access_token_payload(
            session_id, config_id
        )
        if payload is None:
            logfire.debug("No access token for group sync", user_id=user.id)
            return None

        subject, issuer_url = await self.session_token_service.get_identity(session_id)
        subject = payload.get("sub", subject)
        issuer_url = payload.get("iss", issuer_url)
        owner = None
        if subject and issuer_url:
            owner = await self.identity_link_repository.find_user_by_identity(
                subject, issuer_url
            )
        if owner is None or owner.id != user.id:
            logfire.warn("Access token does not belong to user", user_id=user.id)
            return None
        return payload
