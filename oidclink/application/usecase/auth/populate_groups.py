"""Populate groups use case."""

from pydantic import BaseModel

from oidclink.application.usecase.base import BaseUseCase
from oidclink.domain.service import GroupSyncService, SessionTokenService, UserService
from oidclink.domain.value import SessionId, UserId


class PopulateGroupsRequest(BaseModel):
    """Resynchronize the groups of the session's user."""

    user_id: UserId
    session_id: SessionId


class PopulateGroupsResponse(BaseModel):
    """Groups after synchronization."""

    synchronized: bool
    groups: list[str]


class PopulateGroupsUseCase(BaseUseCase):
    """Use case re-running group synchronization for a logged-in session."""

    def __init__(
        self,
        user_service: UserService,
        session_token_service: SessionTokenService,
        group_sync_service: GroupSyncService,
    ) -> None:
        self.user_service = user_service
        self.session_token_service = session_token_service
        self.group_sync_service = group_sync_service

    async def execute(self, request: PopulateGroupsRequest) -> PopulateGroupsResponse:
        """Synchronize groups from the session's current access token.

        Raises:
            NotFoundError: If the user does not exist
        """
        user = await self.user_service.get_by_id(request.user_id)
        context = await self.session_token_service.get_context(request.session_id)
        synchronized = await self.group_sync_service.populate_groups(
            user, context, request.session_id
        )
        return PopulateGroupsResponse(
            synchronized=synchronized,
            groups=await self.user_service.get_groups(user.id),
        )
