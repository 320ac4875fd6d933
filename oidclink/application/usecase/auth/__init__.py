"""Authentication use cases."""

from .authenticate import AuthenticateRequest, AuthenticateUseCase
from .backchannel_logout import BackchannelLogoutRequest, BackchannelLogoutUseCase
from .finalize_login import (
    FinalizeLoginRequest,
    FinalizeLoginResponse,
    FinalizeLoginUseCase,
)
from .get_current_user import GetCurrentUserRequest, GetCurrentUserUseCase
from .initiate_login import InitiateLoginRequest, InitiateLoginUseCase
from .logout import LogoutRequest, LogoutUseCase
from .populate_groups import PopulateGroupsRequest, PopulateGroupsUseCase

__all__ = [
    "AuthenticateRequest",
    "AuthenticateUseCase",
    "BackchannelLogoutRequest",
    "BackchannelLogoutUseCase",
    "FinalizeLoginRequest",
    "FinalizeLoginResponse",
    "FinalizeLoginUseCase",
    "GetCurrentUserRequest",
    "GetCurrentUserUseCase",
    "InitiateLoginRequest",
    "InitiateLoginUseCase",
    "LogoutRequest",
    "LogoutUseCase",
    "PopulateGroupsRequest",
    "PopulateGroupsUseCase",
]
