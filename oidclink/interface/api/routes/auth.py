"""Authentication routes."""

import logging
import secrets

from dishka.integrations.fastapi import DishkaRoute, FromDishka
from fastapi import APIRouter, Form, HTTPException, Request, Response, status
from fastapi.responses import JSONResponse, RedirectResponse
from pydantic import BaseModel

from oidclink.application.usecase.auth import (
    AuthenticateUseCase,
    BackchannelLogoutUseCase,
    FinalizeLoginUseCase,
    GetCurrentUserUseCase,
    InitiateLoginUseCase,
    LogoutUseCase,
    PopulateGroupsUseCase,
)
from oidclink.application.usecase.auth.authenticate import AuthenticateRequest
from oidclink.application.usecase.auth.backchannel_logout import (
    BackchannelLogoutRequest,
)
from oidclink.application.usecase.auth.finalize_login import FinalizeLoginRequest
from oidclink.application.usecase.auth.get_current_user import (
    GetCurrentUserRequest,
    GetCurrentUserResponse,
)
from oidclink.application.usecase.auth.initiate_login import InitiateLoginRequest
from oidclink.application.usecase.auth.logout import LogoutRequest
from oidclink.application.usecase.auth.populate_groups import (
    PopulateGroupsRequest,
    PopulateGroupsResponse,
)
from oidclink.config import Settings
from oidclink.domain.error import NotFoundError
from oidclink.domain.service import SessionTokenService
from oidclink.domain.value import SessionId

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["authentication"], route_class=DishkaRoute)


class AuthStatusResponse(BaseModel):
    """Response for checking authentication status.

    Used by /auth/me to return the current user if the session is logged in,
    or indicate unauthenticated state without raising an error.
    """

    authenticated: bool
    user: GetCurrentUserResponse | None = None


def _session_id(request: Request, settings: Settings) -> SessionId | None:
    return request.cookies.get(settings.session.cookie_name)


def _set_session_cookie(
    response: Response, session_id: SessionId, settings: Settings
) -> None:
    response.set_cookie(
        key=settings.session.cookie_name,
        value=session_id,
        httponly=True,
        secure=settings.api.protocol == "https",
        samesite="lax",
        path="/",
        max_age=settings.session.cookie_max_age,
    )


@router.get("/login/{config_id}")
async def login(
    config_id: str,
    request: Request,
    initiate_login_use_case: FromDishka[InitiateLoginUseCase],
    session_token_service: FromDishka[SessionTokenService],
    settings: FromDishka[Settings],
) -> RedirectResponse:
    """Start a login at the issuer configured under ``config_id``.

    Remembers the state in the session and redirects to the issuer's
    authorization endpoint.

    Example:
        GET /auth/login/keycloak

        Redirects to: https://sso.example.org/realms/main/protocol/openid-connect/auth?...
    """
    session_id = _session_id(request, settings) or SessionId(
        secrets.token_urlsafe(32)
    )
    response = await initiate_login_use_case.execute(
        InitiateLoginRequest(config_id=config_id)
    )
    await session_token_service.store_state(session_id, config_id, response.state)

    redirect = RedirectResponse(
        url=response.authorization_url, status_code=status.HTTP_302_FOUND
    )
    _set_session_cookie(redirect, session_id, settings)
    return redirect


@router.get("/callback/{config_id}")
async def callback(
    config_id: str,
    request: Request,
    authenticate_use_case: FromDishka[AuthenticateUseCase],
    finalize_login_use_case: FromDishka[FinalizeLoginUseCase],
    session_token_service: FromDishka[SessionTokenService],
    settings: FromDishka[Settings],
    code: str | None = None,
    state: str | None = None,
    error: str | None = None,
    error_description: str | None = None,
) -> RedirectResponse:
    """Handle the issuer's redirect and log the session in.

    Example:
        GET /auth/callback/keycloak?code=abc123&state=xyz789

        Redirects to the main page with the session cookie logged in.
    """
    session_id = _session_id(request, settings)
    if session_id is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail="No login in progress"
        )
    if error:
        logger.warning(f"Issuer {config_id} returned error: {error}")
        await session_token_service.clear(session_id)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=error_description or error,
        )
    if not code or not state:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Missing code or state",
        )
    if not await session_token_service.check_state(session_id, config_id, state):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail="State mismatch"
        )

    result = await authenticate_use_case.execute(
        AuthenticateRequest(
            config_id=config_id, code=code, state=state, session_id=session_id
        )
    )
    if not result.authenticated:
        logger.warning(f"Authentication failed: {result.error_message}")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=result.error_message or "Authentication failed",
        )

    login_response = await finalize_login_use_case.execute(
        FinalizeLoginRequest(config_id=config_id, session_id=session_id, result=result)
    )
    logger.info(
        f"User {login_response.username} logged in via {config_id}"
        f" (created={login_response.created})"
    )
    session_id = await session_token_service.rotate(session_id)

    redirect = RedirectResponse(
        url=settings.api.base_url + settings.main_page,
        status_code=status.HTTP_302_FOUND,
    )
    _set_session_cookie(redirect, session_id, settings)
    return redirect


@router.get("/logout")
async def logout(
    request: Request,
    logout_use_case: FromDishka[LogoutUseCase],
    settings: FromDishka[Settings],
    returnto: str | None = None,
) -> RedirectResponse:
    """Log the session out, at the issuer too when single logout is on."""
    session_id = _session_id(request, settings)
    if session_id is None:
        return RedirectResponse(
            url=settings.api.base_url + settings.main_page,
            status_code=status.HTTP_302_FOUND,
        )

    response = await logout_use_case.execute(
        LogoutRequest(session_id=session_id, returnto=returnto)
    )
    redirect = RedirectResponse(
        url=response.redirect_url, status_code=status.HTTP_302_FOUND
    )
    redirect.delete_cookie(key=settings.session.cookie_name, path="/")
    return redirect


@router.post("/backchannel-logout/{config_id}")
async def backchannel_logout(
    config_id: str,
    backchannel_logout_use_case: FromDishka[BackchannelLogoutUseCase],
    logout_token: str = Form(...),
) -> JSONResponse:
    """Receive a back-channel logout token from the issuer.

    Example:
        POST /auth/backchannel-logout/keycloak
        Content-Type: application/x-www-form-urlencoded

        logout_token=eyJhbGciOi...
    """
    response = await backchannel_logout_use_case.execute(
        BackchannelLogoutRequest(config_id=config_id, logout_token=logout_token)
    )
    body = response.model_dump(exclude={"status_code"}, exclude_none=True)
    return JSONResponse(
        content=body,
        status_code=response.status_code,
        headers={"Cache-Control": "no-store"},
    )


@router.get("/me", response_model=AuthStatusResponse)
async def get_current_user(
    request: Request,
    get_current_user_use_case: FromDishka[GetCurrentUserUseCase],
    settings: FromDishka[Settings],
) -> AuthStatusResponse:
    """Get the current user if the session is logged in.

    Safe to call without a session: it returns authenticated=false instead
    of raising an error.
    """
    session_id = _session_id(request, settings)
    if not session_id:
        return AuthStatusResponse(authenticated=False)

    try:
        user = await get_current_user_use_case.execute(
            GetCurrentUserRequest(session_id=session_id)
        )
        return AuthStatusResponse(authenticated=True, user=user)
    except NotFoundError:
        return AuthStatusResponse(authenticated=False)


@router.post("/groups/refresh", response_model=PopulateGroupsResponse)
async def refresh_groups(
    request: Request,
    populate_groups_use_case: FromDishka[PopulateGroupsUseCase],
    session_token_service: FromDishka[SessionTokenService],
    settings: FromDishka[Settings],
) -> PopulateGroupsResponse:
    """Resynchronize the session user's groups from the current access token."""
    session_id = _session_id(request, settings)
    user_id = (
        await session_token_service.get_user_id(session_id) if session_id else None
    )
    if session_id is None or user_id is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED, detail="Not logged in"
        )

    return await populate_groups_use_case.execute(
        PopulateGroupsRequest(user_id=user_id, session_id=session_id)
    )
