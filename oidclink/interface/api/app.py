"""FastAPI application."""

from dishka import AsyncContainer
from fastapi import FastAPI

from oidclink.interface.api.error import register_error_handlers
from oidclink.interface.api.routes import auth, health
from oidclink.util.di.container import create_container, setup_di
from oidclink.util.observability import instrument_fastapi, instrument_httpx


def create_app(container: AsyncContainer | None = None) -> FastAPI:
    """Create FastAPI application.

    Note: Logfire should be configured before calling this function.
    In production, start_app.py handles this.

    Args:
        container: DI container to use; the production container by default

    Returns:
        Configured application
    """
    # Instrument httpx for discovery, token and JWKS requests
    instrument_httpx()

    app_instance = FastAPI(
        title="oidclink",
        description="OpenID Connect login for wiki accounts",
        version="0.1.0",
    )

    instrument_fastapi(app_instance)

    setup_di(app_instance, container or create_container())
    register_error_handlers(app_instance)

    app_instance.include_router(health.router)
    app_instance.include_router(auth.router)

    return app_instance
