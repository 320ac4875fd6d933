"""Observability configuration using Logfire.

Services and use cases log through logfire directly::

    import logfire

    with logfire.span("identity_link_service.save_link", user_id=user_id):
        ...
    logfire.info("Identity linked", user_id=user_id, issuer=issuer)

Subjects and issuers are safe to log. Tokens and client secrets never are.
"""

from typing import Any

import logfire
from fastapi import FastAPI
from sqlalchemy.ext.asyncio import AsyncEngine

from oidclink.config import Settings


def configure_logfire(settings: Settings) -> None:
    """Configure Logfire for observability.

    Sends to Logfire cloud when OBSERVABILITY__SEND_TO_LOGFIRE is true, or
    when it is unset and OBSERVABILITY__LOGFIRE_TOKEN is present. Otherwise
    console only.

    Args:
        settings: Application settings
    """
    if settings.observability.send_to_logfire is not None:
        send_to_logfire = settings.observability.send_to_logfire
    else:
        send_to_logfire = bool(settings.observability.logfire_token)

    config_kwargs: dict[str, Any] = {
        "service_name": "oidclink",
        "service_version": "0.1.0",
        "environment": settings.environment,
        "send_to_logfire": send_to_logfire,
        "console": logfire.ConsoleOptions(
            colors="auto",
            span_style="show-parents",
            include_timestamps=True,
            verbose=settings.debug,
        ),
        # Keep token material out of exported attributes
        "scrubbing": logfire.ScrubbingOptions(
            extra_patterns=["id_token", "refresh_token", "client_secret"]
        ),
    }

    if settings.observability.logfire_token:
        config_kwargs["token"] = settings.observability.logfire_token

    logfire.configure(**config_kwargs)

    logfire.info(
        "Observability configured",
        environment=settings.environment,
        debug=settings.debug,
        send_to_logfire=send_to_logfire,
        issuers=sorted(settings.oidc.issuers),
    )


def instrument_fastapi(app: FastAPI) -> None:
    """Instrument FastAPI application with Logfire.

    Args:
        app: FastAPI application instance
    """
    logfire.instrument_fastapi(app, capture_headers=False)
    logfire.info("FastAPI instrumented")


def instrument_sqlalchemy(engine: AsyncEngine) -> None:
    """Instrument SQLAlchemy engine with Logfire.

    Args:
        engine: SQLAlchemy async engine
    """
    logfire.instrument_sqlalchemy(engine=engine.sync_engine)
    logfire.info("SQLAlchemy instrumented")


def instrument_httpx() -> None:
    """Instrument httpx so discovery, token and userinfo calls are traced."""
    logfire.instrument_httpx()
    logfire.info("httpx instrumented")
