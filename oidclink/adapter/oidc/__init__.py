"""OpenID Connect protocol adapter."""

from .client import (
    MockOpenIDConnectClient,
    OpenIDConnectError,
    RealOpenIDConnectClient,
)

__all__ = [
    "MockOpenIDConnectClient",
    "OpenIDConnectError",
    "RealOpenIDConnectClient",
]
