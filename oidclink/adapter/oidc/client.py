"""OpenID Connect client implementation.

Authorization code flow with optional PKCE. ID tokens and logout tokens
are verified with PyJWT against the provider's JWKS.
"""

import secrets
import ssl
import time
from dataclasses import dataclass
from typing import Any
from urllib.parse import urlencode

import httpx
import jwt
import logfire

from oidclink.adapter.error import ProviderError
from oidclink.adapter.oidc.discovery import ProviderMetadata, discover_provider
from oidclink.adapter.oidc.pkce import generate_pkce_pair
from oidclink.config import IssuerSettings
from oidclink.domain.service.auth_service import OpenIDConnectClient
from oidclink.domain.value import LogoutClaims, ProviderTokens

BACKCHANNEL_LOGOUT_EVENT = "http://schemas.openid.net/event/backchannel-logout"

# Clock skew tolerated when checking exp/iat/nbf
JWT_LEEWAY = 60

_USER_INFO_CACHE_SIZE = 256

# Seconds a started login may take to come back to the callback
PENDING_AUTHORIZATION_TTL = 15 * 60
_PENDING_SWEEP_INTERVAL = 60


class OpenIDConnectError(ProviderError):
    """OpenID Connect protocol error."""

    pass


@dataclass
class _PendingAuthorization:
    nonce: str
    code_verifier: str | None
    expires_at: float


class RealOpenIDConnectClient(OpenIDConnectClient):
    """OpenID Connect client for one issuer.

    Pending authorizations (nonce and PKCE verifier per state) are kept in
    process memory, so the callback must reach the process that started
    the login. They expire after PENDING_AUTHORIZATION_TTL seconds.
    """

    def __init__(
        self,
        issuer: IssuerSettings,
        redirect_uri: str,
        force_reauth: bool = False,
    ) -> None:
        """Initialize OpenID Connect client.

        Args:
            issuer: Issuer configuration
            redirect_uri: Callback URL registered with the issuer
            force_reauth: Ask the provider to re-prompt for credentials
        """
        self.issuer = issuer
        self.redirect_uri = redirect_uri
        self.force_reauth = force_reauth

        self._metadata: ProviderMetadata | None = None
        self._jwks: jwt.PyJWKSet | None = None
        self._pending: dict[str, _PendingAuthorization] = {}
        self._clock = time.monotonic
        self._next_sweep = 0.0
        self._user_info: dict[str, dict[str, Any]] = {}

    @property
    def provider_url(self) -> str:
        return self.issuer.provider_url

    def _http(self) -> httpx.AsyncClient:
        context = ssl.create_default_context()
        if not self.issuer.verify_host or not self.issuer.verify_peer:
            context.check_hostname = False
        if not self.issuer.verify_peer:
            context.verify_mode = ssl.CERT_NONE
        return httpx.AsyncClient(timeout=30.0, proxy=self.issuer.proxy, verify=context)

    async def _get_metadata(self) -> ProviderMetadata:
        if self._metadata is None:
            try:
                async with self._http() as http:
                    self._metadata = await discover_provider(
                        http,
                        self.provider_url,
                        overrides=self.issuer.provider_config,
                        params=self.issuer.well_known_config_parameters,
                    )
            except httpx.HTTPError as e:
                logfire.error(
                    "OpenID Connect discovery failed",
                    provider_url=self.provider_url,
                    error=str(e),
                )
                raise OpenIDConnectError(f"Discovery failed: {e}") from e
        return self._metadata

    async def _get_jwks(self, refresh: bool = False) -> jwt.PyJWKSet:
        if self._jwks is None or refresh:
            metadata = await self._get_metadata()
            try:
                async with self._http() as http:
                    response = await http.get(metadata.jwks_uri)
                    response.raise_for_status()
                self._jwks = jwt.PyJWKSet.from_dict(response.json())
            except (httpx.HTTPError, jwt.PyJWTError) as e:
                raise OpenIDConnectError(f"Could not load signing keys: {e}") from e
        return self._jwks

    async def _signing_key(self, token: str) -> Any:
        try:
            header = jwt.get_unverified_header(token)
        except jwt.PyJWTError as e:
            raise OpenIDConnectError(f"Malformed token: {e}") from e

        if header.get("alg", "").startswith("HS"):
            return self.issuer.client_secret

        kid = header.get("kid")
        jwks = await self._get_jwks()
        if kid is None:
            return jwks.keys[0].key
        try:
            return jwks[kid].key
        except KeyError:
            # Keys may have rotated since they were cached
            jwks = await self._get_jwks(refresh=True)
            try:
                return jwks[kid].key
            except KeyError:
                raise OpenIDConnectError(f"Unknown signing key: {kid}") from None

    async def _verify_jwt(self, token: str) -> dict[str, Any]:
        metadata = await self._get_metadata()
        algorithms = [
            alg
            for alg in metadata.id_token_signing_alg_values_supported
            if alg.lower() != "none"
        ]
        key = await self._signing_key(token)
        try:
            return jwt.decode(
                token,
                key=key,
                algorithms=algorithms,
                audience=self.issuer.client_id,
                issuer=metadata.issuer,
                leeway=JWT_LEEWAY,
            )
        except jwt.PyJWTError as e:
            raise OpenIDConnectError(f"Token verification failed: {e}") from e

    @staticmethod
    def _access_token_payload(access_token: str) -> dict[str, Any]:
        """Read the claims of a JWT access token, {} for opaque tokens.

        The access token is meant for resource servers; its signature is not
        ours to check.
        """
        try:
            return jwt.decode(access_token, options={"verify_signature": False})
        except jwt.PyJWTError:
            return {}

    async def _token_request(self, data: dict[str, str]) -> dict[str, Any]:
        metadata = await self._get_metadata()
        supported = metadata.token_endpoint_auth_methods_supported
        method = next(
            (m for m in self.issuer.auth_methods if m in supported),
            "client_secret_basic",
        )

        auth = None
        if method == "client_secret_post":
            data = {
                **data,
                "client_id": self.issuer.client_id,
                "client_secret": self.issuer.client_secret,
            }
        else:
            auth = (self.issuer.client_id, self.issuer.client_secret)

        try:
            async with self._http() as http:
                response = await http.post(
                    metadata.token_endpoint,
                    data=data,
                    auth=auth,
                    headers={"Accept": "application/json"},
                )
        except httpx.HTTPError as e:
            logfire.error("Token request HTTP error", error=str(e))
            raise OpenIDConnectError(f"HTTP error during token request: {e}") from e

        if response.status_code != 200:
            logfire.error(
                "Token request failed",
                status_code=response.status_code,
                grant_type=data.get("grant_type"),
                error=response.text,
            )
            raise OpenIDConnectError(f"Token request failed: {response.status_code}")

        result = response.json()
        if "access_token" not in result:
            raise OpenIDConnectError("Token response has no access_token")
        return result

    async def initiate_authorization(self, state: str) -> str:
        """Build the authorization URL and remember nonce and PKCE verifier."""
        metadata = await self._get_metadata()

        nonce = secrets.token_urlsafe(16)
        params = {
            "response_type": "code",
            "client_id": self.issuer.client_id,
            "redirect_uri": self.redirect_uri,
            "scope": " ".join(self.issuer.scope),
            "state": state,
            "nonce": nonce,
        }

        code_verifier = None
        method = self.issuer.code_challenge_method
        if method:
            code_verifier, code_challenge = generate_pkce_pair(method)
            params["code_challenge"] = code_challenge
            params["code_challenge_method"] = method

        if self.force_reauth:
            params["prompt"] = "login"
        params.update(self.issuer.auth_params)

        now = self._clock()
        self._prune_pending(now)
        self._pending[state] = _PendingAuthorization(
            nonce, code_verifier, now + PENDING_AUTHORIZATION_TTL
        )

        logfire.info(
            "OpenID Connect authorization initiated",
            provider_url=self.provider_url,
            redirect_uri=self.redirect_uri,
            pkce=bool(method),
        )
        return f"{metadata.authorization_endpoint}?{urlencode(params)}"

    def _prune_pending(self, now: float) -> None:
        if now < self._next_sweep:
            return
        self._next_sweep = now + _PENDING_SWEEP_INTERVAL
        expired = [s for s, p in self._pending.items() if p.expires_at <= now]
        for state in expired:
            del self._pending[state]

    async def authenticate(self, code: str, state: str) -> ProviderTokens:
        """Exchange the code and verify the ID token.

        Raises:
            OpenIDConnectError: If the state is unknown or any step fails
        """
        pending = self._pending.pop(state, None)
        if pending is None or pending.expires_at <= self._clock():
            raise OpenIDConnectError("Invalid state or authorization expired")

        data = {
            "grant_type": "authorization_code",
            "code": code,
            "redirect_uri": self.redirect_uri,
        }
        if pending.code_verifier:
            data["code_verifier"] = pending.code_verifier
        result = await self._token_request(data)

        id_token = result.get("id_token")
        if not id_token:
            raise OpenIDConnectError("Token response has no id_token")
        id_token_payload = await self._verify_jwt(id_token)
        if id_token_payload.get("nonce") != pending.nonce:
            raise OpenIDConnectError("ID token nonce mismatch")

        logfire.info(
            "OpenID Connect handshake completed",
            provider_url=self.provider_url,
            subject=id_token_payload.get("sub"),
        )
        return ProviderTokens(
            access_token=result["access_token"],
            access_token_payload=self._access_token_payload(result["access_token"]),
            id_token=id_token,
            id_token_payload=id_token_payload,
            refresh_token=result.get("refresh_token"),
        )

    async def request_user_info(self, tokens: ProviderTokens, claim: str) -> Any:
        """Read a claim from the user-info endpoint, fetched once per token."""
        info = self._user_info.get(tokens.access_token)
        if info is None:
            info = await self._fetch_user_info(tokens)
            if len(self._user_info) >= _USER_INFO_CACHE_SIZE:
                self._user_info.clear()
            self._user_info[tokens.access_token] = info
        return info.get(claim)

    async def _fetch_user_info(self, tokens: ProviderTokens) -> dict[str, Any]:
        metadata = await self._get_metadata()
        if not metadata.userinfo_endpoint:
            return {}

        try:
            async with self._http() as http:
                response = await http.get(
                    metadata.userinfo_endpoint,
                    headers={
                        "Authorization": f"Bearer {tokens.access_token}",
                        "Accept": "application/json",
                    },
                )
        except httpx.HTTPError as e:
            raise OpenIDConnectError(f"HTTP error fetching user info: {e}") from e

        if response.status_code != 200:
            logfire.error("User info request failed", status_code=response.status_code)
            raise OpenIDConnectError(f"User info request failed: {response.status_code}")

        info = response.json()
        expected_sub = tokens.id_token_payload.get("sub")
        if expected_sub and info.get("sub") != expected_sub:
            raise OpenIDConnectError("User info subject does not match ID token")
        return info

    async def refresh_token(self, refresh_token: str) -> ProviderTokens:
        """Refresh tokens. ID tokens returned by a refresh are verified too."""
        result = await self._token_request(
            {"grant_type": "refresh_token", "refresh_token": refresh_token}
        )
        id_token = result.get("id_token")
        return ProviderTokens(
            access_token=result["access_token"],
            access_token_payload=self._access_token_payload(result["access_token"]),
            id_token=id_token,
            id_token_payload=await self._verify_jwt(id_token) if id_token else {},
            refresh_token=result.get("refresh_token"),
        )

    async def sign_out_url(self, id_token: str | None, return_url: str) -> str:
        """Build the RP-initiated logout URL.

        Providers without an end-session endpoint send the user straight
        to ``return_url``.
        """
        metadata = await self._get_metadata()
        if not metadata.end_session_endpoint:
            logfire.warn(
                "Provider has no end_session_endpoint", provider_url=self.provider_url
            )
            return return_url

        params = {"post_logout_redirect_uri": return_url}
        if id_token:
            params["id_token_hint"] = id_token
        return f"{metadata.end_session_endpoint}?{urlencode(params)}"

    async def verify_logout_token(self, logout_token: str) -> LogoutClaims | None:
        """Verify a back-channel logout token, None if it does not verify."""
        try:
            payload = await self._verify_jwt(logout_token)
        except OpenIDConnectError as e:
            logfire.warn("Logout token rejected", error=str(e))
            return None

        events = payload.get("events")
        if not isinstance(events, dict) or BACKCHANNEL_LOGOUT_EVENT not in events:
            return None
        if "nonce" in payload:
            return None
        if not payload.get("sub") and not payload.get("sid"):
            return None

        return LogoutClaims(
            issuer=self.provider_url,
            subject=payload.get("sub"),
            session_id=payload.get("sid"),
        )


class MockOpenIDConnectClient(OpenIDConnectClient):
    """Mock OpenID Connect client for testing.

    Returns deterministic tokens without making network calls. The subject
    is ``mock-{code}``; the code ``fail`` makes the handshake fail. Tests
    adjust ``claims``, ``user_info`` and ``access_token_claims`` to shape
    the next handshake; a None value removes a default claim.
    """

    FAILING_CODE = "fail"

    def __init__(
        self,
        provider_url: str = "https://mock-issuer.example.org",
        claims: dict[str, Any] | None = None,
        user_info: dict[str, Any] | None = None,
        access_token_claims: dict[str, Any] | None = None,
        rotate_refresh_tokens: bool = False,
    ) -> None:
        self._provider_url = provider_url
        self.claims = claims or {}
        self.user_info = user_info or {}
        self.access_token_claims = access_token_claims or {}
        self.rotate_refresh_tokens = rotate_refresh_tokens
        self.refresh_count = 0

    @property
    def provider_url(self) -> str:
        return self._provider_url

    async def initiate_authorization(self, state: str) -> str:
        return f"{self._provider_url}/authorize?{urlencode({'state': state, 'mock': 'true'})}"

    async def authenticate(self, code: str, state: str) -> ProviderTokens:
        if code == self.FAILING_CODE:
            raise OpenIDConnectError("Mock handshake failed")

        defaults = {
            "iss": self._provider_url,
            "sub": f"mock-{code}",
            "aud": "mock-client",
            "preferred_username": "mockuser",
            "name": "Mock User",
            "email": "mock@example.org",
        }
        claims = {
            key: value
            for key, value in {**defaults, **self.claims}.items()
            if value is not None
        }
        return ProviderTokens(
            access_token=f"mock-access-{code}",
            access_token_payload=self._access_token_payload(claims.get("sub")),
            id_token=f"mock-id-{code}",
            id_token_payload=claims,
            refresh_token=f"mock-refresh-{code}",
        )

    def _access_token_payload(self, subject: str | None) -> dict[str, Any]:
        payload = {
            "iss": self._provider_url,
            "sub": subject,
            "exp": int(time.time()) + 3600,
        }
        payload.update(self.access_token_claims)
        return {key: value for key, value in payload.items() if value is not None}

    async def request_user_info(self, tokens: ProviderTokens, claim: str) -> Any:
        return self.user_info.get(claim)

    async def refresh_token(self, refresh_token: str) -> ProviderTokens:
        self.refresh_count += 1
        subject = self.access_token_claims.get("sub") or self.claims.get("sub")
        return ProviderTokens(
            access_token=f"mock-access-refreshed-{self.refresh_count}",
            access_token_payload={
                **self._access_token_payload(subject),
                "exp": int(time.time()) + 3600,
            },
            refresh_token=(
                f"mock-refresh-rotated-{self.refresh_count}"
                if self.rotate_refresh_tokens
                else None
            ),
        )

    async def sign_out_url(self, id_token: str | None, return_url: str) -> str:
        params = {"post_logout_redirect_uri": return_url}
        if id_token:
            params["id_token_hint"] = id_token
        return f"{self._provider_url}/logout?{urlencode(params)}"

    async def verify_logout_token(self, logout_token: str) -> LogoutClaims | None:
        """Accept tokens of the form ``logout:{subject}``."""
        prefix, _, subject = logout_token.partition(":")
        if prefix != "logout" or not subject:
            return None
        return LogoutClaims(issuer=self._provider_url, subject=subject)
