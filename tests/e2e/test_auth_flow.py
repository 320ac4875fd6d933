"""End-to-end tests for the OpenID Connect login flow."""

from urllib.parse import parse_qs, urlsplit

from fastapi.testclient import TestClient
import pytest

from oidclink.domain.service import OpenIDConnectClient
from oidclink.interface.api.app import create_app
from tests.di import MOCK_CONFIG_ID, MOCK_PROVIDER_URL, build_test_container

COOKIE = "oidclink_session"


@pytest.fixture
def container():
    """Create the test container shared by the app and the test."""
    return build_test_container()


@pytest.fixture
def client(container):
    """Create test client with test container."""
    with TestClient(create_app(container)) as test_client:
        yield test_client


@pytest.fixture
def mock_client(client, container):
    """The mock issuer client the app talks to."""
    clients = client.portal.call(container.get, dict[str, OpenIDConnectClient])
    return clients[MOCK_CONFIG_ID]


def start_login(client: TestClient) -> str:
    """Start a login and return the state the issuer would echo back."""
    response = client.get(f"/auth/login/{MOCK_CONFIG_ID}", follow_redirects=False)
    assert response.status_code == 302
    location = response.headers["location"]
    assert location.startswith(f"{MOCK_PROVIDER_URL}/authorize")
    return parse_qs(urlsplit(location).query)["state"][0]


def complete_login(client: TestClient, code: str = "abc"):
    state = start_login(client)
    return client.get(
        f"/auth/callback/{MOCK_CONFIG_ID}",
        params={"code": code, "state": state},
        follow_redirects=False,
    )


class TestHealth:
    """End-to-end tests for the health endpoint."""

    def test_health(self, client):
        """Should report healthy with the configured issuers."""
        response = client.get("/health")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert data["issuers"] == [MOCK_CONFIG_ID]


class TestAuthFlow:
    """End-to-end tests for login, logout and back-channel logout."""

    def test_login_sets_session_cookie(self, client):
        """Should redirect to the issuer and start a session."""
        # Act
        response = client.get(
            f"/auth/login/{MOCK_CONFIG_ID}", follow_redirects=False
        )

        # Assert
        assert response.status_code == 302
        assert "mock=true" in response.headers["location"]
        assert COOKIE in response.cookies

    def test_unknown_issuer_not_found(self, client):
        """Should return 404 for an unconfigured issuer."""
        response = client.get("/auth/login/nope", follow_redirects=False)

        assert response.status_code == 404

    def test_callback_logs_in(self, client):
        """Should log the session in and redirect to the main page."""
        # Act
        response = complete_login(client)

        # Assert
        assert response.status_code == 302
        assert response.headers["location"] == "http://localhost:8000/"

        me = client.get("/auth/me").json()
        assert me["authenticated"] is True
        assert me["user"]["username"] == "Mockuser"
        assert me["user"]["subject"] == "mock-abc"
        assert me["user"]["issuer"] == MOCK_PROVIDER_URL

    def test_callback_issues_new_session_id(self, client):
        """Should move the session to a new id once the login succeeds."""
        # Arrange
        state = start_login(client)
        pre_login_id = client.cookies[COOKIE]

        # Act
        response = client.get(
            f"/auth/callback/{MOCK_CONFIG_ID}",
            params={"code": "abc", "state": state},
            follow_redirects=False,
        )

        # Assert
        assert response.status_code == 302
        logged_in_id = response.cookies[COOKIE]
        assert logged_in_id != pre_login_id
        assert client.get("/auth/me").json()["authenticated"] is True

        client.cookies.clear()
        client.cookies.set(COOKIE, pre_login_id)
        assert client.get("/auth/me").json()["authenticated"] is False

    def test_callback_with_wrong_state(self, client):
        """Should reject a callback whose state was not issued to the session."""
        start_login(client)

        response = client.get(
            f"/auth/callback/{MOCK_CONFIG_ID}",
            params={"code": "abc", "state": "forged"},
            follow_redirects=False,
        )

        assert response.status_code == 400
        assert client.get("/auth/me").json()["authenticated"] is False

    def test_callback_state_single_use(self, client):
        """Should not accept the same callback twice."""
        state = start_login(client)
        params = {"code": "abc", "state": state}
        first = client.get(
            f"/auth/callback/{MOCK_CONFIG_ID}", params=params, follow_redirects=False
        )

        second = client.get(
            f"/auth/callback/{MOCK_CONFIG_ID}", params=params, follow_redirects=False
        )

        assert first.status_code == 302
        assert second.status_code == 400

    def test_callback_without_session(self, client):
        """Should reject a callback without a login in progress."""
        response = client.get(
            f"/auth/callback/{MOCK_CONFIG_ID}",
            params={"code": "abc", "state": "x"},
            follow_redirects=False,
        )

        assert response.status_code == 400

    def test_failed_handshake(self, client):
        """Should answer 401 when the issuer handshake fails."""
        response = complete_login(client, code="fail")

        assert response.status_code == 401
        assert "Mock handshake failed" in response.json()["detail"]

    def test_issuer_error(self, client):
        """Should answer 401 when the issuer reports an error."""
        start_login(client)

        response = client.get(
            f"/auth/callback/{MOCK_CONFIG_ID}",
            params={"error": "access_denied", "error_description": "User said no"},
            follow_redirects=False,
        )

        assert response.status_code == 401
        assert response.json()["detail"] == "User said no"

    def test_groups_from_access_token(self, client, mock_client):
        """Should mirror access token roles into groups, and refresh them."""
        # Arrange
        mock_client.access_token_claims = {"roles": ["editor"]}
        complete_login(client)

        # Act
        me = client.get("/auth/me").json()
        refreshed = client.post("/auth/groups/refresh")

        # Assert
        assert me["user"]["groups"] == ["oidc_editor"]
        assert refreshed.status_code == 200
        assert refreshed.json() == {"synchronized": True, "groups": ["oidc_editor"]}

    def test_refresh_groups_requires_login(self, client):
        """Should answer 401 without a logged-in session."""
        response = client.post("/auth/groups/refresh")

        assert response.status_code == 401

    def test_logout(self, client):
        """Should end the session and redirect to the main page."""
        complete_login(client)

        response = client.get("/auth/logout", follow_redirects=False)

        assert response.status_code == 302
        assert response.headers["location"] == "http://localhost:8000/"
        assert client.get("/auth/me").json()["authenticated"] is False

    def test_backchannel_logout(self, client):
        """Should end the user's sessions on the issuer's request."""
        # Arrange
        complete_login(client)

        # Act
        response = client.post(
            f"/auth/backchannel-logout/{MOCK_CONFIG_ID}",
            data={"logout_token": "logout:mock-abc"},
        )

        # Assert
        assert response.status_code == 200
        assert response.headers["cache-control"] == "no-store"
        assert response.json() == {"sessions_invalidated": 1}
        assert client.get("/auth/me").json()["authenticated"] is False

    def test_backchannel_logout_unverified(self, client):
        """Should answer 400 for a token that fails verification."""
        response = client.post(
            f"/auth/backchannel-logout/{MOCK_CONFIG_ID}",
            data={"logout_token": "garbage"},
        )

        assert response.status_code == 400
        assert response.json()["error"] == "not-verified"
