"""Integration tests for the Google sign-in redirect flow."""

from urllib.parse import parse_qs, urlparse

from fastapi.testclient import TestClient

from warden.presentation.api.config import get_api_settings
from warden.presentation.api.dependencies import get_google_client
from warden.presentation.api.routers.auth import OAUTH_STATE_COOKIE


def _login_redirect_params(response) -> dict:
    assert response.status_code == 302
    location = urlparse(response.headers["location"])
    assert location.path == "/login"
    return {key: values[0] for key, values in parse_qs(location.query).items()}


def _start(test_client: TestClient, api_v1_prefix: str) -> str:
    response = test_client.get(f"{api_v1_prefix}/auth/google", follow_redirects=False)
    assert response.status_code == 302
    return parse_qs(urlparse(response.headers["location"]).query)["state"][0]


class TestGoogleLogin:
    """Tests for GET /api/v1/auth/google."""

    def test_redirects_to_consent_screen(self, test_client: TestClient, api_v1_prefix: str):
        response = test_client.get(f"{api_v1_prefix}/auth/google", follow_redirects=False)

        assert response.status_code == 302
        location = urlparse(response.headers["location"])
        assert location.netloc == "accounts.google.com"
        state = parse_qs(location.query)["state"][0]
        assert test_client.cookies.get(OAUTH_STATE_COOKIE) == state

    def test_disabled_returns_404(
        self,
        app,
        api_settings,
        test_client: TestClient,
        api_v1_prefix: str,
    ):
        disabled = api_settings.model_copy(update={"google_oauth_enabled": False})
        del app.dependency_overrides[get_google_client]
        app.dependency_overrides[get_api_settings] = lambda: disabled

        response = test_client.get(f"{api_v1_prefix}/auth/google", follow_redirects=False)

        assert response.status_code == 404


class TestGoogleCallback:
    """Tests for GET /api/v1/auth/google/callback."""

    def test_new_user_signed_in(self, test_client: TestClient, api_v1_prefix: str):
        state = _start(test_client, api_v1_prefix)

        response = test_client.get(
            f"{api_v1_prefix}/auth/google/callback",
            params={"code": "auth-code", "state": state},
            follow_redirects=False,
        )

        params = _login_redirect_params(response)
        assert "token" in params
        me = test_client.get(
            f"{api_v1_prefix}/users/me",
            headers={"Authorization": f"Bearer {params['token']}"},
        )
        assert me.status_code == 200
        assert me.json()["value"]["email"] == "alice@example.com"
        assert me.json()["value"]["is_email_verified"] is True

    def test_repeated_sign_in_same_user(self, test_client: TestClient, api_v1_prefix: str):
        user_ids = []
        for _ in range(2):
            state = _start(test_client, api_v1_prefix)
            response = test_client.get(
                f"{api_v1_prefix}/auth/google/callback",
                params={"code": "auth-code", "state": state},
                follow_redirects=False,
            )
            token = _login_redirect_params(response)["token"]
            me = test_client.get(
                f"{api_v1_prefix}/users/me",
                headers={"Authorization": f"Bearer {token}"},
            )
            user_ids.append(me.json()["value"]["id"])

        assert user_ids[0] == user_ids[1]

    def test_state_mismatch(self, test_client: TestClient, api_v1_prefix: str):
        _start(test_client, api_v1_prefix)

        response = test_client.get(
            f"{api_v1_prefix}/auth/google/callback",
            params={"code": "auth-code", "state": "forged"},
            follow_redirects=False,
        )

        assert _login_redirect_params(response) == {"error": "true"}

    def test_provider_error_param(self, test_client: TestClient, api_v1_prefix: str):
        response = test_client.get(
            f"{api_v1_prefix}/auth/google/callback",
            params={"error": "access_denied"},
            follow_redirects=False,
        )

        assert _login_redirect_params(response) == {"error": "true"}

    def test_rejected_code(self, test_client: TestClient, api_v1_prefix: str):
        state = _start(test_client, api_v1_prefix)

        response = test_client.get(
            f"{api_v1_prefix}/auth/google/callback",
            params={"code": "bad-code", "state": state},
            follow_redirects=False,
        )

        assert _login_redirect_params(response) == {"error": "true"}

    def test_missing_email_claim(
        self,
        test_client: TestClient,
        google_claims: dict,
        api_v1_prefix: str,
    ):
        del google_claims["email"]
        state = _start(test_client, api_v1_prefix)

        response = test_client.get(
            f"{api_v1_prefix}/auth/google/callback",
            params={"code": "auth-code", "state": state},
            follow_redirects=False,
        )

        assert _login_redirect_params(response) == {"error": "no-user"}

    def test_links_existing_account(
        self,
        verified_user,
        test_client: TestClient,
        google_claims: dict,
        api_v1_prefix: str,
    ):
        google_claims["email"] = verified_user["email"]
        state = _start(test_client, api_v1_prefix)

        response = test_client.get(
            f"{api_v1_prefix}/auth/google/callback",
            params={"code": "auth-code", "state": state},
            follow_redirects=False,
        )

        token = _login_redirect_params(response)["token"]
        me = test_client.get(
            f"{api_v1_prefix}/users/me",
            headers={"Authorization": f"Bearer {token}"},
        )
        assert me.json()["value"]["id"] == verified_user["user_id"]

    def test_email_claim_with_apostrophe(
        self,
        test_client: TestClient,
        google_claims: dict,
        api_v1_prefix: str,
    ):
        google_claims["email"] = "o'brien@example.com"
        state = _start(test_client, api_v1_prefix)

        response = test_client.get(
            f"{api_v1_prefix}/auth/google/callback",
            params={"code": "auth-code", "state": state},
            follow_redirects=False,
        )

        token = _login_redirect_params(response)["token"]
        me = test_client.get(
            f"{api_v1_prefix}/users/me",
            headers={"Authorization": f"Bearer {token}"},
        )
        assert me.json()["value"]["email"] == "o'brien@example.com"

    def test_malformed_email_claim(
        self,
        test_client: TestClient,
        google_claims: dict,
        api_v1_prefix: str,
    ):
        google_claims["email"] = "not-an-address"
        state = _start(test_client, api_v1_prefix)

        response = test_client.get(
            f"{api_v1_prefix}/auth/google/callback",
            params={"code": "auth-code", "state": state},
            follow_redirects=False,
        )

        assert _login_redirect_params(response) == {"error": "no-user"}

    def test_sign_in_picks_up_renamed_profile(
        self,
        test_client: TestClient,
        google_claims: dict,
        api_v1_prefix: str,
    ):
        for given_name in ("Alice", "A" * 80):
            google_claims["given_name"] = given_name
            state = _start(test_client, api_v1_prefix)
            response = test_client.get(
                f"{api_v1_prefix}/auth/google/callback",
                params={"code": "auth-code", "state": state},
                follow_redirects=False,
            )
            token = _login_redirect_params(response)["token"]

        me = test_client.get(
            f"{api_v1_prefix}/users/me",
            headers={"Authorization": f"Bearer {token}"},
        )
        assert me.json()["value"]["first_name"] == "A" * 50
