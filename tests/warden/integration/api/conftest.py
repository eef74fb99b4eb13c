"""Pytest fixtures for API integration tests.

Each test gets a fresh application on its own in-memory SQLite database.
Outbound email is captured by a recording gateway and Google is replaced
by an ``httpx.MockTransport``.
"""

import httpx
import pytest
from fastapi.testclient import TestClient
from pydantic import SecretStr

from warden.presentation.api.app import API_V1_PREFIX, create_app
from warden.presentation.api.dependencies import (
    get_google_client,
    get_notification_gateway,
)
from warden_config.settings import Settings
from warden_identity import NotificationKind
from warden_identity.infrastructure.oauth import GoogleOAuthClient
from tests.shared.fixtures.factories import RecordingNotificationGateway

TEST_PASSWORD = "SecurePassword123!"

GOOGLE_CLAIMS = {
    "sub": "109876543210",
    "email": "alice@example.com",
    "given_name": "Alice",
    "family_name": "Liddell",
    "picture": "https://example.com/alice.png",
}


@pytest.fixture
def api_v1_prefix() -> str:
    """Get the API v1 prefix for building URLs."""
    return API_V1_PREFIX


@pytest.fixture
def api_settings() -> Settings:
    """Test API settings on in-memory SQLite."""
    return Settings(
        _env_file=None,
        # Required security settings
        jwt_secret_key=SecretStr("test-jwt-secret-for-testing-only"),
        postgres_password=SecretStr("test-password"),
        database_url_override="sqlite+aiosqlite://",
        # API settings
        api_host="127.0.0.1",
        api_port=8000,
        api_debug=True,
        api_cors_origins="http://localhost:3000",
        api_cookie_secure=False,  # Allow HTTP in tests
        password_hash_rounds=4,
        frontend_base_url="http://localhost:3000",
        google_oauth_enabled=True,
        google_client_id="test-client-id",
        google_client_secret=SecretStr("test-client-secret"),
        google_callback_url="http://testserver/api/v1/auth/google/callback",
    )


@pytest.fixture
def notifications() -> RecordingNotificationGateway:
    return RecordingNotificationGateway()


@pytest.fixture
def google_claims() -> dict:
    """Userinfo claims the fake Google returns; tests may mutate them."""
    return dict(GOOGLE_CLAIMS)


@pytest.fixture
def google_client(api_settings, google_claims) -> GoogleOAuthClient:
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path == "/token":
            form = request.content.decode()
            if "code=bad-code" in form:
                return httpx.Response(400, json={"error": "invalid_grant"})
            return httpx.Response(200, json={"access_token": "google-access"})
        return httpx.Response(200, json=google_claims)

    return GoogleOAuthClient(
        client_id=api_settings.google_client_id,
        client_secret=api_settings.google_client_secret.get_secret_value(),
        callback_url=api_settings.google_callback_url,
        transport=httpx.MockTransport(handler),
    )


@pytest.fixture
def app(api_settings, notifications, google_client):
    app = create_app(settings=api_settings)
    app.dependency_overrides[get_notification_gateway] = lambda: notifications
    app.dependency_overrides[get_google_client] = lambda: google_client
    return app


@pytest.fixture
def test_client(app):
    """Test client; entering it runs the lifespan, which creates the schema."""
    with TestClient(app) as client:
        yield client


@pytest.fixture
def registered_user_data() -> dict:
    return {
        "email": "api-test-user@example.com",
        "password": TEST_PASSWORD,
        "first_name": "Api",
        "last_name": "Tester",
    }


@pytest.fixture
def verified_user(test_client, registered_user_data, notifications, api_v1_prefix) -> dict:
    """Register and verify a user; returns credentials and auth headers."""
    response = test_client.post(
        f"{api_v1_prefix}/auth/register",
        json=registered_user_data,
    )
    assert response.status_code == 201, (
        f"Registration failed: {response.status_code} - {response.text}"
    )

    token = notifications.last_token(NotificationKind.VERIFICATION_EMAIL)
    response = test_client.get(f"{api_v1_prefix}/auth/verify-email/{token}")
    assert response.status_code == 200, response.text

    value = response.json()["value"]
    return {
        "headers": {"Authorization": f"Bearer {value['access_token']}"},
        "email": registered_user_data["email"],
        "password": registered_user_data["password"],
        "user_id": value["user"]["id"],
    }
