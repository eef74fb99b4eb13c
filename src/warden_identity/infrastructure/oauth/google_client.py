"""Google OAuth 2.0 / OpenID Connect client."""

from __future__ import annotations

import logging
from urllib.parse import urlencode

import httpx

from warden_identity.domain.user import OAuthProfile

logger = logging.getLogger(__name__)

AUTHORIZATION_ENDPOINT = "https://accounts.google.com/o/oauth2/v2/auth"
TOKEN_ENDPOINT = "https://oauth2.googleapis.com/token"  # noqa: S105
USERINFO_ENDPOINT = "https://openidconnect.googleapis.com/v1/userinfo"

SCOPES = ("openid", "email", "profile")


class OAuthProviderError(Exception):
    """Raised when the provider exchange fails (transport or protocol)."""


class GoogleOAuthClient:
    """Authorization-code flow against Google.

    Builds the consent URL, exchanges the returned code for an access token
    and reads the OpenID userinfo claims into an ``OAuthProfile``.
    """

    def __init__(
        self,
        client_id: str,
        client_secret: str,
        callback_url: str,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self._client_id = client_id
        self._client_secret = client_secret
        self._callback_url = callback_url
        self._timeout = timeout
        self._transport = transport

    def authorization_url(self, state: str) -> str:
        params = {
            "client_id": self._client_id,
            "redirect_uri": self._callback_url,
            "response_type": "code",
            "scope": " ".join(SCOPES),
            "state": state,
            "prompt": "select_account",
        }
        return f"{AUTHORIZATION_ENDPOINT}?{urlencode(params)}"

    async def fetch_profile(self, code: str) -> OAuthProfile:
        """Exchange an authorization code and return the user's profile.

        Raises
        ------
        OAuthProviderError
            If the exchange or the userinfo request fails
        """
        async with httpx.AsyncClient(
            timeout=self._timeout,
            transport=self._transport,
        ) as client:
            access_token = await self._exchange_code(client, code)
            claims = await self._fetch_userinfo(client, access_token)

        try:
            return OAuthProfile.from_claims(claims)
        except KeyError as e:
            msg = "Userinfo response has no subject"
            raise OAuthProviderError(msg) from e

    async def _exchange_code(self, client: httpx.AsyncClient, code: str) -> str:
        try:
            response = await client.post(
                TOKEN_ENDPOINT,
                data={
                    "code": code,
                    "client_id": self._client_id,
                    "client_secret": self._client_secret,
                    "redirect_uri": self._callback_url,
                    "grant_type": "authorization_code",
                },
            )
            response.raise_for_status()
            return response.json()["access_token"]
        except httpx.HTTPStatusError as e:
            logger.warning(
                "Google token exchange returned %d",
                e.response.status_code,
            )
            raise OAuthProviderError("Token exchange rejected") from e
        except httpx.HTTPError as e:
            logger.warning("Google token exchange failed: %s", e)
            raise OAuthProviderError("Token exchange failed") from e
        except (KeyError, ValueError) as e:
            raise OAuthProviderError("Malformed token response") from e

    async def _fetch_userinfo(
        self,
        client: httpx.AsyncClient,
        access_token: str,
    ) -> dict:
        try:
            response = await client.get(
                USERINFO_ENDPOINT,
                headers={"Authorization": f"Bearer {access_token}"},
            )
            response.raise_for_status()
            return response.json()
        except httpx.HTTPStatusError as e:
            logger.warning("Google userinfo returned %d", e.response.status_code)
            raise OAuthProviderError("Userinfo request rejected") from e
        except httpx.HTTPError as e:
            logger.warning("Google userinfo request failed: %s", e)
            raise OAuthProviderError("Userinfo request failed") from e
        except ValueError as e:
            raise OAuthProviderError("Malformed userinfo response") from e
