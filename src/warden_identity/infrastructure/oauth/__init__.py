"""OAuth identity provider clients."""

from warden_identity.infrastructure.oauth.google_client import (
    GoogleOAuthClient,
    OAuthProviderError,
)

__all__ = [
    "GoogleOAuthClient",
    "OAuthProviderError",
]
