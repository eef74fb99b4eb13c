"""Opaque single-use tokens for email verification and password reset."""

import hashlib
import secrets


class OpaqueTokenService:
    """Generates random tokens and the digests stored in their place.

    Raw tokens only travel in notification links; the store keeps
    ``hash_token(raw)`` wherever a leaked value must not be usable.
    """

    TOKEN_BYTES = 32

    def __init__(self, token_bytes: int = TOKEN_BYTES):
        if token_bytes < 20:
            msg = "Opaque tokens need at least 20 bytes of entropy"
            raise ValueError(msg)
        self._token_bytes = token_bytes

    def generate(self) -> str:
        """Return a URL-safe random token."""
        return secrets.token_urlsafe(self._token_bytes)

    def hash_token(self, token: str) -> str:
        """Return the hex SHA-256 digest of a token (deterministic)."""
        return hashlib.sha256(token.encode("utf-8")).hexdigest()
