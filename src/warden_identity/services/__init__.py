"""Identity services - password hashing, session tokens, opaque tokens."""

from warden_identity.services.jwt_service import JWTService
from warden_identity.services.password_service import PasswordHashingService
from warden_identity.services.token_service import OpaqueTokenService

__all__ = [
    "JWTService",
    "OpaqueTokenService",
    "PasswordHashingService",
]
