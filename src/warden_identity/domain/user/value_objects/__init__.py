"""User value objects."""

from warden_identity.domain.user.value_objects.email import Email
from warden_identity.domain.user.value_objects.oauth_profile import OAuthProfile

__all__ = ["Email", "OAuthProfile"]
