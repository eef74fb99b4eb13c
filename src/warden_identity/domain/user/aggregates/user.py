"""User aggregate holding identity and credential state."""

from datetime import datetime
from typing import Union
from uuid import UUID, uuid4

from warden_identity.domain.shared.time import utc_now
from warden_identity.domain.user.value_objects.email import Email
from warden_identity.domain.user.value_objects.oauth_profile import (
    DEFAULT_NAME,
    OAuthProfile,
)


class User:
    """
    User aggregate root.

    Owns the authentication-relevant fields of an account: password hash,
    pending verification token, pending password reset (digest + expiry),
    OAuth linkage and the email-verified flag. Password hashes are always
    produced by the password hashing service at the call site and handed
    in already hashed.

    Invariants
    ----------
    - A user has a password hash, an OAuth subject id, or both.
    - Reset token digest and expiry are set together or not at all.
    - Once verified, an email never becomes unverified again.
    """

    def __init__(  # noqa: PLR0913
        self,
        email: Union[str, Email],
        first_name: str,
        last_name: str,
        password_hash: str | None = None,
        oauth_subject_id: str | None = None,
        profile_picture: str | None = None,
        is_email_verified: bool = False,
        verification_token: str | None = None,
        reset_token: str | None = None,
        reset_token_expiry: datetime | None = None,
        id: UUID | None = None,
        created_at: datetime | None = None,
        updated_at: datetime | None = None,
        version: int = 0,
    ):
        if not password_hash and not oauth_subject_id:
            msg = "User needs a password hash or an OAuth subject id"
            raise ValueError(msg)
        if (reset_token is None) != (reset_token_expiry is None):
            msg = "Reset token and expiry must be set together"
            raise ValueError(msg)

        self._email = email if isinstance(email, Email) else Email(email)
        self._first_name = first_name
        self._last_name = last_name
        self._password_hash = password_hash
        self._oauth_subject_id = oauth_subject_id
        self._profile_picture = profile_picture
        self._is_email_verified = is_email_verified
        self._verification_token = verification_token
        self._reset_token = reset_token
        self._reset_token_expiry = reset_token_expiry
        self._id = id or uuid4()
        self._created_at = created_at or utc_now()
        self._updated_at = updated_at or utc_now()
        self._version = version

    @property
    def id(self) -> UUID:
        return self._id

    @property
    def email(self) -> str:
        return self._email.value

    @property
    def first_name(self) -> str:
        return self._first_name

    @property
    def last_name(self) -> str:
        return self._last_name

    @property
    def password_hash(self) -> str | None:
        return self._password_hash

    @property
    def oauth_subject_id(self) -> str | None:
        return self._oauth_subject_id

    @property
    def profile_picture(self) -> str | None:
        return self._profile_picture

    @property
    def is_email_verified(self) -> bool:
        return self._is_email_verified

    @property
    def verification_token(self) -> str | None:
        return self._verification_token

    @property
    def reset_token(self) -> str | None:
        return self._reset_token

    @property
    def reset_token_expiry(self) -> datetime | None:
        return self._reset_token_expiry

    @property
    def created_at(self) -> datetime:
        return self._created_at

    @property
    def updated_at(self) -> datetime:
        return self._updated_at

    @property
    def version(self) -> int:
        return self._version

    def mark_email_verified(self) -> None:
        self._is_email_verified = True
        self._verification_token = None
        self._touch()

    def issue_verification_token(self, token: str) -> None:
        self._verification_token = token
        self._touch()

    def start_password_reset(self, token_hash: str, expires_at: datetime) -> None:
        """Record a reset request, replacing any earlier one."""
        self._reset_token = token_hash
        self._reset_token_expiry = expires_at
        self._touch()

    def clear_password_reset(self) -> None:
        self._reset_token = None
        self._reset_token_expiry = None
        self._touch()

    def change_password_hash(self, password_hash: str) -> None:
        """Store a freshly computed hash; any outstanding reset is void."""
        if not password_hash:
            msg = "Password hash cannot be empty"
            raise ValueError(msg)
        self._password_hash = password_hash
        self._reset_token = None
        self._reset_token_expiry = None
        self._touch()

    def link_oauth(self, profile: OAuthProfile) -> None:
        """Attach a provider identity; the provider vouches for the email."""
        self._oauth_subject_id = profile.subject_id
        if profile.picture:
            self._profile_picture = profile.picture
        self.mark_email_verified()

    def refresh_from_oauth(self, profile: OAuthProfile) -> bool:
        """Pick up changed names or avatar. Returns True if anything changed.

        Placeholder names from a provider that withheld them are ignored.
        """
        changed = False
        if profile.first_name != DEFAULT_NAME and profile.first_name != self._first_name:
            self._first_name = profile.first_name
            changed = True
        if profile.last_name != DEFAULT_NAME and profile.last_name != self._last_name:
            self._last_name = profile.last_name
            changed = True
        if profile.picture and profile.picture != self._profile_picture:
            self._profile_picture = profile.picture
            changed = True
        if changed:
            self._touch()
        return changed

    def update_profile(self, first_name: str, last_name: str) -> None:
        self._first_name = first_name
        self._last_name = last_name
        self._touch()

    def increment_version(self) -> None:
        """Called by the repository after a successful save."""
        self._version += 1

    def _touch(self) -> None:
        self._updated_at = utc_now()

    @classmethod
    def register(
        cls,
        email: Union[str, Email],
        password_hash: str,
        first_name: str,
        last_name: str,
        verification_token: str,
    ) -> "User":
        return cls(
            email=email,
            first_name=first_name,
            last_name=last_name,
            password_hash=password_hash,
            is_email_verified=False,
            verification_token=verification_token,
        )

    @classmethod
    def from_oauth(cls, profile: OAuthProfile) -> "User":
        if not profile.email:
            msg = "OAuth profile has no email"
            raise ValueError(msg)
        return cls(
            email=profile.email,
            first_name=profile.first_name,
            last_name=profile.last_name,
            oauth_subject_id=profile.subject_id,
            profile_picture=profile.picture,
            is_email_verified=True,
        )

    @classmethod
    def reconstitute(  # noqa: PLR0913
        cls,
        id: UUID,
        email: Union[str, Email],
        first_name: str,
        last_name: str,
        password_hash: str | None,
        oauth_subject_id: str | None,
        profile_picture: str | None,
        is_email_verified: bool,
        verification_token: str | None,
        reset_token: str | None,
        reset_token_expiry: datetime | None,
        created_at: datetime,
        updated_at: datetime,
        version: int,
    ) -> "User":
        return cls(
            id=id,
            email=email,
            first_name=first_name,
            last_name=last_name,
            password_hash=password_hash,
            oauth_subject_id=oauth_subject_id,
            profile_picture=profile_picture,
            is_email_verified=is_email_verified,
            verification_token=verification_token,
            reset_token=reset_token,
            reset_token_expiry=reset_token_expiry,
            created_at=created_at,
            updated_at=updated_at,
            version=version,
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, User):
            return NotImplemented
        return self._id == other._id

    def __hash__(self) -> int:
        return hash(self._id)

    def __repr__(self) -> str:
        return f"User(id={self._id}, email={self._email.value})"
