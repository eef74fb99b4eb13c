"""Identity asserted by an external OAuth provider."""

from dataclasses import dataclass

DEFAULT_NAME = "Unknown"

# Width of the first_name / last_name columns
NAME_MAX_LENGTH = 50


def _name(value: str | None) -> str:
    return (value or "").strip()[:NAME_MAX_LENGTH] or DEFAULT_NAME


@dataclass(frozen=True)
class OAuthProfile:
    """Claims received from the identity provider after a successful login.

    Attributes
    ----------
    subject_id
        The provider's stable user identifier (``sub`` claim)
    email
        Email claim, or None when the provider withheld it
    first_name
        Given name (falls back to "Unknown")
    last_name
        Family name (falls back to "Unknown")
    picture
        Optional avatar URL
    """

    subject_id: str
    email: str | None
    first_name: str = DEFAULT_NAME
    last_name: str = DEFAULT_NAME
    picture: str | None = None

    @classmethod
    def from_claims(cls, claims: dict) -> "OAuthProfile":
        """Build a profile from OpenID Connect userinfo claims."""
        return cls(
            subject_id=str(claims["sub"]),
            email=claims.get("email") or None,
            first_name=_name(claims.get("given_name")),
            last_name=_name(claims.get("family_name")),
            picture=claims.get("picture") or None,
        )
