"""Email value object.

Provides validated, normalized email addresses for user identification.
"""

from dataclasses import dataclass

from email_validator import EmailNotValidError, validate_email

from warden_identity.domain.user.exceptions import InvalidEmailError


@dataclass(frozen=True)
class Email:
    """Value object representing a validated email address.

    Syntax checking is delegated to ``email_validator`` (the same check
    the HTTP request schemas run through ``EmailStr``), so anything the API
    accepts is also a valid ``Email``. No DNS lookups are made. The stored
    value is lowercased.
    """

    value: str

    def __post_init__(self) -> None:
        if not self.value or not self.value.strip():
            msg = "Email cannot be empty"
            raise InvalidEmailError(msg)

        try:
            checked = validate_email(self.value.strip(), check_deliverability=False)
        except EmailNotValidError as e:
            msg = f"Invalid email format: {self.value}"
            raise InvalidEmailError(msg) from e

        object.__setattr__(self, "value", checked.normalized.lower())

    def __str__(self) -> str:
        return self.value

    def __repr__(self) -> str:
        return f"Email('{self.value}')"
