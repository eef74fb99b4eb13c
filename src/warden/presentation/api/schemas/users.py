"""Profile schemas for the current user."""

from pydantic import BaseModel, Field, model_validator

from warden.presentation.api.schemas.auth import PersonName


class UpdateProfileRequest(BaseModel):
    """Request schema for updating the current user's profile.

    Changing the password needs both ``current_password`` and
    ``new_password``; empty strings count as absent.
    """

    first_name: PersonName
    last_name: PersonName
    current_password: str | None = Field(default=None, max_length=128)
    new_password: str | None = Field(default=None, max_length=128)

    @model_validator(mode="after")
    def _both_passwords_or_neither(self) -> "UpdateProfileRequest":
        if bool(self.current_password) != bool(self.new_password):
            msg = "Both current password and new password must be provided to change password"
            raise ValueError(msg)
        if self.new_password and len(self.new_password) < 8:
            msg = "New password must be at least 8 characters"
            raise ValueError(msg)
        return self
