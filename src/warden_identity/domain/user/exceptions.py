"""User domain exceptions.

Raised by the user aggregate and by credential store implementations.
The application layer translates them into identity errors; they never
reach the presentation layer directly.
"""


class InvalidEmailError(ValueError):
    """Raised when email format is invalid."""

    def __init__(self, message: str) -> None:
        super().__init__(message)


class DuplicateKeyError(Exception):
    """A unique identity key (email or OAuth subject) is already taken."""

    def __init__(self, field: str) -> None:
        self.field = field
        super().__init__(f"Duplicate value for unique key: {field}")


class StaleRecordError(Exception):
    """The record changed since it was read (optimistic concurrency)."""

    def __init__(self, user_id: object) -> None:
        self.user_id = user_id
        super().__init__(f"User record was modified concurrently: {user_id}")


class StoreError(Exception):
    """Unexpected persistence failure."""
