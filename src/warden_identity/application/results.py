"""Result types for lifecycle operations.

Every credential lifecycle operation returns either ``Success(value=...)``
or ``Failure(error=...)`` instead of raising, so callers handle each
outcome explicitly:

    result = await lifecycle.login(email, password)
    match result:
        case Success(value=session):
            ...
        case Failure(error=error):
            print(error.kind, error.message)
"""

from dataclasses import dataclass
from typing import Generic, TypeVar, Union

from warden_identity.exceptions import IdentityError

T = TypeVar("T")  # Success type
E = TypeVar("E", bound=IdentityError)  # Error type


@dataclass(frozen=True, slots=True, kw_only=True)
class Success(Generic[T]):
    """Represents a successful operation result."""

    value: T

    @property
    def ok(self) -> bool:
        return True


@dataclass(frozen=True, slots=True, kw_only=True)
class Failure(Generic[E]):
    """Represents a failed operation result."""

    error: E

    @property
    def ok(self) -> bool:
        return False


Result = Union[Success[T], Failure[E]]


def unwrap(result: "Result[T, E]") -> T:
    """Return the success value or raise the carried error."""
    if isinstance(result, Failure):
        raise result.error
    return result.value
