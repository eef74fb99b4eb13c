"""NotificationGateway - what the lifecycle needs from outbound messaging.

The gateway delivers a message embedding a single-use token to an address.
Implementations live in the infrastructure layer (SMTP, logging).
"""

from abc import ABC, abstractmethod
from enum import Enum


class NotificationKind(str, Enum):
    """Templates the lifecycle can ask to deliver."""

    VERIFICATION_EMAIL = "verification_email"
    PASSWORD_RESET = "password_reset"


class NotificationError(Exception):
    """Raised when a message could not be delivered."""


class NotificationGateway(ABC):
    """Port for delivering token-bearing messages."""

    @abstractmethod
    def send(self, address: str, kind: NotificationKind, token: str) -> None:
        """Deliver a message of the given kind to an address.

        Raises
        ------
        NotificationError
            If delivery failed
        """
