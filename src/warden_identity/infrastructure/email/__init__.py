"""Email delivery for verification and password reset messages."""

from warden_identity.infrastructure.email.email_service import (
    LoggingNotificationGateway,
    SmtpNotificationGateway,
    build_link,
)

__all__ = [
    "LoggingNotificationGateway",
    "SmtpNotificationGateway",
    "build_link",
]
