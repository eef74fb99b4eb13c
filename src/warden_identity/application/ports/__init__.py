"""Ports the identity application layer depends on."""

from warden_identity.application.ports.notification_gateway import (
    NotificationError,
    NotificationGateway,
    NotificationKind,
)

__all__ = ["NotificationError", "NotificationGateway", "NotificationKind"]
