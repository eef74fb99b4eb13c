"""Tests for the SMTP notification gateway."""

import smtplib
from unittest.mock import MagicMock, patch

import pytest

from warden_config.settings import Settings
from warden_identity import NotificationError, NotificationKind
from warden_identity.infrastructure.email import (
    LoggingNotificationGateway,
    SmtpNotificationGateway,
    build_link,
)

RAW_TOKEN = "raw-token-abc123"


def _settings(**overrides) -> Settings:
    values = {
        "jwt_secret_key": "test-secret",
        "postgres_password": "test-password",
        "smtp_enabled": True,
        "smtp_host": "smtp.example.com",
        "smtp_port": 587,
        "smtp_user": "mailer",
        "smtp_password": "mailer-password",
        "smtp_from_email": "noreply@example.com",
        "frontend_base_url": "https://app.example.com/",
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


def _sent_message(server: MagicMock):
    server.send_message.assert_called_once()
    return server.send_message.call_args.args[0]


def _text_part(message) -> str:
    return message.get_payload()[0].get_payload(decode=True).decode()


class TestBuildLink:
    def test_verification_link(self):
        link = build_link(_settings(), NotificationKind.VERIFICATION_EMAIL, RAW_TOKEN)

        assert link == f"https://app.example.com/verify-email/{RAW_TOKEN}"

    def test_reset_link(self):
        link = build_link(_settings(), NotificationKind.PASSWORD_RESET, RAW_TOKEN)

        assert link == f"https://app.example.com/reset-password/{RAW_TOKEN}"


class TestSmtpNotificationGateway:
    @patch("warden_identity.infrastructure.email.email_service.smtplib.SMTP")
    def test_sends_verification_with_starttls(self, mock_smtp):
        server = mock_smtp.return_value.__enter__.return_value
        gateway = SmtpNotificationGateway(_settings())

        gateway.send("user@example.com", NotificationKind.VERIFICATION_EMAIL, RAW_TOKEN)

        mock_smtp.assert_called_once_with("smtp.example.com", 587)
        server.starttls.assert_called_once()
        server.login.assert_called_once_with("mailer", "mailer-password")
        message = _sent_message(server)
        assert message["To"] == "user@example.com"
        assert message["From"] == "Warden <noreply@example.com>"
        assert message["Subject"] == "Verify your email - Warden"
        assert f"/verify-email/{RAW_TOKEN}" in _text_part(message)

    @patch("warden_identity.infrastructure.email.email_service.smtplib.SMTP")
    def test_reset_mentions_validity(self, mock_smtp):
        server = mock_smtp.return_value.__enter__.return_value
        gateway = SmtpNotificationGateway(_settings(reset_token_expire_minutes=30))

        gateway.send("user@example.com", NotificationKind.PASSWORD_RESET, RAW_TOKEN)

        message = _sent_message(server)
        assert message["Subject"] == "Password Reset Request - Warden"
        body = _text_part(message)
        assert "valid for 30 minutes" in body
        assert f"/reset-password/{RAW_TOKEN}" in body

    @patch("warden_identity.infrastructure.email.email_service.smtplib.SMTP_SSL")
    def test_implicit_tls(self, mock_smtp_ssl):
        server = mock_smtp_ssl.return_value.__enter__.return_value
        gateway = SmtpNotificationGateway(_settings(smtp_port=465, smtp_starttls=False))

        gateway.send("user@example.com", NotificationKind.PASSWORD_RESET, RAW_TOKEN)

        assert mock_smtp_ssl.call_args.args == ("smtp.example.com", 465)
        server.starttls.assert_not_called()
        server.send_message.assert_called_once()

    @patch("warden_identity.infrastructure.email.email_service.smtplib.SMTP")
    def test_no_login_without_user(self, mock_smtp):
        server = mock_smtp.return_value.__enter__.return_value
        gateway = SmtpNotificationGateway(_settings(smtp_user="", smtp_password=None))

        gateway.send("user@example.com", NotificationKind.VERIFICATION_EMAIL, RAW_TOKEN)

        server.login.assert_not_called()
        server.send_message.assert_called_once()

    def test_missing_host_raises(self):
        gateway = SmtpNotificationGateway(_settings(smtp_host=""))

        with pytest.raises(NotificationError, match="SMTP host not configured"):
            gateway.send("user@example.com", NotificationKind.PASSWORD_RESET, RAW_TOKEN)

    @patch("warden_identity.infrastructure.email.email_service.smtplib.SMTP")
    def test_smtp_error_becomes_notification_error(self, mock_smtp):
        server = mock_smtp.return_value.__enter__.return_value
        server.send_message.side_effect = smtplib.SMTPRecipientsRefused({})
        gateway = SmtpNotificationGateway(_settings())

        with pytest.raises(NotificationError):
            gateway.send("user@example.com", NotificationKind.PASSWORD_RESET, RAW_TOKEN)

    @patch("warden_identity.infrastructure.email.email_service.smtplib.SMTP")
    def test_connection_error_becomes_notification_error(self, mock_smtp):
        mock_smtp.side_effect = ConnectionRefusedError("connection refused")
        gateway = SmtpNotificationGateway(_settings())

        with pytest.raises(NotificationError, match="connection refused"):
            gateway.send("user@example.com", NotificationKind.VERIFICATION_EMAIL, RAW_TOKEN)


class TestLoggingNotificationGateway:
    def test_logs_without_token(self, caplog):
        gateway = LoggingNotificationGateway()

        gateway.send("user@example.com", NotificationKind.PASSWORD_RESET, RAW_TOKEN)

        assert "user@example.com" in caplog.text
        assert RAW_TOKEN not in caplog.text
