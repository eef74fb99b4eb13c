import logging
import smtplib
import ssl
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText

from warden_config.settings import Settings
from warden_identity.application.ports import (
    NotificationError,
    NotificationGateway,
    NotificationKind,
)

logger = logging.getLogger(__name__)

VERIFICATION_SUBJECT = "Verify your email - Warden"

VERIFICATION_TEXT = """Hello,

Thanks for signing up for Warden.

Click the link below to verify your email address:
{link}

If you didn't create an account, you can safely ignore this email.

-- Warden
"""

PASSWORD_RESET_SUBJECT = "Password Reset Request - Warden"

PASSWORD_RESET_TEXT = """Hello,

You requested a password reset for your Warden account.

Click the link below to reset your password (valid for {valid_for}):
{link}

If you didn't request this, you can safely ignore this email.

-- Warden
"""

HTML_TEMPLATE = """
<!DOCTYPE html>
<html>
<head>
    <meta charset="utf-8">
</head>
<body style="font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', Roboto, sans-serif; background-color: #f9fafb; margin: 0; padding: 20px;">
    <div style="max-width: 600px; margin: 0 auto; background-color: #ffffff; border-radius: 8px; padding: 40px; box-shadow: 0 1px 3px rgba(0,0,0,0.1);">
        <h2 style="color: #111827; margin-top: 0;">{heading}</h2>
        <p style="color: #374151; line-height: 1.6;">{intro}</p>
        <p style="margin: 30px 0; text-align: center;">
            <a href="{link}" style="display: inline-block; padding: 14px 28px; background-color: #2563eb; color: #ffffff !important; text-decoration: none; border-radius: 6px; font-weight: 600; font-size: 16px;">{button}</a>
        </p>
        <p style="color: #6b7280; font-size: 14px;">Or copy and paste this link into your browser:</p>
        <p style="word-break: break-all; color: #2563eb; font-size: 14px;">{link}</p>
        <div style="margin-top: 40px; padding-top: 20px; border-top: 1px solid #e5e7eb;">
            <p style="color: #9ca3af; font-size: 13px; margin: 0;">{footer}</p>
            <p style="color: #9ca3af; font-size: 13px; margin-top: 8px;">Warden</p>
        </div>
    </div>
</body>
</html>
"""


def build_link(settings: Settings, kind: NotificationKind, token: str) -> str:
    """Frontend URL that consumes the token."""
    base = settings.frontend_base_url.rstrip("/")
    if kind is NotificationKind.VERIFICATION_EMAIL:
        return f"{base}/verify-email/{token}"
    return f"{base}/reset-password/{token}"


def _format_validity(minutes: int) -> str:
    if minutes % 60 == 0:
        hours = minutes // 60
        return "1 hour" if hours == 1 else f"{hours} hours"
    return f"{minutes} minutes"


class SmtpNotificationGateway(NotificationGateway):
    """Delivers verification and password reset emails over SMTP."""

    def __init__(self, settings: Settings):
        self._settings = settings

    def send(self, address: str, kind: NotificationKind, token: str) -> None:
        link = build_link(self._settings, kind, token)
        subject, text_body, html_body = self._render(kind, link)
        message = self._create_message(
            to_email=address,
            subject=subject,
            text_body=text_body,
            html_body=html_body,
        )
        self._send_email(address, message)

    def _render(self, kind: NotificationKind, link: str) -> tuple[str, str, str]:
        if kind is NotificationKind.VERIFICATION_EMAIL:
            html_body = HTML_TEMPLATE.format(
                heading="Verify your email",
                intro="Thanks for signing up. Confirm your email address to activate your account.",
                link=link,
                button="Verify Email",
                footer="If you didn't create an account, you can safely ignore this email.",
            )
            return VERIFICATION_SUBJECT, VERIFICATION_TEXT.format(link=link), html_body

        valid_for = _format_validity(self._settings.reset_token_expire_minutes)
        html_body = HTML_TEMPLATE.format(
            heading="Password Reset Request",
            intro=(
                "You requested a password reset for your Warden account. "
                f"This link is valid for {valid_for}."
            ),
            link=link,
            button="Reset Password",
            footer="If you didn't request this, you can safely ignore this email.",
        )
        text_body = PASSWORD_RESET_TEXT.format(link=link, valid_for=valid_for)
        return PASSWORD_RESET_SUBJECT, text_body, html_body

    def _create_message(
        self,
        to_email: str,
        subject: str,
        text_body: str,
        html_body: str | None = None,
    ) -> MIMEMultipart:
        msg = MIMEMultipart("alternative")
        msg["Subject"] = subject
        msg["From"] = f"{self._settings.smtp_from_name} <{self._settings.smtp_from_email}>"
        msg["To"] = to_email

        msg.attach(MIMEText(text_body, "plain"))
        if html_body:
            msg.attach(MIMEText(html_body, "html"))

        return msg

    def _send_email(self, to_email: str, message: MIMEMultipart) -> None:
        if not self._settings.smtp_host:
            logger.error("SMTP host not configured")
            msg = "SMTP host not configured"
            raise NotificationError(msg)

        smtp_password = (
            self._settings.smtp_password.get_secret_value()
            if self._settings.smtp_password
            else ""
        )

        try:
            if self._settings.smtp_use_tls and not self._settings.smtp_starttls:
                # Implicit TLS (port 465)
                context = ssl.create_default_context()
                with smtplib.SMTP_SSL(
                    self._settings.smtp_host,
                    self._settings.smtp_port,
                    context=context,
                ) as server:
                    if self._settings.smtp_user:
                        server.login(self._settings.smtp_user, smtp_password)
                    server.send_message(message)
            else:
                # STARTTLS (port 587) or plain
                with smtplib.SMTP(
                    self._settings.smtp_host,
                    self._settings.smtp_port,
                ) as server:
                    if self._settings.smtp_starttls:
                        context = ssl.create_default_context()
                        server.starttls(context=context)
                    if self._settings.smtp_user:
                        server.login(self._settings.smtp_user, smtp_password)
                    server.send_message(message)

            logger.info("Email sent to %s", to_email)

        except (smtplib.SMTPException, OSError) as e:
            logger.error("Failed to send email to %s: %s", to_email, e)
            raise NotificationError(str(e)) from e


class LoggingNotificationGateway(NotificationGateway):
    """Development gateway used while SMTP is disabled.

    Records that a message would have gone out. The token itself is never
    logged.
    """

    def send(self, address: str, kind: NotificationKind, token: str) -> None:
        logger.warning("SMTP disabled, %s not sent to %s", kind.value, address)
