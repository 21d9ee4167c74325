"""Outbound email notifications for credential setup and welcome messages."""

import logging
from enum import Enum

import requests

from tavrezsi.core.config import settings

logger = logging.getLogger(__name__)

MAILJET_SEND_URL = "https://api.mailjet.com/v3.1/send"


class NotificationKind(str, Enum):
    """Email templates the application sends."""

    PASSWORD_RESET = "password-reset"
    WELCOME = "welcome"
    TENANT_INVITE = "tenant-invite"


def build_setup_link(token: str) -> str:
    """Build the frontend link that lets a user set a password with ``token``."""
    return f"{settings.APP_BASE_URL.rstrip('/')}/reset-password?token={token}"


def render_message(
    kind: NotificationKind,
    recipient_name: str,
    link: str | None,
    property_name: str | None = None,
) -> tuple[str, str]:
    """Return the (subject, text body) pair for a notification."""
    app_name = settings.PROJECT_NAME
    hours = settings.PASSWORD_RESET_TOKEN_EXPIRE_HOURS

    if kind == NotificationKind.TENANT_INVITE:
        where = f" for {property_name}" if property_name else ""
        subject = f"You have been invited to {app_name}"
        body = (
            f"Dear {recipient_name},\n\n"
            f"You have been added as a tenant{where} in {app_name}.\n"
            f"Please set your password using the link below:\n{link}\n\n"
            f"The link is valid for {hours} hours.\n"
        )
    elif kind == NotificationKind.PASSWORD_RESET:
        subject = f"Set your {app_name} password"
        body = (
            f"Dear {recipient_name},\n\n"
            f"Use the link below to set a new password:\n{link}\n\n"
            f"The link is valid for {hours} hours. "
            "If you did not request this, you can ignore this email.\n"
        )
    else:
        subject = f"Welcome to {app_name}!"
        body = (
            f"Dear {recipient_name},\n\n"
            f"Your password has been set. You can now sign in to {app_name}.\n"
        )
    return subject, body


class Notifier:
    """Base class for notification backends."""

    def send(
        self,
        kind: NotificationKind,
        recipient_email: str,
        recipient_name: str,
        link: str | None = None,
        property_name: str | None = None,
    ) -> bool:
        """Deliver a notification. Returns False when delivery failed."""
        raise NotImplementedError


class ConsoleNotifier(Notifier):
    """Writes notifications to the log instead of sending them."""

    def send(
        self,
        kind: NotificationKind,
        recipient_email: str,
        recipient_name: str,
        link: str | None = None,
        property_name: str | None = None,
    ) -> bool:
        subject, body = render_message(kind, recipient_name, link, property_name)
        logger.info("Email to %s: %s\n%s", recipient_email, subject, body)
        return True


class MailjetNotifier(Notifier):
    """Sends notifications through the Mailjet v3.1 send API."""

    def __init__(self, api_key: str | None, api_secret: str | None):
        self.api_key = api_key
        self.api_secret = api_secret

    def send(
        self,
        kind: NotificationKind,
        recipient_email: str,
        recipient_name: str,
        link: str | None = None,
        property_name: str | None = None,
    ) -> bool:
        if not self.api_key or not self.api_secret:
            logger.warning("Mailjet credentials are not configured; %s email not sent", kind.value)
            return False

        subject, body = render_message(kind, recipient_name, link, property_name)
        message = {
            "From": {"Email": settings.MAIL_FROM_EMAIL, "Name": settings.MAIL_FROM_NAME},
            "To": [{"Email": recipient_email, "Name": recipient_name}],
            "Subject": subject,
            "TextPart": body,
        }
        try:
            response = requests.post(
                MAILJET_SEND_URL,
                auth=(self.api_key, self.api_secret),
                json={"Messages": [message]},
                timeout=settings.MAIL_TIMEOUT_SECONDS,
            )
        except requests.RequestException as exc:
            logger.warning("Failed to send %s email to %s: %s", kind.value, recipient_email, exc)
            return False

        if response.status_code not in (200, 201):
            logger.warning(
                "Mailjet rejected %s email to %s: %s %s",
                kind.value,
                recipient_email,
                response.status_code,
                response.text,
            )
            return False
        return True


def get_notifier() -> Notifier:
    """Dependency returning the configured notification backend."""
    if settings.MAIL_BACKEND == "mailjet":
        return MailjetNotifier(settings.MAILJET_API_KEY, settings.MAILJET_API_SECRET)
    return ConsoleNotifier()
