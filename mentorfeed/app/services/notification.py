# app/services/notification.py
import logging
from datetime import datetime, timezone
from email.message import EmailMessage
from pathlib import Path
from typing import Any, Mapping, Optional

import aiosmtplib
from jinja2 import Environment, FileSystemLoader, select_autoescape

from mentorfeed.app.core.config import settings

logger = logging.getLogger(__name__)

TEMPLATES_DIR = Path(__file__).resolve().parent.parent / "templates" / "emails"

SUBJECTS = {
    "assignment_invitation": "You're invited to {event_name} as {role_display}",
    "assignment_notification": "New Assignment: {event_name}",
    "feedback_notification": "New Feedback Received: {event_name}",
    "feedback_reminder": "Reminder: Submit Feedback for {event_name}",
}


def format_when(value: Optional[datetime]) -> str:
    if value is None:
        return ""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.strftime("%Y-%m-%d %H:%M %Z")


class NotificationService:
    """Renders notification templates and delivers them by email.

    When SMTP credentials are missing the message is logged instead of sent.
    """

    def __init__(self, templates_dir: Path = TEMPLATES_DIR):
        self.env = Environment(
            loader=FileSystemLoader(str(templates_dir)),
            autoescape=select_autoescape(["html", "jinja"]),
        )
        self.env.filters["when"] = format_when

    @property
    def is_configured(self) -> bool:
        return bool(settings.SMTP_USER and settings.SMTP_PASSWORD)

    def render(self, kind: str, params: Mapping[str, Any]) -> tuple[str, str]:
        if kind not in SUBJECTS:
            raise ValueError(f"Unknown notification kind: {kind!r}")
        context = {"app_name": settings.APP_NAME, **params}
        subject = SUBJECTS[kind].format(**{k: context.get(k, "") for k in ("event_name", "role_display")})
        body = self.env.get_template(f"{kind}.html.jinja").render(**context)
        return subject, body

    async def send(self, recipient: str, kind: str, params: Mapping[str, Any]) -> bool:
        """
        Send a notification to one recipient.

        :param recipient: Email address
        :param kind: Template kind, one of SUBJECTS
        :param params: Template parameters
        :return: True when handed to SMTP or, with SMTP unconfigured, logged in its place
        """
        subject, body = self.render(kind, params)

        if not self.is_configured:
            logger.info("[EMAIL] Would send to %s: %s", recipient, subject)
            return True

        message = EmailMessage()
        message["From"] = settings.SMTP_FROM or settings.SMTP_USER
        message["To"] = recipient
        message["Subject"] = subject
        message.set_content(subject)
        message.add_alternative(body, subtype="html")

        await aiosmtplib.send(
            message,
            hostname=settings.SMTP_HOST,
            port=settings.SMTP_PORT,
            username=settings.SMTP_USER,
            password=settings.SMTP_PASSWORD,
            start_tls=True,
            timeout=settings.SMTP_TIMEOUT,
        )
        logger.info("[EMAIL] Sent %s to %s", kind, recipient)
        return True


async def notify_safely(notifier: NotificationService, recipient: str, kind: str, params: Mapping[str, Any]) -> bool:
    """Deliver a notification without letting a delivery failure escape.

    Returns what `send` returned, or False with a logged warning when delivery raised.
    """
    try:
        return bool(await notifier.send(recipient, kind, params))
    except Exception as e:
        logger.warning("Notification %s to %s failed: %s", kind, recipient, e)
        return False


# module-level singleton, replaced in tests via dependency_overrides
notification_service = None


def get_notification_service() -> NotificationService:
    """Return the shared notification service."""
    global notification_service
    if notification_service is None:
        notification_service = NotificationService()
    return notification_service
