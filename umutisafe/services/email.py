"""Outgoing mail over SMTP."""

import logging
import smtplib
from email.message import EmailMessage
from email.utils import formataddr
from typing import Optional

from umutisafe.config import settings

logger = logging.getLogger(__name__)

SMTP_TIMEOUT_SECONDS = 15


class EmailNotConfigured(Exception):
    """SMTP_HOST, SMTP_PORT or SMTP_FROM is unset."""


def _build_message(to_email: str, subject: str, html_content: str, text_content: Optional[str]) -> EmailMessage:
    msg = EmailMessage()
    msg["From"] = formataddr((settings.SMTP_FROM_NAME, settings.SMTP_FROM))
    msg["To"] = to_email
    msg["Subject"] = subject
    # plain part first so clients without HTML still show something
    msg.set_content(text_content or subject)
    msg.add_alternative(html_content, subtype="html")
    return msg


def send_email(
    *,
    to_email: str,
    subject: str,
    html_content: str,
    text_content: Optional[str] = None,
) -> None:
    """Deliver one message; SMTP errors propagate to the caller."""
    if not (settings.SMTP_HOST and settings.SMTP_PORT and settings.SMTP_FROM):
        raise EmailNotConfigured("SMTP is not configured. Please set SMTP_HOST, SMTP_PORT, SMTP_FROM.")

    msg = _build_message(to_email, subject, html_content, text_content)
    with smtplib.SMTP(settings.SMTP_HOST, settings.SMTP_PORT, timeout=SMTP_TIMEOUT_SECONDS) as server:
        if settings.SMTP_USE_TLS:
            server.starttls()
        if settings.SMTP_USER and settings.SMTP_PASSWORD:
            server.login(settings.SMTP_USER, settings.SMTP_PASSWORD)
        server.send_message(msg)

    logger.info(f"[EMAIL] Sent '{subject}' to {to_email}")
