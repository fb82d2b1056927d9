"""Account lifecycle emails, sent outside the request that triggers them."""

import logging

from umutisafe.config import settings
from umutisafe.services.email import EmailNotConfigured, send_email
from umutisafe.services.email_templates import (
    build_account_approved_email,
    build_registration_pending_email,
)

logger = logging.getLogger(__name__)


class AccountNotificationService:
    """Fire-and-forget account emails.

    Meant to run as a FastAPI background task: delivery problems are logged
    and never reach the caller.
    """

    def _deliver(self, *, to_email: str, subject: str, html_body: str, text_body: str) -> bool:
        try:
            send_email(to_email=to_email, subject=subject, html_content=html_body, text_content=text_body)
            return True
        except EmailNotConfigured as exc:
            logger.warning(f"[EMAIL] Skipped '{subject}' to {to_email}: {exc}")
        except Exception as exc:
            logger.error(f"[EMAIL] Failed to send '{subject}' to {to_email}: {type(exc).__name__}: {exc}")
        return False

    def notify_registration_pending(self, *, name: str, email: str) -> bool:
        subject, html_body, text_body = build_registration_pending_email(name=name)
        return self._deliver(to_email=email, subject=subject, html_body=html_body, text_body=text_body)

    def notify_approved(self, *, name: str, email: str) -> bool:
        login_url = f"{settings.FRONTEND_BASE_URL.rstrip('/')}/login"
        subject, html_body, text_body = build_account_approved_email(name=name, email=email, login_url=login_url)
        return self._deliver(to_email=email, subject=subject, html_body=html_body, text_body=text_body)


account_notification_service = AccountNotificationService()
