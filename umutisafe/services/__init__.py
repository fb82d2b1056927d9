"""Service layer: email delivery and registry import helpers."""

from .account_notifications import AccountNotificationService, account_notification_service
from .email import EmailNotConfigured, send_email
from .medicine_import import parse_medicine_csv

__all__ = [
    "AccountNotificationService",
    "account_notification_service",
    "EmailNotConfigured",
    "send_email",
    "parse_medicine_csv",
]
