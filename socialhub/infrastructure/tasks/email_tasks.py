"""Celery tasks for outgoing email."""

import logging
from datetime import datetime, timezone
from typing import Dict

from socialhub.core.auth.services import redact_email
from socialhub.infrastructure.services.email_service import EmailService
from socialhub.infrastructure.tasks.celery_app import celery_app

logger = logging.getLogger(__name__)


@celery_app.task(bind=True, max_retries=3, default_retry_delay=60)
def send_password_reset_email(self, email: str, token: str) -> Dict:
    """
    Deliver a password reset ticket by email.

    Retried when SMTP delivery fails.

    Args:
        email: Recipient address
        token: Plaintext reset ticket

    Returns:
        Delivery status
    """
    sent = EmailService.from_settings().send_password_reset_email(email, token)
    if not sent:
        logger.warning("Password reset email to %s failed, retrying", redact_email(email))
        raise self.retry()

    return {
        "status": "SENT",
        "recipient": redact_email(email),
        "completed_at": datetime.now(timezone.utc).isoformat(),
    }


def enqueue_password_reset_email(email: str, token: str) -> None:
    """
    Queue reset ticket delivery.

    Runs after the HTTP response is sent, so a broker outage is logged
    rather than surfaced to the client.

    The ticket travels to the worker as a task argument; ``argsrepr``
    keeps it out of worker and monitoring logs.
    """
    try:
        send_password_reset_email.apply_async(
            args=(email, token),
            argsrepr=repr((redact_email(email), "***")),
        )
    except Exception:
        logger.exception("Could not queue password reset email for %s", redact_email(email))
