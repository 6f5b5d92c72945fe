"""
Celery tasks for toolkit side effects.

Usage:
    from toolkit.tasks import send_email_task

    send_email_task.delay(
        to="store@example.com",
        subject="Payout completed",
        template_name="emails/payout_completed",
        context={"store_name": "Ada Stores", "amount": "15000.00"},
    )
"""

from __future__ import annotations

import logging
from smtplib import SMTPException

from celery import shared_task

logger = logging.getLogger(__name__)

MAX_EMAIL_RETRIES = 3


@shared_task(
    bind=True,
    autoretry_for=(SMTPException, ConnectionError),
    retry_backoff=True,
    retry_backoff_max=300,
    retry_kwargs={"max_retries": MAX_EMAIL_RETRIES},
)
def send_email_task(self, to, subject: str, template_name: str, context: dict) -> bool:
    """
    Send a template email in the background.

    Transport errors (SMTP, connection) are retried with backoff. Anything
    else is logged and dropped: email is best-effort.
    """
    from toolkit.services.email import EmailService

    try:
        return EmailService.send(
            to=to,
            subject=subject,
            template_name=template_name,
            context=context,
        )
    except (SMTPException, ConnectionError):
        raise
    except Exception:
        logger.error(
            f"Email task failed permanently: {subject}",
            extra={"template_name": template_name, "retries": self.request.retries},
            exc_info=True,
        )
        return False
