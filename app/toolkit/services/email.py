"""
Email service for centralized email sending.

This module provides the EmailService class for sending emails with:
- Django template rendering for plain text and optional HTML
- Async sending via Celery (toolkit.tasks.send_email_task)

Related files:
    - tasks.py: Async email task
    - templates/emails/: Email templates

Configuration:
    Email settings are read from Django settings:
    - EMAIL_BACKEND
    - EMAIL_HOST, EMAIL_PORT
    - DEFAULT_FROM_EMAIL

Usage:
    from toolkit.services.email import EmailService

    # Send now
    EmailService.send(
        to="store@example.com",
        subject="Your payout is on its way",
        template_name="emails/payout_initiated",
        context={"store_name": "Ada Stores", "amount": "15000.00"},
    )

    # Send in background
    EmailService.send_async(
        to="store@example.com",
        subject="Your payout is on its way",
        template_name="emails/payout_initiated",
        context={"store_name": "Ada Stores", "amount": "15000.00"},
    )
"""

from __future__ import annotations

import logging

from django.conf import settings
from django.core.mail import EmailMultiAlternatives
from django.template import TemplateDoesNotExist
from django.template.loader import render_to_string

from toolkit.helpers import mask_email

logger = logging.getLogger(__name__)


class EmailService:
    """
    Centralized email sending with template support.

    Each template name resolves to "{template_name}.txt" (required) and
    "{template_name}.html" (optional alternative part).

    Usage:
        success = EmailService.send(
            to="store@example.com",
            subject="Application approved",
            template_name="emails/merchant_approved",
            context={"store_name": "Ada Stores"},
        )
    """

    @staticmethod
    def send(
        to: str | list[str],
        subject: str,
        template_name: str,
        context: dict,
        from_email: str | None = None,
        reply_to: str | None = None,
    ) -> bool:
        """
        Send email using a template.

        Args:
            to: Recipient email address(es)
            subject: Email subject line
            template_name: Name of template (without extension)
            context: Template context variables
            from_email: Sender email (defaults to DEFAULT_FROM_EMAIL)
            reply_to: Reply-to address

        Returns:
            True if email was sent successfully

        Raises:
            TemplateDoesNotExist: The plain text template is missing
            Exception: Whatever the mail backend raises; callers that must
                not fail wrap this (send_email_task retries it)
        """
        if isinstance(to, str):
            to = [to]

        text_content = render_to_string(f"{template_name}.txt", context)
        try:
            html_content = render_to_string(f"{template_name}.html", context)
        except TemplateDoesNotExist:
            html_content = None

        email = EmailMultiAlternatives(
            subject=subject,
            body=text_content,
            from_email=from_email or settings.DEFAULT_FROM_EMAIL,
            to=to,
            reply_to=[reply_to] if reply_to else None,
        )
        if html_content:
            email.attach_alternative(html_content, "text/html")

        sent = email.send(fail_silently=False)
        logger.info(
            f"Email sent: {subject}",
            extra={
                "recipients": [mask_email(address) for address in to],
                "template_name": template_name,
            },
        )
        return bool(sent)

    @staticmethod
    def send_async(
        to: str | list[str],
        subject: str,
        template_name: str,
        context: dict,
    ) -> None:
        """
        Queue email for async sending via Celery.

        Note:
            Context must be JSON-serializable for Celery. Pass amounts as
            strings, not Decimal.
        """
        from toolkit.tasks import send_email_task

        send_email_task.delay(
            to=to,
            subject=subject,
            template_name=template_name,
            context=context,
        )
        logger.debug(f"Email queued: {subject}", extra={"template_name": template_name})
