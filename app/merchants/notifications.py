"""
Merchant-facing emails.

Each helper schedules a template email to go out after the current
transaction commits. Failures are logged by toolkit.side_effects and never
reach the review operation that triggered them.
"""

from __future__ import annotations

from django.conf import settings

from toolkit.services import EmailService
from toolkit.side_effects import run_on_commit


def _queue(to: str, subject: str, template_name: str, context: dict) -> None:
    run_on_commit(
        EmailService.send_async,
        to=to,
        subject=subject,
        template_name=template_name,
        context=context,
        description=f"email {template_name}",
    )


def notify_application_approved(merchant) -> None:
    _queue(
        merchant.work_email,
        "Your merchant application has been approved",
        "emails/merchant_approved",
        {
            "store_name": merchant.store_name,
            "login_url": settings.MERCHANT_LOGIN_URL,
            "commission_rate": str(merchant.commission_rate),
        },
    )


def notify_application_rejected(application, reason: str) -> None:
    _queue(
        application.work_email,
        "Update on your merchant application",
        "emails/merchant_rejected",
        {"store_name": application.store_name, "reason": reason},
    )


def notify_more_info_requested(application, message: str) -> None:
    _queue(
        application.work_email,
        "More information needed for your merchant application",
        "emails/merchant_more_info",
        {"store_name": application.store_name, "message": message},
    )


def notify_merchant_suspended(merchant, reason: str) -> None:
    _queue(
        merchant.work_email,
        "Your merchant account has been suspended",
        "emails/merchant_suspended",
        {"store_name": merchant.store_name, "reason": reason},
    )
