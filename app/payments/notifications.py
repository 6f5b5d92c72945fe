"""
Payout emails to merchants.

Each helper schedules its email for after the current transaction commits.
Context values are strings so the Celery task payload stays JSON.
"""

from __future__ import annotations

from toolkit.services import EmailService
from toolkit.side_effects import run_on_commit


def _payout_context(payout, merchant) -> dict:
    return {
        "store_name": merchant.store_name,
        "currency": payout.currency,
        "amount": str(payout.amount),
        "reference": payout.reference,
    }


def _queue(merchant, subject: str, template_name: str, context: dict) -> None:
    run_on_commit(
        EmailService.send_async,
        to=merchant.work_email,
        subject=subject,
        template_name=template_name,
        context=context,
        description=f"email {template_name}",
    )


def notify_payout_initiated(payout, merchant) -> None:
    _queue(
        merchant,
        "Your payout is on its way",
        "emails/payout_initiated",
        _payout_context(payout, merchant),
    )


def notify_payout_completed(payout, merchant) -> None:
    _queue(
        merchant,
        "Your payout has been completed",
        "emails/payout_completed",
        _payout_context(payout, merchant),
    )


def notify_payout_failed(payout, merchant) -> None:
    context = _payout_context(payout, merchant)
    context["reason"] = payout.failure_reason or "The transfer could not be completed"
    _queue(merchant, "Your payout could not be completed", "emails/payout_failed", context)
