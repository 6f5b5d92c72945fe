"""
State enums for payment models.

This module defines the state enums used by payment models. Payout.status is
driven by django-fsm; the others are plain choice fields updated in bulk.

State Machines Overview:

Payout Statuses:
    pending → processing → completed
    pending → completed (transfer verified immediately)
    pending/processing → failed
    completed and failed are terminal; re-entering either is a no-op

Split Statuses:
    payout_requested → processing → paid
    processing → payout_requested (transfer failed or reversed)

Webhook Event Statuses:
    pending → processing → processed
    pending → processing → failed (can retry)
"""

from django.db import models


class PayoutStatus(models.TextChoices):
    """
    States for the Payout model lifecycle.

    Terminal states: COMPLETED, FAILED

    State Flow:
        PENDING → PROCESSING → COMPLETED (settled by webhook)
        PENDING → COMPLETED (verified right after initiation)
        PENDING → FAILED (initiation failed)
        PROCESSING → FAILED (transfer.failed / transfer.reversed)

    A failed payout is never retried in place. Its splits are released and
    the next aggregation run creates a new payout for them.
    """

    PENDING = "pending", "Pending"
    PROCESSING = "processing", "Processing"
    COMPLETED = "completed", "Completed"
    FAILED = "failed", "Failed"


class SplitStatus(models.TextChoices):
    """
    Payout states of an OrderMerchantSplit (one merchant's share of an order).

    State Flow:
        PAYOUT_REQUESTED → PROCESSING → PAID
        PROCESSING → PAYOUT_REQUESTED (transfer failed, split released)
    """

    PAYOUT_REQUESTED = "payout_requested", "Payout Requested"
    PROCESSING = "processing", "Processing"
    PAID = "paid", "Paid"


class WebhookEventStatus(models.TextChoices):
    """
    Processing status for WebhookEvent.

    Tracks the lifecycle of webhook event processing for idempotency.

    State Flow:
        PENDING → PROCESSING → PROCESSED
        PENDING → PROCESSING → FAILED (can retry)
    """

    PENDING = "pending", "Pending"
    PROCESSING = "processing", "Processing"
    PROCESSED = "processed", "Processed"
    FAILED = "failed", "Failed"


__all__ = [
    "PayoutStatus",
    "SplitStatus",
    "WebhookEventStatus",
]
