"""
Celery tasks for payouts and webhook processing.

This module provides async tasks for:
- Processing Paystack webhook events
- Relaying verified webhook bodies to the merchant API
- Aggregating eligible splits into payouts
- Processing a single payout

There is no beat schedule; aggregation is triggered from the admin API or by
an external scheduler calling aggregate_payouts_task.

Usage:
    from payments.tasks import process_webhook_event

    # Queue a webhook for async processing
    process_webhook_event.delay(str(webhook_event.id))

    # Aggregate and send every eligible payout
    aggregate_payouts_task.delay(process=True)
"""

from __future__ import annotations

import logging
from uuid import UUID

import requests
from celery import shared_task
from django.conf import settings

from core.exceptions import BaseApplicationError
from payments.models import WebhookEvent
from payments.services import PayoutAggregationService, PayoutProcessingService
from payments.state_machines import WebhookEventStatus

logger = logging.getLogger(__name__)


# =============================================================================
# Constants
# =============================================================================

MAX_WEBHOOK_RETRIES = 5


# =============================================================================
# Webhook Processing Tasks
# =============================================================================


@shared_task(
    bind=True,
    autoretry_for=(Exception,),
    retry_backoff=True,
    retry_backoff_max=300,
    retry_kwargs={"max_retries": MAX_WEBHOOK_RETRIES},
    acks_late=True,
)
def process_webhook_event(self, webhook_event_id: str) -> dict:
    """
    Apply one stored Paystack webhook event.

    Steps: load the event, skip it if already processed, mark it processing,
    hand it to the handler registered for its type, then record the outcome.

    A handler that returns a failed ServiceResult marks the event failed
    without a retry. Only unexpected exceptions are retried.

    Args:
        webhook_event_id: UUID of the WebhookEvent to process

    Returns:
        Dict with a "status" of processed, already_processed, not_found or
        handler_failed
    """
    from payments.webhooks.handlers import dispatch_webhook

    event_id = str(webhook_event_id)
    context = {"webhook_event_id": event_id}

    webhook_event = WebhookEvent.objects.filter(id=UUID(event_id)).first()
    if webhook_event is None:
        logger.error("WebhookEvent not found", extra=context)
        return {"status": "not_found", **context}

    if webhook_event.status == WebhookEventStatus.PROCESSED:
        logger.info("WebhookEvent already processed, skipping", extra=context)
        return {"status": "already_processed", **context}

    webhook_event.mark_processing()
    webhook_event.save()
    logger.info(
        f"Applying {webhook_event.event_type} (attempt {webhook_event.retry_count})",
        extra={**context, "event_type": webhook_event.event_type},
    )

    try:
        result = dispatch_webhook(webhook_event)
    except Exception as e:
        reason = f"{type(e).__name__}: {e}"
        webhook_event.mark_failed(reason)
        webhook_event.save()
        logger.exception("Webhook handler raised", extra={**context, "error": reason})
        raise

    if not result.success:
        reason = result.error or "Handler returned failure"
        webhook_event.mark_failed(reason)
        webhook_event.save()
        logger.warning(
            f"Webhook handler failed: {reason}",
            extra={**context, "error_code": result.error_code},
        )
        return {"status": "handler_failed", "error": reason, **context}

    webhook_event.mark_processed()
    webhook_event.save()
    logger.info("Webhook applied", extra=context)
    return {"status": "processed", **context}


@shared_task
def forward_webhook_task(body: str, signature: str = "") -> dict:
    """
    Relay a verified Paystack webhook body to the merchant API.

    The body is sent unchanged with its original signature, so the receiver
    can verify it with the same secret. A failed relay is logged and dropped.

    Returns:
        Dict with a "status" of forwarded, failed or skipped
    """
    url = settings.MERCHANT_API_WEBHOOK_URL
    if not url:
        return {"status": "skipped"}

    try:
        response = requests.post(
            url,
            data=body.encode("utf-8"),
            headers={"Content-Type": "application/json", "X-Paystack-Signature": signature},
            timeout=settings.MERCHANT_API_WEBHOOK_TIMEOUT_SECONDS,
        )
        response.raise_for_status()
    except requests.RequestException as e:
        logger.error(
            f"Webhook forward failed: {type(e).__name__}",
            extra={"url": url, "error": str(e)},
        )
        return {"status": "failed", "error": str(e)}

    logger.info("Webhook forwarded", extra={"url": url, "status_code": response.status_code})
    return {"status": "forwarded", "status_code": response.status_code}


# =============================================================================
# Payout Tasks
# =============================================================================


@shared_task
def process_payout_task(payout_id: str) -> dict:
    """
    Process one pending payout.

    Application errors (not found, wrong state, missing recipient, failed
    initiation) are final for this payout and reported in the result rather
    than retried; a failed payout is retried by the next aggregation.

    Returns:
        Dict with the payout status or the error code
    """
    try:
        result = PayoutProcessingService.process_payout(payout_id)
    except BaseApplicationError as e:
        logger.warning(
            f"Payout processing failed: {e.message}",
            extra={"payout_id": str(payout_id), "error_code": e.error_code},
        )
        return {"payout_id": str(payout_id), "status": "error", "error_code": e.error_code}

    return {"payout_id": str(payout_id), "status": result.payout.status}


@shared_task
def aggregate_payouts_task(process: bool = False) -> dict:
    """
    Aggregate eligible splits into payouts, optionally queuing each one.

    Args:
        process: Queue process_payout_task for every payout created

    Returns:
        Dict with the created payouts
    """
    created = PayoutAggregationService.aggregate_eligible_payouts()

    if process:
        for item in created:
            process_payout_task.delay(str(item.payout_id))

    logger.info(
        f"Aggregation task created {len(created)} payouts",
        extra={"payout_count": len(created), "queued": process},
    )
    return {"created": [item.to_dict() for item in created]}
