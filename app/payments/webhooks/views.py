"""
Webhook endpoint view for Paystack.

The view:
1. Verifies the x-paystack-signature header
2. Queues the verified body for relay to MERCHANT_API_WEBHOOK_URL, if set
3. Creates/retrieves the WebhookEvent record (idempotent on the body hash)
4. Queues transfer events for async processing
5. Acknowledges with 200

Paystack retries any non-200 answer, so everything past signature
verification is acknowledged, even an unparseable body or a failed queue.

Usage:
    # In urls.py
    from payments.webhooks.views import paystack_webhook

    urlpatterns = [
        path("webhooks/paystack/", paystack_webhook, name="paystack-webhook"),
    ]
"""

from __future__ import annotations

import hashlib
import json
import logging

from django.conf import settings
from django.http import HttpRequest, JsonResponse
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_POST

from payments.adapters import PaystackAdapter
from payments.models import WebhookEvent
from payments.services import TRANSFER_EVENTS

logger = logging.getLogger(__name__)

SIGNATURE_HEADER = "X-Paystack-Signature"


def _acknowledge() -> JsonResponse:
    return JsonResponse({"status": "success"}, status=200)


def _forward_to_merchant_api(payload: bytes, signature: str) -> None:
    """Queue the verified body for relay to the merchant API, if one is configured."""
    if not settings.MERCHANT_API_WEBHOOK_URL:
        return

    try:
        from payments.tasks import forward_webhook_task

        forward_webhook_task.delay(payload.decode("utf-8"), signature)
    except Exception as e:
        logger.error(f"Failed to queue webhook forward: {type(e).__name__}", exc_info=True)


@csrf_exempt
@require_POST
def paystack_webhook(request: HttpRequest) -> JsonResponse:
    """
    Receive Paystack webhook events.

    Returns:
        JsonResponse with status:
        - 200: Event accepted (new, duplicate, ignored, unparseable or failed
          to queue)
        - 400: Invalid signature
    """
    payload = request.body
    signature = request.headers.get(SIGNATURE_HEADER, "")

    if not PaystackAdapter.verify_webhook_signature(payload, signature):
        logger.warning("Webhook signature verification failed")
        return JsonResponse({"error": "Invalid signature"}, status=400)

    try:
        event_data = json.loads(payload)
    except ValueError:
        logger.error("Webhook body is not valid JSON", exc_info=True)
        return _acknowledge()

    if not isinstance(event_data, dict):
        logger.error(
            "Webhook body is not a JSON object",
            extra={"body_type": type(event_data).__name__},
        )
        return _acknowledge()

    _forward_to_merchant_api(payload, signature)

    event_type = event_data.get("event") or ""
    idempotency_key = hashlib.sha256(payload).hexdigest()

    logger.info(
        f"Received Paystack webhook: {event_type}",
        extra={"event_type": event_type, "idempotency_key": idempotency_key},
    )

    webhook_event, created = WebhookEvent.objects.get_or_create(
        idempotency_key=idempotency_key,
        defaults={"event_type": event_type, "payload": event_data},
    )

    if not created and webhook_event.is_processed:
        logger.info(
            "Webhook already processed, returning success",
            extra={"webhook_event_id": str(webhook_event.id)},
        )
        return _acknowledge()

    if event_type in TRANSFER_EVENTS:
        try:
            from payments.tasks import process_webhook_event

            process_webhook_event.delay(str(webhook_event.id))
            logger.info(
                "Webhook queued for processing",
                extra={"webhook_event_id": str(webhook_event.id)},
            )
        except Exception as e:
            logger.error(
                f"Failed to queue webhook: {type(e).__name__}",
                extra={"webhook_event_id": str(webhook_event.id)},
                exc_info=True,
            )
    elif event_type == "charge.success":
        data = webhook_event.data
        logger.info(
            "Charge succeeded",
            extra={"reference": data.get("reference"), "amount_minor": data.get("amount")},
        )
    else:
        logger.info(f"Ignoring webhook event type: {event_type}")

    return _acknowledge()
