"""
Webhook event handlers for Paystack events.

This module provides a handler registry and the handlers for the Paystack
events this service acts on.

The handler registry allows:
- Clean separation between event routing and handling
- Easy extension for new event types

Usage:
    from payments.webhooks.handlers import dispatch_webhook, register_handler

    @register_handler("charge.dispute.create")
    def handle_dispute(webhook_event: WebhookEvent) -> ServiceResult:
        ...

    result = dispatch_webhook(webhook_event)
"""

from __future__ import annotations

import logging
from typing import Callable

from core.services import ServiceResult
from payments.models import WebhookEvent
from payments.services import PayoutReconciliationService
from payments.services.reconciliation import (
    TRANSFER_FAILED,
    TRANSFER_REVERSED,
    TRANSFER_SUCCESS,
)

logger = logging.getLogger(__name__)


# =============================================================================
# Handler Registry
# =============================================================================


# Maps event type strings to handler functions
WEBHOOK_HANDLERS: dict[str, Callable[[WebhookEvent], ServiceResult]] = {}


def register_handler(*event_types: str) -> Callable:
    """
    Decorator to register a webhook event handler for one or more event types.

    Usage:
        @register_handler("transfer.failed", "transfer.reversed")
        def handle_transfer_failed(webhook_event: WebhookEvent) -> ServiceResult:
            ...
    """

    def decorator(func: Callable[[WebhookEvent], ServiceResult]) -> Callable:
        for event_type in event_types:
            WEBHOOK_HANDLERS[event_type] = func
            logger.debug(f"Registered webhook handler for {event_type}")
        return func

    return decorator


def dispatch_webhook(webhook_event: WebhookEvent) -> ServiceResult:
    """
    Dispatch a webhook event to the appropriate handler.

    Events without a handler are logged and treated as handled, so they are
    not retried.
    """
    handler = WEBHOOK_HANDLERS.get(webhook_event.event_type)

    if not handler:
        logger.info(
            f"No handler registered for event type: {webhook_event.event_type}",
            extra={"webhook_event_id": str(webhook_event.id)},
        )
        return ServiceResult.success(None)

    logger.info(
        f"Dispatching {webhook_event.event_type} to handler",
        extra={"webhook_event_id": str(webhook_event.id)},
    )

    return handler(webhook_event)


# =============================================================================
# Transfer Handlers
# =============================================================================


@register_handler(TRANSFER_SUCCESS, TRANSFER_FAILED, TRANSFER_REVERSED)
def handle_transfer_event(webhook_event: WebhookEvent) -> ServiceResult:
    """
    Settle the payout a transfer event refers to.

    Args:
        webhook_event: The WebhookEvent containing the event data

    Returns:
        ServiceResult from PayoutReconciliationService
    """
    data = webhook_event.data

    logger.info(
        f"Processing {webhook_event.event_type}",
        extra={
            "webhook_event_id": str(webhook_event.id),
            "transfer_code": data.get("transfer_code"),
            "reference": data.get("reference"),
        },
    )

    return PayoutReconciliationService.handle_transfer_webhook(
        {"event": webhook_event.event_type, "data": data}
    )
