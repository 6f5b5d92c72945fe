"""
WebhookEvent model for Paystack webhook event tracking.

Stores every webhook body received from Paystack for idempotent processing
and audit trails. Paystack events carry no event id, so the SHA-256 of the
raw body is the idempotency key: a redelivered body maps to the same row.

Usage:
    from payments.models import WebhookEvent
    from payments.state_machines import WebhookEventStatus

    event, created = WebhookEvent.objects.get_or_create(
        idempotency_key=hashlib.sha256(raw_body).hexdigest(),
        defaults={"event_type": "transfer.success", "payload": payload},
    )

    if not created and event.is_processed:
        # Duplicate webhook - already processed
        return JsonResponse({"status": "success"})
"""

from __future__ import annotations

from django.db import models
from django.utils import timezone

from core.models import BaseModel
from core.model_mixins import UUIDPrimaryKeyMixin
from payments.state_machines import WebhookEventStatus

MAX_PROCESSING_ATTEMPTS = 5


class WebhookEvent(UUIDPrimaryKeyMixin, BaseModel):
    """
    Tracks Paystack webhook events for idempotent processing.

    Processing Flow:
        1. Webhook arrives, x-paystack-signature is verified
        2. Insert/get WebhookEvent by body hash
        3. If exists and PROCESSED -> acknowledge (duplicate)
        4. Queue process_webhook_event
        5. Task sets PROCESSING, routes to the handler for event_type
        6. Task sets PROCESSED or FAILED

    Fields:
        idempotency_key: SHA-256 hex digest of the raw body
        event_type: Paystack event name (transfer.success, charge.success, ...)
        payload: Full JSON body
        status: Processing status
        processed_at: When event was successfully processed
        error_message: Error details if processing failed
        retry_count: Number of processing attempts
    """

    idempotency_key = models.CharField(
        max_length=64,
        unique=True,
        help_text="SHA-256 of the raw webhook body - unique constraint for idempotency",
    )

    event_type = models.CharField(
        max_length=100,
        db_index=True,
        help_text="Paystack event type (e.g., 'transfer.success')",
    )

    payload = models.JSONField(help_text="Full webhook payload from Paystack (JSON)")

    status = models.CharField(
        max_length=20,
        choices=WebhookEventStatus.choices,
        default=WebhookEventStatus.PENDING,
        db_index=True,
    )
    processed_at = models.DateTimeField(null=True, blank=True)

    error_message = models.TextField(blank=True, default="")
    retry_count = models.PositiveSmallIntegerField(
        default=0,
        help_text="Number of processing attempts",
    )

    class Meta:
        ordering = ["-created_at"]
        verbose_name = "Webhook Event"
        verbose_name_plural = "Webhook Events"
        indexes = [
            models.Index(fields=["status", "created_at"]),
            models.Index(fields=["event_type", "created_at"]),
        ]

    def __str__(self) -> str:
        return f"WebhookEvent({self.idempotency_key[:12]}, {self.event_type})"

    # ==========================================================================
    # Properties
    # ==========================================================================

    @property
    def is_processed(self) -> bool:
        return self.status == WebhookEventStatus.PROCESSED

    @property
    def can_retry(self) -> bool:
        """Failed events are retried until MAX_PROCESSING_ATTEMPTS."""
        return (
            self.status == WebhookEventStatus.FAILED
            and self.retry_count < MAX_PROCESSING_ATTEMPTS
        )

    @property
    def data(self) -> dict:
        """The event's "data" object, or an empty dict."""
        data = (self.payload or {}).get("data")
        return data if isinstance(data, dict) else {}

    # ==========================================================================
    # Helper Methods
    # ==========================================================================

    def mark_processing(self) -> None:
        """
        Mark event as being processed.

        Note: Does not save - caller must save after calling.
        """
        self.status = WebhookEventStatus.PROCESSING
        self.retry_count += 1

    def mark_processed(self) -> None:
        """
        Mark event as successfully processed.

        Note: Does not save - caller must save after calling.
        """
        self.status = WebhookEventStatus.PROCESSED
        self.processed_at = timezone.now()
        self.error_message = ""

    def mark_failed(self, error_message: str) -> None:
        """
        Mark event as failed with error message.

        Note: Does not save - caller must save after calling.
        """
        self.status = WebhookEventStatus.FAILED
        self.error_message = error_message
