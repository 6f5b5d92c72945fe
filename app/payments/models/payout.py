"""
Payout model for tracking money transfers to merchants.

A Payout bundles a merchant's eligible order splits into one Paystack
transfer. The splits it owns point at it through OrderMerchantSplit.payout.

Usage:
    from payments.models import Payout
    from payments.state_machines import PayoutStatus

    # Created by aggregation
    payout = Payout.objects.create(
        merchant=merchant,
        amount=Decimal("15000.00"),
        recipient_code="RCP_abc123",
        split_count=3,
    )

    # State transitions using django-fsm
    payout.mark_processing()  # pending -> processing
    payout.save()

    # After the transfer is confirmed
    payout.complete()  # processing -> completed
    payout.save()
"""

from __future__ import annotations

from decimal import Decimal

from django.db import models
from django.utils import timezone
from django_fsm import FSMField, transition

from core.models import BaseModel
from core.model_mixins import UUIDPrimaryKeyMixin
from payments.state_machines import PayoutStatus

REFERENCE_PREFIX = "payout_"


class Payout(UUIDPrimaryKeyMixin, BaseModel):
    """
    Represents one transfer of aggregated earnings to a merchant.

    State Flow:
        PENDING -> COMPLETED (transfer verified right after initiation)
        PENDING -> PROCESSING -> COMPLETED (settled by transfer.success webhook)
        PENDING -> FAILED (initiation failed)
        PROCESSING -> FAILED (transfer.failed / transfer.reversed webhook)

    Fields:
        merchant: Merchant being paid
        amount: Sum of the owned splits' amount_due, in major units
        currency: ISO 4217 currency code
        status: Current FSM status
        reference: Our transfer reference sent to Paystack (payout_<id>)
        transfer_code: Paystack transfer code (TRF_xxx), set after initiation
        recipient_code: Paystack recipient the transfer was sent to
        split_count: Number of splits aggregated into this payout
        processed_at: When the transfer was initiated
        completed_at: When the payout completed
        failed_at: When the payout failed
        failure_reason: Error details if failed

    Note:
        amount is fixed at creation. The completed and failed transitions
        accept their own target as a source so that a repeated webhook is
        a no-op instead of an error; callers compare the status before and
        after to decide whether side effects apply.
    """

    # ==========================================================================
    # Relationships
    # ==========================================================================

    merchant = models.ForeignKey(
        "merchants.Merchant",
        on_delete=models.PROTECT,
        related_name="payouts",
        help_text="Merchant receiving the payout",
    )

    # ==========================================================================
    # Amount & Currency
    # ==========================================================================

    amount = models.DecimalField(
        max_digits=14,
        decimal_places=2,
        help_text="Payout amount in major currency units",
    )

    currency = models.CharField(
        max_length=3,
        default="NGN",
        help_text="ISO 4217 currency code",
    )

    # ==========================================================================
    # State
    # ==========================================================================

    status = FSMField(
        default=PayoutStatus.PENDING,
        choices=PayoutStatus.choices,
        db_index=True,
        protected=True,
        help_text="Current status of the payout (managed by FSM)",
    )

    # ==========================================================================
    # Paystack Integration
    # ==========================================================================

    reference = models.CharField(
        max_length=64,
        unique=True,
        help_text="Our transfer reference (payout_<id>)",
    )

    transfer_code = models.CharField(
        max_length=64,
        null=True,
        blank=True,
        unique=True,
        help_text="Paystack transfer code (TRF_xxx)",
    )

    recipient_code = models.CharField(
        max_length=50,
        blank=True,
        default="",
        help_text="Paystack recipient code at aggregation time",
    )

    split_count = models.PositiveIntegerField(default=0)

    # ==========================================================================
    # Timestamps & Error Info
    # ==========================================================================

    processed_at = models.DateTimeField(
        null=True,
        blank=True,
        help_text="When the transfer was initiated",
    )

    completed_at = models.DateTimeField(
        null=True,
        blank=True,
        help_text="When payout was completed",
    )

    failed_at = models.DateTimeField(
        null=True,
        blank=True,
        help_text="When payout failed",
    )

    failure_reason = models.TextField(
        blank=True,
        default="",
        help_text="Detailed reason if payout failed",
    )

    # ==========================================================================
    # Meta & Methods
    # ==========================================================================

    class Meta:
        ordering = ["-created_at"]
        verbose_name = "Payout"
        verbose_name_plural = "Payouts"
        indexes = [
            models.Index(fields=["merchant", "status"]),
        ]

    def __str__(self) -> str:
        """Return string representation with ID, status, and amount."""
        return f"Payout({self.id}, {self.status}, {self.amount} {self.currency})"

    def save(self, *args, **kwargs):
        """Assign the transfer reference on first save."""
        if not self.reference:
            self.reference = f"{REFERENCE_PREFIX}{self.id}"
        super().save(*args, **kwargs)

    # ==========================================================================
    # State Transitions (django-fsm)
    # ==========================================================================

    @transition(
        field=status,
        source=[PayoutStatus.PENDING, PayoutStatus.PROCESSING],
        target=PayoutStatus.PROCESSING,
    )
    def mark_processing(self):
        """
        Transfer initiated; outcome left to the transfer webhook.

        Transition: PENDING/PROCESSING -> PROCESSING
        """
        if self.processed_at is None:
            self.processed_at = timezone.now()

    @transition(
        field=status,
        source=[PayoutStatus.PENDING, PayoutStatus.PROCESSING, PayoutStatus.COMPLETED],
        target=PayoutStatus.COMPLETED,
    )
    def complete(self):
        """
        Mark payout as completed.

        Transition: PENDING/PROCESSING -> COMPLETED (COMPLETED -> COMPLETED is a no-op)
        """
        if self.completed_at is None:
            self.completed_at = timezone.now()

    @transition(
        field=status,
        source=[PayoutStatus.PENDING, PayoutStatus.PROCESSING, PayoutStatus.FAILED],
        target=PayoutStatus.FAILED,
    )
    def fail(self, reason: str | None = None):
        """
        Mark payout as failed.

        Transition: PENDING/PROCESSING -> FAILED (FAILED -> FAILED is a no-op)

        Args:
            reason: Optional failure reason for debugging
        """
        if self.failed_at is None:
            self.failed_at = timezone.now()
        if reason:
            self.failure_reason = reason

    # ==========================================================================
    # Properties
    # ==========================================================================

    @property
    def amount_minor(self) -> int:
        """Amount in minor units (kobo), rounded half up."""
        from payments.adapters import to_minor_units

        return to_minor_units(self.amount or Decimal("0"))

    @property
    def is_pending(self) -> bool:
        return self.status == PayoutStatus.PENDING

    @property
    def is_complete(self) -> bool:
        return self.status == PayoutStatus.COMPLETED

    @property
    def is_terminal(self) -> bool:
        return self.status in (PayoutStatus.COMPLETED, PayoutStatus.FAILED)
