"""
Return request model.

A customer asks to return one order item. The merchant approves or rejects
it; a rejected or stalled return can be escalated to an admin, who can
approve it. An approved return is refunded exactly once.

State Flow:
    PENDING -> MERCHANT_APPROVED -> REFUNDED
    PENDING -> MERCHANT_REJECTED -> ADMIN_REVIEW -> ADMIN_APPROVED -> REFUNDED
    PENDING -> ADMIN_REVIEW
    MERCHANT_REJECTED -> ADMIN_APPROVED

Usage:
    from returns.models import ReturnRequest, ReturnStatus
    from django_fsm import can_proceed

    if can_proceed(return_request.escalate):
        return_request.escalate(admin_id, notes)
        return_request.save()
"""

from __future__ import annotations

from django.db import models
from django.utils import timezone
from django_fsm import FSMField, transition

from core.models import BaseModel
from core.model_mixins import UUIDPrimaryKeyMixin


class ReturnStatus(models.TextChoices):
    PENDING = "pending", "Pending"
    MERCHANT_APPROVED = "merchant_approved", "Merchant Approved"
    MERCHANT_REJECTED = "merchant_rejected", "Merchant Rejected"
    ADMIN_REVIEW = "admin_review", "Admin Review"
    ADMIN_APPROVED = "admin_approved", "Admin Approved"
    REFUNDED = "refunded", "Refunded"


REFUNDABLE_STATUSES = frozenset({ReturnStatus.MERCHANT_APPROVED, ReturnStatus.ADMIN_APPROVED})


class ReturnRequest(UUIDPrimaryKeyMixin, BaseModel):
    """
    A customer's request to return an order item.

    Fields:
        order_item: The item being returned
        customer_id: Storefront id of the customer
        reason / description: Customer's explanation
        status: Current FSM status
        merchant_notes / merchant_reviewed_at: Merchant decision
        admin_notes / reviewed_by / admin_reviewed_at: Escalation and approval
        refund_reference: Paystack refund id (empty when the payment had no
            transaction reference)
        refund_amount: item price x quantity, set when refunded
        refunded_at: When the refund was recorded
    """

    order_item = models.ForeignKey(
        "orders.OrderItem",
        on_delete=models.PROTECT,
        related_name="return_requests",
    )
    customer_id = models.CharField(max_length=64, db_index=True)
    reason = models.CharField(max_length=255)
    description = models.TextField(blank=True, default="")

    status = FSMField(
        default=ReturnStatus.PENDING,
        choices=ReturnStatus.choices,
        db_index=True,
        protected=True,
    )

    merchant_notes = models.TextField(blank=True, default="")
    merchant_reviewed_at = models.DateTimeField(null=True, blank=True)

    admin_notes = models.TextField(blank=True, default="")
    reviewed_by = models.CharField(max_length=64, blank=True, default="")
    admin_reviewed_at = models.DateTimeField(null=True, blank=True)

    refund_reference = models.CharField(max_length=100, blank=True, default="")
    refund_amount = models.DecimalField(max_digits=14, decimal_places=2, null=True, blank=True)
    refunded_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["status", "created_at"]),
        ]

    def __str__(self) -> str:
        return f"ReturnRequest({self.id}, {self.status})"

    # ==========================================================================
    # State Transitions (django-fsm)
    # ==========================================================================

    @transition(field=status, source=ReturnStatus.PENDING, target=ReturnStatus.MERCHANT_APPROVED)
    def merchant_approve(self, notes: str = ""):
        self.merchant_notes = notes
        self.merchant_reviewed_at = timezone.now()

    @transition(field=status, source=ReturnStatus.PENDING, target=ReturnStatus.MERCHANT_REJECTED)
    def merchant_reject(self, notes: str = ""):
        self.merchant_notes = notes
        self.merchant_reviewed_at = timezone.now()

    @transition(
        field=status,
        source=[ReturnStatus.PENDING, ReturnStatus.MERCHANT_REJECTED],
        target=ReturnStatus.ADMIN_REVIEW,
    )
    def escalate(self, admin_id: str, notes: str = ""):
        self.reviewed_by = str(admin_id)
        if notes:
            self.admin_notes = notes

    @transition(
        field=status,
        source=[ReturnStatus.ADMIN_REVIEW, ReturnStatus.MERCHANT_REJECTED],
        target=ReturnStatus.ADMIN_APPROVED,
    )
    def admin_approve(self, admin_id: str):
        self.reviewed_by = str(admin_id)
        self.admin_reviewed_at = timezone.now()

    @transition(field=status, source=list(REFUNDABLE_STATUSES), target=ReturnStatus.REFUNDED)
    def mark_refunded(self, refund_reference: str, amount):
        """
        Record the refund.

        Transition: MERCHANT_APPROVED/ADMIN_APPROVED -> REFUNDED
        """
        self.refund_reference = refund_reference or ""
        self.refund_amount = amount
        self.refunded_at = timezone.now()

    @property
    def is_refunded(self) -> bool:
        return self.status == ReturnStatus.REFUNDED
