"""
OrderMerchantSplit model: one merchant's share of an order.

Splits are created when an order is paid, one per merchant whose items are in
the order. A split becomes payable once its hold period has passed, and is
paid out exactly once as part of a Payout.

Usage:
    from payments.models import OrderMerchantSplit
    from payments.state_machines import SplitStatus

    eligible = OrderMerchantSplit.objects.eligible_for_payout(merchant)
"""

from __future__ import annotations

from datetime import timedelta
from decimal import Decimal

from django.conf import settings
from django.db import models
from django.utils import timezone

from core.models import BaseModel
from core.model_mixins import UUIDPrimaryKeyMixin
from payments.state_machines import SplitStatus


def default_hold_until():
    return timezone.now() + timedelta(days=settings.PAYOUT_HOLD_DAYS)


class OrderMerchantSplitQuerySet(models.QuerySet):
    def eligible_for_payout(self, merchant=None, now=None):
        """
        Splits ready to be aggregated into a new payout.

        Eligible means: requested, past its hold, and not owned by a payout.
        """
        queryset = self.filter(
            status=SplitStatus.PAYOUT_REQUESTED,
            hold_until__lt=now or timezone.now(),
            payout__isnull=True,
        )
        if merchant is not None:
            queryset = queryset.filter(merchant=merchant)
        return queryset


class OrderMerchantSplit(UUIDPrimaryKeyMixin, BaseModel):
    """
    A merchant's earnings from one order.

    Status Flow:
        PAYOUT_REQUESTED -> PROCESSING -> PAID
        PROCESSING -> PAYOUT_REQUESTED (transfer failed; payout detached)

    Fields:
        order: Order the earnings come from
        merchant: Merchant owed the amount
        amount_due: Amount owed after commission, in major units
        commission_amount: Platform commission withheld
        status: Payout status of the split
        hold_until: Earliest time the split may be aggregated
        payout: Payout that owns the split; set atomically at aggregation
        paid_at: When the owning payout completed

    Note:
        A split with a payout is never picked up by aggregation again.
        Releasing a split (failed transfer) clears payout so the next run
        can claim it.
    """

    order = models.ForeignKey(
        "orders.Order",
        on_delete=models.PROTECT,
        related_name="merchant_splits",
    )
    merchant = models.ForeignKey(
        "merchants.Merchant",
        on_delete=models.PROTECT,
        related_name="splits",
    )

    amount_due = models.DecimalField(max_digits=14, decimal_places=2)
    commission_amount = models.DecimalField(
        max_digits=14,
        decimal_places=2,
        default=Decimal("0.00"),
    )

    status = models.CharField(
        max_length=20,
        choices=SplitStatus.choices,
        default=SplitStatus.PAYOUT_REQUESTED,
        db_index=True,
    )
    hold_until = models.DateTimeField(default=default_hold_until, db_index=True)

    payout = models.ForeignKey(
        "payments.Payout",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="splits",
        help_text="Payout that owns this split",
    )
    paid_at = models.DateTimeField(null=True, blank=True)

    objects = OrderMerchantSplitQuerySet.as_manager()

    class Meta:
        ordering = ["-created_at"]
        verbose_name = "Order Merchant Split"
        verbose_name_plural = "Order Merchant Splits"
        indexes = [
            models.Index(fields=["merchant", "status", "hold_until"]),
        ]

    def __str__(self) -> str:
        return f"OrderMerchantSplit({self.order_id}, {self.merchant_id}, {self.status})"
