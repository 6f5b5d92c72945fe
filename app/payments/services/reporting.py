"""
Read-only payout queries for the admin API.
"""

from __future__ import annotations

from decimal import Decimal

from django.conf import settings
from django.db.models import Count, Sum

from core.exceptions import NotFoundError
from core.services import BaseService
from merchants.models import Merchant
from payments.models import OrderMerchantSplit, Payout
from payments.state_machines import PayoutStatus, SplitStatus

DEFAULT_LIST_LIMIT = 50


class PayoutQueryService(BaseService):
    """Payout listings and per-merchant summaries."""

    @classmethod
    def list_payouts(cls, merchant_id=None, status: str | None = None, limit: int = DEFAULT_LIST_LIMIT):
        """
        Most recent payouts first, optionally filtered.

        Args:
            merchant_id: Only this merchant's payouts
            status: Only payouts in this status
            limit: Maximum number of payouts returned
        """
        queryset = Payout.objects.select_related("merchant").order_by("-created_at")
        if merchant_id:
            queryset = queryset.filter(merchant_id=merchant_id)
        if status:
            queryset = queryset.filter(status=status)
        return queryset[:limit]

    @classmethod
    def get_merchant_payout_summary(cls, merchant_id) -> dict:
        """
        Totals for one merchant.

        Returns:
            Dict with the merchant's lifetime payouts, the amount and count
            of splits still waiting for a payout, payout counts per status
            and the most recent payouts

        Raises:
            NotFoundError: If the merchant does not exist
        """
        merchant = Merchant.objects.filter(id=merchant_id).first()
        if merchant is None:
            raise NotFoundError(
                f"Merchant {merchant_id} not found",
                error_code="MERCHANT_NOT_FOUND",
            )

        pending = OrderMerchantSplit.objects.filter(
            merchant=merchant,
            status=SplitStatus.PAYOUT_REQUESTED,
        ).aggregate(amount=Sum("amount_due"), count=Count("id"))

        status_counts = {status: 0 for status in PayoutStatus.values}
        for row in merchant.payouts.values("status").annotate(count=Count("id")):
            status_counts[row["status"]] = row["count"]

        recent = list(merchant.payouts.order_by("-created_at")[: settings.PAYOUT_SUMMARY_RECENT_LIMIT])

        return {
            "merchant": merchant,
            "total_payouts": merchant.total_payouts,
            "last_payout_at": merchant.last_payout_at,
            "pending_amount": pending["amount"] or Decimal("0.00"),
            "pending_splits": pending["count"],
            "payout_counts": status_counts,
            "recent_payouts": recent,
        }
