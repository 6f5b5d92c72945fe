"""
Guarded payout settlement transitions.

Both the processing path (verified right after initiation) and the transfer
webhook settle payouts through PayoutSettlement, so a payout completed by one
and then reported again by the other is credited exactly once.

Callers must hold the payout row lock (select_for_update) inside an open
transaction. Each method reports whether the status actually changed; side
effects (split updates, merchant totals, emails) run only when it did.

Transitions the state machine rejects (completed -> failed, failed ->
completed) raise django_fsm.TransitionNotAllowed before anything is written.
"""

from __future__ import annotations

from django.db.models import F
from django.utils import timezone

from core.services import BaseService
from merchants.models import Merchant
from payments.models import OrderMerchantSplit, Payout
from payments.notifications import notify_payout_completed, notify_payout_failed
from payments.state_machines import PayoutStatus, SplitStatus


class PayoutSettlement(BaseService):
    """
    Completion and failure of a locked payout.

    Usage:
        with transaction.atomic():
            payout = Payout.objects.select_for_update().get(id=payout_id)
            changed = PayoutSettlement.complete(payout)
    """

    @classmethod
    def complete(cls, payout: Payout) -> bool:
        """
        Complete the payout, mark its splits paid and credit the merchant.

        Returns:
            True if the payout moved to COMPLETED, False if it already was
        """
        previous_status = payout.status
        payout.complete()
        if previous_status == PayoutStatus.COMPLETED:
            cls.get_logger().info(
                "Payout already completed, skipping settlement",
                extra={"payout_id": str(payout.id)},
            )
            return False

        now = timezone.now()
        payout.save()

        paid = OrderMerchantSplit.objects.filter(payout=payout).exclude(
            status=SplitStatus.PAID
        ).update(status=SplitStatus.PAID, paid_at=now, updated_at=now)

        Merchant.objects.filter(id=payout.merchant_id).update(
            total_payouts=F("total_payouts") + payout.amount,
            last_payout_at=now,
            updated_at=now,
        )

        cls.get_logger().info(
            f"Payout completed: {payout.amount} {payout.currency}",
            extra={
                "payout_id": str(payout.id),
                "merchant_id": str(payout.merchant_id),
                "transfer_code": payout.transfer_code,
                "splits_paid": paid,
            },
        )

        notify_payout_completed(payout, payout.merchant)
        return True

    @classmethod
    def fail(cls, payout: Payout, reason: str) -> bool:
        """
        Fail the payout and release its unpaid splits for the next aggregation.

        Released splits return to PAYOUT_REQUESTED with no owning payout.

        Returns:
            True if the payout moved to FAILED, False if it already was
        """
        previous_status = payout.status
        payout.fail(reason=reason)
        if previous_status == PayoutStatus.FAILED:
            cls.get_logger().info(
                "Payout already failed, skipping release",
                extra={"payout_id": str(payout.id)},
            )
            return False

        payout.save()
        released = cls.release_splits(payout)

        cls.get_logger().warning(
            f"Payout failed: {reason}",
            extra={
                "payout_id": str(payout.id),
                "merchant_id": str(payout.merchant_id),
                "transfer_code": payout.transfer_code,
                "splits_released": released,
            },
        )

        notify_payout_failed(payout, payout.merchant)
        return True

    @staticmethod
    def release_splits(payout: Payout) -> int:
        """Detach the payout's unpaid splits and put them back in the queue."""
        return OrderMerchantSplit.objects.filter(
            payout=payout,
            status__in=[SplitStatus.PROCESSING, SplitStatus.PAYOUT_REQUESTED],
        ).update(
            status=SplitStatus.PAYOUT_REQUESTED,
            payout=None,
            updated_at=timezone.now(),
        )
