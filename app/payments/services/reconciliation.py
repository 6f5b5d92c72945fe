"""
Transfer webhook reconciliation.

Applies Paystack's asynchronous transfer outcome to the matching payout:

    transfer.success   -> completed (splits paid, merchant credited)
    transfer.failed    -> failed (splits released for the next aggregation)
    transfer.reversed  -> failed

Redelivered events are no-ops. A webhook that contradicts a terminal payout
(success for a failed payout, failure for a completed one) is logged at
error level for manual follow-up and reported as a failed result; it is
never raised, so the webhook endpoint still acknowledges it.
"""

from __future__ import annotations

from django_fsm import TransitionNotAllowed

from core.services import BaseService, ServiceResult
from payments.models import Payout
from payments.services.settlement import PayoutSettlement

TRANSFER_SUCCESS = "transfer.success"
TRANSFER_FAILED = "transfer.failed"
TRANSFER_REVERSED = "transfer.reversed"

TRANSFER_EVENTS = frozenset({TRANSFER_SUCCESS, TRANSFER_FAILED, TRANSFER_REVERSED})


class PayoutReconciliationService(BaseService):
    """
    Settles payouts from transfer webhooks.

    Usage:
        result = PayoutReconciliationService.handle_transfer_webhook(payload)
        if not result.success:
            webhook_event.mark_failed(result.error)
    """

    @classmethod
    def handle_transfer_webhook(cls, event: dict) -> ServiceResult[Payout | None]:
        """
        Apply one transfer event.

        Args:
            event: The webhook body ({"event": ..., "data": {...}})

        Returns:
            ServiceResult with the payout, or None when no payout matched
        """
        logger = cls.get_logger()
        event_type = event.get("event", "")
        data = event.get("data") or {}

        if event_type not in TRANSFER_EVENTS:
            return ServiceResult.failure(
                f"Unsupported transfer event: {event_type}",
                error_code="UNSUPPORTED_EVENT",
            )

        transfer_code = data.get("transfer_code") or ""
        reference = data.get("reference") or ""

        with cls.atomic():
            payout = cls._find_payout(transfer_code, reference)
            if payout is None:
                logger.warning(
                    f"No payout matches {event_type}, ignoring",
                    extra={"transfer_code": transfer_code, "reference": reference},
                )
                return ServiceResult.success(None)

            try:
                if event_type == TRANSFER_SUCCESS:
                    if not payout.transfer_code and transfer_code:
                        payout.transfer_code = transfer_code
                    PayoutSettlement.complete(payout)
                else:
                    reason = data.get("reason") or f"Paystack reported {event_type}"
                    PayoutSettlement.fail(payout, reason=reason)
            except TransitionNotAllowed:
                logger.error(
                    f"{event_type} conflicts with payout status {payout.status}, "
                    "manual reconciliation required",
                    extra={
                        "payout_id": str(payout.id),
                        "merchant_id": str(payout.merchant_id),
                        "transfer_code": transfer_code,
                        "status": payout.status,
                    },
                )
                return ServiceResult.failure(
                    f"Payout is already {payout.status}",
                    error_code="PAYOUT_STATUS_CONFLICT",
                )

        return ServiceResult.success(payout)

    @staticmethod
    def _find_payout(transfer_code: str, reference: str) -> Payout | None:
        """Locate the payout by transfer code, falling back to our reference."""
        queryset = Payout.objects.select_for_update()
        payout = None
        if transfer_code:
            payout = queryset.filter(transfer_code=transfer_code).first()
        if payout is None and reference:
            payout = queryset.filter(reference=reference).first()
        return payout
