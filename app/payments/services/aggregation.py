"""
Payout aggregation.

Bundles each active merchant's eligible splits into one pending Payout. A
split is eligible when it is PAYOUT_REQUESTED, past its hold_until and not
owned by a payout. Aggregation attaches the splits to the new payout in the
same transaction that creates it, so a second run (or a concurrent one)
never picks them up again.

Usage:
    from payments.services import PayoutAggregationService

    created = PayoutAggregationService.aggregate_eligible_payouts()
    for item in created:
        process_payout_task.delay(str(item.payout_id))
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass
from decimal import Decimal

from django.utils import timezone

from core.services import BaseService
from merchants.models import Merchant, MerchantStatus
from payments.models import OrderMerchantSplit, Payout


# =============================================================================
# Result Types
# =============================================================================


@dataclass
class AggregatedPayout:
    """
    One payout created by an aggregation run.

    Attributes:
        payout_id: The new pending payout
        merchant_id: Merchant being paid
        amount: Sum of the attached splits' amount_due
        splits_count: Number of splits attached
    """

    payout_id: uuid.UUID
    merchant_id: uuid.UUID
    amount: Decimal
    splits_count: int

    def to_dict(self) -> dict:
        return {
            "payout_id": str(self.payout_id),
            "merchant_id": str(self.merchant_id),
            "amount": str(self.amount),
            "splits_count": self.splits_count,
        }


# =============================================================================
# Aggregation Service
# =============================================================================


class PayoutAggregationService(BaseService):
    """
    Creates pending payouts from eligible merchant splits.

    Merchants are skipped when:
        - they have no eligible splits
        - they have no transfer recipient (logged as a warning)
        - the eligible splits do not add up to a positive amount

    Skipped merchants keep their splits untouched for the next run.
    """

    @classmethod
    def aggregate_eligible_payouts(cls) -> list[AggregatedPayout]:
        """
        Run one aggregation pass over every active merchant.

        Returns:
            The payouts created, in merchant order
        """
        logger = cls.get_logger()
        logger.info("Starting payout aggregation")

        now = timezone.now()
        created: list[AggregatedPayout] = []

        merchants = Merchant.objects.filter(status=MerchantStatus.ACTIVE).select_related(
            "bank_details"
        )
        for merchant in merchants:
            if not OrderMerchantSplit.objects.eligible_for_payout(merchant, now=now).exists():
                continue

            recipient_code = merchant.recipient_code
            if not recipient_code:
                logger.warning(
                    f"Merchant {merchant.store_name} has no transfer recipient, skipping payout",
                    extra={"merchant_id": str(merchant.id)},
                )
                continue

            aggregated = cls._aggregate_for_merchant(merchant, recipient_code, now)
            if aggregated is not None:
                created.append(aggregated)

        logger.info(
            f"Payout aggregation complete, created {len(created)} payouts",
            extra={"payout_count": len(created)},
        )
        return created

    @classmethod
    def _aggregate_for_merchant(
        cls,
        merchant: Merchant,
        recipient_code: str,
        now,
    ) -> AggregatedPayout | None:
        with cls.atomic():
            splits = list(
                OrderMerchantSplit.objects.eligible_for_payout(merchant, now=now)
                .select_for_update()
                .order_by("created_at")
            )
            if not splits:
                return None

            total = sum((split.amount_due for split in splits), Decimal("0.00"))
            if total <= 0:
                cls.get_logger().warning(
                    f"Eligible splits for {merchant.store_name} total {total}, skipping payout",
                    extra={"merchant_id": str(merchant.id), "split_count": len(splits)},
                )
                return None

            currency = getattr(merchant.bank_details, "currency", "") or "NGN"
            payout = Payout.objects.create(
                merchant=merchant,
                amount=total,
                currency=currency,
                recipient_code=recipient_code,
                split_count=len(splits),
            )
            OrderMerchantSplit.objects.filter(id__in=[split.id for split in splits]).update(
                payout=payout,
                updated_at=now,
            )

        cls.get_logger().info(
            f"Created payout for {merchant.store_name}: {total} {currency}",
            extra={
                "payout_id": str(payout.id),
                "merchant_id": str(merchant.id),
                "split_count": len(splits),
            },
        )
        return AggregatedPayout(
            payout_id=payout.id,
            merchant_id=merchant.id,
            amount=total,
            splits_count=len(splits),
        )
