"""
Payout reconciliation engine.

This package provides:
- PayoutAggregationService: Bundles eligible splits into pending payouts
- PayoutProcessingService: Initiates and verifies Paystack transfers
- PayoutReconciliationService: Settles payouts from transfer webhooks
- PayoutSettlement: Guarded completion/failure shared by the two above
- PayoutQueryService: Listings and merchant summaries

Usage:
    from payments.services import PayoutAggregationService, PayoutProcessingService

    for item in PayoutAggregationService.aggregate_eligible_payouts():
        PayoutProcessingService.process_payout(item.payout_id)
"""

from payments.services.aggregation import AggregatedPayout, PayoutAggregationService
from payments.services.processing import PayoutProcessingResult, PayoutProcessingService
from payments.services.reconciliation import (
    TRANSFER_EVENTS,
    PayoutReconciliationService,
)
from payments.services.reporting import PayoutQueryService
from payments.services.settlement import PayoutSettlement

__all__ = [
    "AggregatedPayout",
    "PayoutAggregationService",
    "PayoutProcessingResult",
    "PayoutProcessingService",
    "PayoutQueryService",
    "PayoutReconciliationService",
    "PayoutSettlement",
    "TRANSFER_EVENTS",
]
