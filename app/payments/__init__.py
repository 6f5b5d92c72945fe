"""
Payments app for Paystack payouts.

This app handles:
- Aggregating merchants' eligible order splits into payouts
- Initiating and verifying Paystack transfers
- Reconciling transfer webhooks (transfer.success / failed / reversed)
- Payout reporting for admins

Related apps:
    - merchants: Merchant totals and transfer recipients
    - orders: Orders the splits come from

Usage:
    from payments.services import PayoutAggregationService, PayoutProcessingService

    created = PayoutAggregationService.aggregate_eligible_payouts()
    result = PayoutProcessingService.process_payout(created[0].payout_id)
"""
