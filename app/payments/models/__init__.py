"""
Payment domain models.

This module contains all payout-related models:
- Payout: One transfer of aggregated merchant earnings
- OrderMerchantSplit: A merchant's share of an order, paid out once
- WebhookEvent: Paystack webhook event tracking for idempotent processing
"""

from payments.models.payout import Payout
from payments.models.split import OrderMerchantSplit
from payments.models.webhook_event import WebhookEvent

__all__ = [
    "OrderMerchantSplit",
    "Payout",
    "WebhookEvent",
]
