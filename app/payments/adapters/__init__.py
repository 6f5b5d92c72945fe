"""
Payment adapters for external services.

This module provides the adapter for Paystack. All gateway API calls should
go through it to ensure consistent error handling, timeouts and observability.

Usage:
    from payments.adapters import PaystackAdapter, to_minor_units

    transfer = PaystackAdapter.initiate_transfer(
        amount=to_minor_units(payout.amount),
        recipient=payout.recipient_code,
        reference=payout.reference,
    )
"""

from payments.adapters.paystack_adapter import (
    AccountResolution,
    Bank,
    GatewayAdapterMixin,
    PaystackAdapter,
    RefundResult,
    TransferRecipientResult,
    TransferResult,
    TransferVerification,
    to_minor_units,
)

__all__ = [
    "AccountResolution",
    "Bank",
    "GatewayAdapterMixin",
    "PaystackAdapter",
    "RefundResult",
    "TransferRecipientResult",
    "TransferResult",
    "TransferVerification",
    "to_minor_units",
]
