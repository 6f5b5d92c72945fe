"""
Payment-specific exceptions for payout and gateway operations.

This module provides the exceptions raised by the payout reconciliation
engine and the Paystack adapter. Each one derives from a core.exceptions
class, so the API exception handler renders it with the right HTTP status.

Exception Hierarchy:
    NotFoundError
    └── PayoutNotFoundError - Payout lookup failures (404)
    InvalidStateError
    └── InvalidPayoutStateError - Payout not pending when processed (400)
    MissingConfigurationError
    └── MissingRecipientError - Merchant has no transfer recipient (400)
    ValidationError
    └── InvalidPayoutAmountError - Amount not a positive minor-unit integer (400)
    ExternalServiceError
    ├── TransferInitiationError - Transfer could not be started (502)
    └── PaystackError - Base for all Paystack errors (502)
        ├── PaystackInvalidRequestError - Rejected request (permanent)
        ├── PaystackAPIUnavailableError - 5xx or network failure (transient)
        └── PaystackTimeoutError - No response in time (transient)

Usage:
    from payments.exceptions import PaystackError, TransferInitiationError

    try:
        transfer = adapter.initiate_transfer(...)
    except PaystackError as e:
        raise TransferInitiationError(
            f"Transfer initiation failed: {e.message}",
            details={"payout_id": str(payout.id), "upstream_code": e.error_code},
        ) from e
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from core.exceptions import (
    ExternalServiceError,
    InvalidStateError,
    MissingConfigurationError,
    NotFoundError,
    ValidationError,
)

if TYPE_CHECKING:
    from typing import Any


# =============================================================================
# Payout Exceptions
# =============================================================================


class PayoutNotFoundError(NotFoundError):
    """Raised when a payout id does not match any payout."""

    default_error_code: str = "PAYOUT_NOT_FOUND"


class InvalidPayoutStateError(InvalidStateError):
    """
    Raised when a payout is processed from a status other than pending.

    The payout is left untouched. A failed payout is retried by running
    aggregation again, which creates a new pending payout for the released
    splits.
    """

    default_error_code: str = "INVALID_PAYOUT_STATE"


class MissingRecipientError(MissingConfigurationError):
    """
    Raised when the payout's merchant has no gateway recipient code.

    The merchant must register bank details before it can be paid.
    """

    default_error_code: str = "MISSING_RECIPIENT"


class InvalidPayoutAmountError(ValidationError):
    """Raised when a payout amount is not a positive integer in minor units."""

    default_error_code: str = "INVALID_PAYOUT_AMOUNT"


class TransferInitiationError(ExternalServiceError):
    """
    Raised when the gateway refuses or fails to start a transfer.

    By the time this is raised the payout is already failed and its splits
    are released, and that state has been committed.
    """

    default_error_code: str = "TRANSFER_INITIATION_FAILED"


# =============================================================================
# Paystack-Specific Exceptions
# =============================================================================


class PaystackError(ExternalServiceError):
    """
    Base exception for all Paystack API errors.

    Attributes:
        status_code: HTTP status returned by Paystack, if any
        is_retryable: Whether the same request may succeed later

    Example:
        try:
            PaystackAdapter.verify_transfer(reference)
        except PaystackError as e:
            if e.is_retryable:
                leave_for_webhook()
            else:
                raise
    """

    default_error_code: str = "PAYSTACK_ERROR"
    is_retryable: bool = False

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        status_code: int | None = None,
        details: dict[str, Any] | None = None,
    ):
        details = details or {}
        if status_code is not None:
            details["status_code"] = status_code
        super().__init__(message, error_code=error_code, details=details)
        self.status_code = status_code


class PaystackInvalidRequestError(PaystackError):
    """
    Paystack rejected the request (4xx, or a body with status false).

    Permanent: resending the same parameters will fail again. Typical causes
    are an unknown recipient code, an unresolvable account number, or a
    refund larger than the charge.
    """

    default_error_code: str = "PAYSTACK_INVALID_REQUEST"
    is_retryable: bool = False


class PaystackAPIUnavailableError(PaystackError):
    """
    Paystack answered with a 5xx, or could not be reached at all.

    Transient: connection errors, DNS failures and server errors usually
    clear on their own.
    """

    default_error_code: str = "PAYSTACK_UNAVAILABLE"
    is_retryable: bool = True


class PaystackTimeoutError(PaystackError):
    """
    No response within PAYSTACK_TIMEOUT_SECONDS.

    IMPORTANT: The operation may have gone through on Paystack's side. For a
    transfer this means the outcome is unknown until verification or the
    transfer webhook settles it.
    """

    default_error_code: str = "PAYSTACK_TIMEOUT"
    is_retryable: bool = True


def is_retryable_paystack_error(error: Exception) -> bool:
    """Check whether an exception is a transient Paystack error."""
    if isinstance(error, PaystackError):
        return getattr(error, "is_retryable", False)
    return False


# =============================================================================
# Exports
# =============================================================================

__all__ = [
    # Payouts
    "PayoutNotFoundError",
    "InvalidPayoutStateError",
    "MissingRecipientError",
    "InvalidPayoutAmountError",
    "TransferInitiationError",
    # Paystack-specific
    "PaystackError",
    "PaystackInvalidRequestError",
    "PaystackAPIUnavailableError",
    "PaystackTimeoutError",
    "is_retryable_paystack_error",
]
