"""
Payout processing: sending one pending payout to Paystack.

The whole operation runs in one transaction under the payout row lock:

1. Lock the payout; it must exist and be PENDING
2. Require a transfer recipient on the merchant's bank details
3. Claim the payout's splits (PAYOUT_REQUESTED -> PROCESSING)
4. Convert the amount to kobo; it must be a positive integer
5. Initiate the transfer. On any gateway error the splits are released,
   the payout is FAILED, the transaction commits, and
   TransferInitiationError is raised
6. Verify the transfer. An error or a non-success status leaves the payout
   PROCESSING for the transfer webhook to settle
7. On verified success the payout is settled (COMPLETED, splits PAID,
   merchant credited)

Emails are scheduled on commit and never affect the outcome.

Usage:
    from payments.services import PayoutProcessingService

    try:
        result = PayoutProcessingService.process_payout(payout_id)
    except TransferInitiationError:
        # Payout is FAILED and its splits are back in the queue
        ...
"""

from __future__ import annotations

from dataclasses import dataclass

from django.utils import timezone

from core.exceptions import BaseApplicationError
from core.services import BaseService
from payments.adapters import (
    GatewayAdapterMixin,
    TransferResult,
    TransferVerification,
    to_minor_units,
)
from payments.exceptions import (
    InvalidPayoutAmountError,
    InvalidPayoutStateError,
    MissingRecipientError,
    PayoutNotFoundError,
    TransferInitiationError,
)
from payments.models import OrderMerchantSplit, Payout
from payments.notifications import notify_payout_initiated
from payments.services.settlement import PayoutSettlement
from payments.state_machines import PayoutStatus, SplitStatus


# =============================================================================
# Result Types
# =============================================================================


@dataclass
class PayoutProcessingResult:
    """
    Outcome of process_payout.

    Attributes:
        payout: The payout after processing (COMPLETED or PROCESSING)
        transfer: Paystack's response to the transfer initiation
        verification: Verification result, or None when verification failed
    """

    payout: Payout
    transfer: TransferResult
    verification: TransferVerification | None = None

    @property
    def is_completed(self) -> bool:
        return self.payout.status == PayoutStatus.COMPLETED


# =============================================================================
# Processing Service
# =============================================================================


class PayoutProcessingService(GatewayAdapterMixin, BaseService):
    """
    Initiates and verifies the Paystack transfer for a pending payout.

    Error Handling:
        - PayoutNotFoundError: No payout with that id
        - InvalidPayoutStateError: Payout is not PENDING (nothing changes)
        - MissingRecipientError: Merchant has no transfer recipient
        - InvalidPayoutAmountError: Amount is not a positive kobo integer;
          the split claim is rolled back
        - TransferInitiationError: Paystack refused or timed out; the
          payout is FAILED and committed before this is raised
    """

    @classmethod
    def process_payout(cls, payout_id) -> PayoutProcessingResult:
        """
        Send a pending payout to Paystack.

        Args:
            payout_id: UUID of the payout to process

        Returns:
            PayoutProcessingResult with the transfer and verification
        """
        logger = cls.get_logger()
        adapter = cls.get_gateway_adapter()
        initiation_error: BaseApplicationError | None = None

        logger.info("Processing payout", extra={"payout_id": str(payout_id)})

        with cls.atomic():
            payout = (
                Payout.objects.select_for_update()
                .filter(id=payout_id)
                .first()
            )
            if payout is None:
                raise PayoutNotFoundError(
                    f"Payout {payout_id} not found",
                    details={"payout_id": str(payout_id)},
                )

            if payout.status != PayoutStatus.PENDING:
                raise InvalidPayoutStateError(
                    f"Cannot process payout with status: {payout.status}",
                    details={"payout_id": str(payout.id), "status": payout.status},
                )

            merchant = payout.merchant
            recipient_code = merchant.recipient_code
            if not recipient_code:
                raise MissingRecipientError(
                    "No recipient code set for merchant in bank details",
                    details={"payout_id": str(payout.id), "merchant_id": str(merchant.id)},
                )

            claimed = OrderMerchantSplit.objects.filter(
                payout=payout,
                status=SplitStatus.PAYOUT_REQUESTED,
            ).update(status=SplitStatus.PROCESSING, updated_at=timezone.now())

            amount_minor = to_minor_units(payout.amount)
            if amount_minor <= 0:
                raise InvalidPayoutAmountError(
                    f"Invalid payout amount: {payout.amount}",
                    details={"payout_id": str(payout.id), "amount": str(payout.amount)},
                )

            logger.info(
                f"Initiating transfer of {amount_minor} kobo to {merchant.store_name}",
                extra={
                    "payout_id": str(payout.id),
                    "merchant_id": str(merchant.id),
                    "recipient_code": recipient_code,
                    "splits_claimed": claimed,
                },
            )

            try:
                transfer = adapter.initiate_transfer(
                    amount=amount_minor,
                    recipient=recipient_code,
                    reference=payout.reference,
                    reason=f"Payout to {merchant.store_name}",
                )
            except BaseApplicationError as e:
                PayoutSettlement.fail(payout, reason=f"Transfer initiation failed: {e.message}")
                initiation_error = e
            else:
                verification = cls._record_transfer(payout, transfer, recipient_code, adapter)

        if initiation_error is not None:
            raise TransferInitiationError(
                f"Failed to initiate transfer: {initiation_error.message}",
                details={
                    "payout_id": str(payout.id),
                    "upstream_code": initiation_error.error_code,
                },
            ) from initiation_error

        return PayoutProcessingResult(payout=payout, transfer=transfer, verification=verification)

    @classmethod
    def _record_transfer(
        cls,
        payout: Payout,
        transfer: TransferResult,
        recipient_code: str,
        adapter,
    ) -> TransferVerification | None:
        """Store the transfer, verify it, and settle or leave it processing."""
        logger = cls.get_logger()

        payout.transfer_code = transfer.transfer_code or None
        payout.recipient_code = recipient_code
        payout.processed_at = timezone.now()

        try:
            verification = adapter.verify_transfer(payout.reference)
        except BaseApplicationError as e:
            logger.warning(
                f"Transfer verification failed, awaiting webhook: {e.message}",
                extra={"payout_id": str(payout.id), "transfer_code": payout.transfer_code},
            )
            verification = None

        if verification is not None and verification.is_successful:
            PayoutSettlement.complete(payout)
            return verification

        payout.mark_processing()
        payout.save()
        logger.info(
            "Transfer initiated, awaiting confirmation",
            extra={
                "payout_id": str(payout.id),
                "transfer_code": payout.transfer_code,
                "verification_status": verification.status if verification else None,
            },
        )
        notify_payout_initiated(payout, payout.merchant)
        return verification
