"""
Paystack API adapter for transfer and refund operations.

This module provides the PaystackAdapter class which encapsulates all
Paystack API interactions. All Paystack calls should go through this
adapter to ensure consistent error handling, timeouts and observability.

Features:
- Short client-side timeout on every call
- Translation of HTTP and body-level failures to domain exceptions
- Structured logging with timing metrics
- HMAC-SHA512 webhook signature verification
- Bank listing for recipient set-up

Configuration (via settings):
- PAYSTACK_SECRET_KEY: API secret key (bearer token)
- PAYSTACK_WEBHOOK_SECRET: Key used to sign webhook bodies
- PAYSTACK_BASE_URL: API root (default: https://api.paystack.co)
- PAYSTACK_TIMEOUT_SECONDS: Per-call timeout (default: 5)
- PAYSTACK_CURRENCY: Default currency (default: NGN)

Amounts:
    Transfers take amounts in minor units (kobo). create_refund takes the
    amount in major units and converts it. Use to_minor_units() for the
    conversion everywhere else.

Usage:
    from payments.adapters import PaystackAdapter

    transfer = PaystackAdapter.initiate_transfer(
        source="balance",
        amount=1_500_000,
        recipient="RCP_abc123",
        reference="payout_42",
        reason="Payout for Ada Stores",
    )
    verification = PaystackAdapter.verify_transfer("payout_42")
"""

from __future__ import annotations

import hashlib
import hmac
import logging
import re
import time
from dataclasses import dataclass, field
from decimal import ROUND_HALF_UP, Decimal
from typing import Any

import requests
from django.conf import settings

from core.exceptions import MissingConfigurationError, ValidationError
from payments.exceptions import (
    PaystackAPIUnavailableError,
    PaystackError,
    PaystackInvalidRequestError,
    PaystackTimeoutError,
)

DEFAULT_BASE_URL = "https://api.paystack.co"

ACCOUNT_NUMBER_PATTERN = re.compile(r"^\d{10}$")
BANK_CODE_PATTERN = re.compile(r"^\d{3}$")

SUPPORTED_BANK_COUNTRIES = ("ghana", "kenya", "nigeria", "south africa")

TRANSFER_SUCCESS = "success"


# =============================================================================
# Data Types
# =============================================================================


@dataclass
class TransferRecipientResult:
    """
    Result from creating a transfer recipient.

    Attributes:
        recipient_code: Paystack recipient reference (RCP_xxx)
        name: Account holder name registered with the recipient
        account_number: Destination NUBAN
        bank_code: Destination bank code
        bank_name: Bank name as reported by Paystack
        currency: Recipient currency
        raw_response: Full "data" object from Paystack
    """

    recipient_code: str
    name: str
    account_number: str
    bank_code: str
    bank_name: str = ""
    currency: str = "NGN"
    raw_response: dict[str, Any] = field(default_factory=dict)


@dataclass
class Bank:
    """A bank as listed by /bank. The code is what recipients are created with."""

    name: str
    code: str
    slug: str = ""
    country: str = ""
    currency: str = ""

    def to_dict(self) -> dict[str, str]:
        return {
            "name": self.name,
            "code": self.code,
            "slug": self.slug,
            "country": self.country,
            "currency": self.currency,
        }


@dataclass
class AccountResolution:
    """Account holder lookup for a bank account."""

    account_number: str
    account_name: str
    raw_response: dict[str, Any] = field(default_factory=dict)


@dataclass
class TransferResult:
    """
    Result from initiating a transfer.

    Attributes:
        transfer_code: Paystack transfer reference (TRF_xxx)
        reference: Our reference sent with the transfer
        status: Initial status (pending, success, otp, ...)
        amount: Amount in minor units
        currency: Currency code
        recipient: Recipient code the transfer was sent to
        raw_response: Full "data" object from Paystack
    """

    transfer_code: str
    reference: str
    status: str
    amount: int
    currency: str
    recipient: str = ""
    raw_response: dict[str, Any] = field(default_factory=dict)


@dataclass
class TransferVerification:
    """Current state of a transfer, as reported by /transfer/verify."""

    transfer_code: str
    reference: str
    status: str
    amount: int
    currency: str
    raw_response: dict[str, Any] = field(default_factory=dict)

    @property
    def is_successful(self) -> bool:
        return self.status == TRANSFER_SUCCESS


@dataclass
class RefundResult:
    """
    Result from creating a refund.

    Attributes:
        id: Paystack refund id, as a string
        status: Refund status (pending, processing, processed, failed)
        amount: Refunded amount in minor units
        currency: Currency code
        transaction_reference: Reference of the refunded charge
        raw_response: Full "data" object from Paystack
    """

    id: str
    status: str
    amount: int
    currency: str
    transaction_reference: str = ""
    raw_response: dict[str, Any] = field(default_factory=dict)


# =============================================================================
# Money Helpers
# =============================================================================


def to_minor_units(amount: Decimal | int | str) -> int:
    """
    Convert a major-unit amount to minor units (x100), rounding half up.

    Example:
        to_minor_units(Decimal("150.75"))  # 15075
    """
    minor = (Decimal(str(amount)) * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP)
    return int(minor)


# =============================================================================
# Paystack Adapter
# =============================================================================


class PaystackAdapter:
    """
    Adapter for Paystack API operations.

    All methods are classmethods - no instance state is maintained.
    Thread-safe for use from Celery workers.

    Every response is checked twice: a non-2xx HTTP status is an error, and
    so is a 2xx body with "status": false.

    Usage:
        recipient = PaystackAdapter.create_transfer_recipient(
            name="Ada Stores", account_number="0123456789", bank_code="058"
        )
        refund = PaystackAdapter.create_refund("T685312322670591", Decimal("2500.00"))
    """

    # =========================================================================
    # Configuration
    # =========================================================================

    @classmethod
    def get_logger(cls) -> logging.Logger:
        """Get logger for this adapter."""
        return logging.getLogger(f"{cls.__module__}.{cls.__name__}")

    @staticmethod
    def _base_url() -> str:
        return getattr(settings, "PAYSTACK_BASE_URL", DEFAULT_BASE_URL).rstrip("/")

    @staticmethod
    def _timeout() -> float:
        return float(getattr(settings, "PAYSTACK_TIMEOUT_SECONDS", 5))

    @staticmethod
    def _headers() -> dict[str, str]:
        secret_key = getattr(settings, "PAYSTACK_SECRET_KEY", "")
        if not secret_key:
            raise MissingConfigurationError(
                "Paystack secret key is not configured",
                error_code="PAYSTACK_NOT_CONFIGURED",
            )
        return {
            "Authorization": f"Bearer {secret_key}",
            "Content-Type": "application/json",
        }

    @staticmethod
    def _default_currency() -> str:
        return getattr(settings, "PAYSTACK_CURRENCY", "NGN")

    # =========================================================================
    # Transport
    # =========================================================================

    @classmethod
    def _request(
        cls,
        method: str,
        path: str,
        operation: str,
        payload: dict[str, Any] | None = None,
        params: dict[str, Any] | None = None,
        log_context: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        """
        Send one request to Paystack and return the response's "data" object.

        Raises:
            PaystackTimeoutError: No response within the timeout
            PaystackAPIUnavailableError: Network failure or 5xx response
            PaystackInvalidRequestError: 4xx response or "status": false
            PaystackError: Response body is not valid JSON
        """
        logger = cls.get_logger()
        log_context = {"operation": operation, **(log_context or {})}

        start_time = time.time()
        logger.info("Starting Paystack operation", extra=log_context)

        try:
            response = requests.request(
                method,
                f"{cls._base_url()}{path}",
                headers=cls._headers(),
                json=payload,
                params=params,
                timeout=cls._timeout(),
            )
        except requests.Timeout as e:
            duration_ms = (time.time() - start_time) * 1000
            logger.warning(
                "Paystack request timed out",
                extra={**log_context, "duration_ms": duration_ms},
            )
            raise PaystackTimeoutError(
                f"Paystack {operation} timed out",
                details={"operation": operation},
            ) from e
        except requests.RequestException as e:
            duration_ms = (time.time() - start_time) * 1000
            logger.error(
                "Paystack request failed",
                extra={**log_context, "duration_ms": duration_ms, "error": str(e)},
            )
            raise PaystackAPIUnavailableError(
                f"Paystack {operation} failed: {e}",
                details={"operation": operation},
            ) from e

        duration_ms = (time.time() - start_time) * 1000
        body = cls._parse_body(response, operation)

        if response.status_code >= 500:
            logger.error(
                "Paystack server error",
                extra={**log_context, "status_code": response.status_code, "duration_ms": duration_ms},
            )
            raise PaystackAPIUnavailableError(
                f"Paystack {operation} failed: {body.get('message') or 'server error'}",
                status_code=response.status_code,
                details={"operation": operation},
            )

        if not 200 <= response.status_code < 300 or not body.get("status"):
            logger.error(
                "Paystack rejected request",
                extra={
                    **log_context,
                    "status_code": response.status_code,
                    "paystack_message": body.get("message"),
                    "duration_ms": duration_ms,
                },
            )
            raise PaystackInvalidRequestError(
                f"Paystack {operation} failed: {body.get('message') or 'request rejected'}",
                status_code=response.status_code,
                details={"operation": operation},
            )

        logger.info(
            "Paystack operation completed",
            extra={**log_context, "duration_ms": duration_ms},
        )
        return body.get("data") or {}

    @staticmethod
    def _parse_body(response: requests.Response, operation: str) -> dict[str, Any]:
        try:
            body = response.json()
        except ValueError as e:
            raise PaystackError(
                f"Paystack {operation} returned a non-JSON response",
                status_code=response.status_code,
                details={"operation": operation},
            ) from e
        if not isinstance(body, dict):
            raise PaystackError(
                f"Paystack {operation} returned an unexpected response",
                status_code=response.status_code,
                details={"operation": operation},
            )
        return body

    # =========================================================================
    # Recipients
    # =========================================================================

    @classmethod
    def list_banks(cls, country: str | None = None) -> list[Bank]:
        """
        List the banks transfers can be sent to.

        Args:
            country: Optional filter, one of SUPPORTED_BANK_COUNTRIES

        Raises:
            ValidationError: Unsupported country
            PaystackError: Paystack rejected or failed the request
        """
        params = {}
        if country:
            if country not in SUPPORTED_BANK_COUNTRIES:
                raise ValidationError(
                    f"Country must be one of: {', '.join(SUPPORTED_BANK_COUNTRIES)}",
                    details={"field": "country"},
                )
            params["country"] = country

        data = cls._request(
            "GET",
            "/bank",
            operation="list_banks",
            params=params,
            log_context={"country": country or ""},
        )
        if not isinstance(data, list):
            return []
        return [
            Bank(
                name=entry.get("name", ""),
                code=entry.get("code", ""),
                slug=entry.get("slug") or "",
                country=entry.get("country") or "",
                currency=entry.get("currency") or "",
            )
            for entry in data
            if isinstance(entry, dict)
        ]

    @classmethod
    def resolve_account(cls, account_number: str, bank_code: str) -> AccountResolution:
        """
        Look up the account holder name for a bank account.

        Raises:
            ValidationError: Malformed account number or bank code
            PaystackError: Paystack could not resolve the account
        """
        cls._validate_bank_account(account_number, bank_code)
        data = cls._request(
            "GET",
            "/bank/resolve",
            operation="resolve_account",
            params={"account_number": account_number, "bank_code": bank_code},
            log_context={"bank_code": bank_code},
        )
        return AccountResolution(
            account_number=data.get("account_number", account_number),
            account_name=data.get("account_name", ""),
            raw_response=data,
        )

    @classmethod
    def create_transfer_recipient(
        cls,
        name: str,
        account_number: str,
        bank_code: str,
        recipient_type: str = "nuban",
        currency: str | None = None,
    ) -> TransferRecipientResult:
        """
        Register a bank account as a transfer recipient.

        Raises:
            ValidationError: Missing name or malformed account details
            PaystackError: Paystack rejected or failed the request
        """
        if not name:
            raise ValidationError("Recipient name is required")
        if recipient_type not in ("nuban", "mobile_money"):
            raise ValidationError(f"Unsupported recipient type: {recipient_type}")
        cls._validate_bank_account(account_number, bank_code)

        currency = currency or cls._default_currency()
        data = cls._request(
            "POST",
            "/transferrecipient",
            operation="create_transfer_recipient",
            payload={
                "type": recipient_type,
                "name": name,
                "account_number": account_number,
                "bank_code": bank_code,
                "currency": currency,
            },
            log_context={"bank_code": bank_code},
        )
        details = data.get("details") or {}
        return TransferRecipientResult(
            recipient_code=data.get("recipient_code", ""),
            name=data.get("name", name),
            account_number=details.get("account_number", account_number),
            bank_code=details.get("bank_code", bank_code),
            bank_name=details.get("bank_name") or "",
            currency=data.get("currency", currency),
            raw_response=data,
        )

    @staticmethod
    def _validate_bank_account(account_number: str, bank_code: str) -> None:
        if not ACCOUNT_NUMBER_PATTERN.match(account_number or ""):
            raise ValidationError(
                "Account number must be a 10-digit number",
                details={"field": "account_number"},
            )
        if not BANK_CODE_PATTERN.match(bank_code or ""):
            raise ValidationError(
                "Bank code must be a 3-digit code",
                details={"field": "bank_code"},
            )

    # =========================================================================
    # Transfers
    # =========================================================================

    @classmethod
    def initiate_transfer(
        cls,
        amount: int,
        recipient: str,
        reference: str,
        reason: str = "",
        source: str = "balance",
    ) -> TransferResult:
        """
        Start a transfer from the platform balance to a recipient.

        Args:
            amount: Amount in minor units (kobo), positive
            recipient: Recipient code (RCP_xxx)
            reference: Our unique reference for this transfer
            reason: Narration shown to the recipient
            source: Funding source; Paystack only supports "balance"

        Raises:
            ValidationError: Non-positive amount, missing recipient or bad source
            PaystackError: Paystack rejected or failed the request
        """
        if source != "balance":
            raise ValidationError("Source must be 'balance' for transfers")
        if not isinstance(amount, int) or amount <= 0:
            raise ValidationError(
                "Transfer amount must be a positive integer in minor units",
                details={"amount": str(amount)},
            )
        if not recipient:
            raise ValidationError("Recipient code is required")

        data = cls._request(
            "POST",
            "/transfer",
            operation="initiate_transfer",
            payload={
                "source": source,
                "amount": amount,
                "recipient": recipient,
                "reference": reference,
                "reason": reason,
            },
            log_context={"reference": reference, "amount": amount},
        )
        return TransferResult(
            transfer_code=data.get("transfer_code", ""),
            reference=data.get("reference", reference),
            status=data.get("status", ""),
            amount=int(data.get("amount", amount)),
            currency=data.get("currency", cls._default_currency()),
            recipient=str(data.get("recipient", recipient)),
            raw_response=data,
        )

    @classmethod
    def verify_transfer(cls, reference: str) -> TransferVerification:
        """
        Fetch the current status of a transfer by our reference.

        Raises:
            ValidationError: Empty reference
            PaystackError: Paystack rejected or failed the request
        """
        if not reference:
            raise ValidationError("Reference is required")

        data = cls._request(
            "GET",
            f"/transfer/verify/{reference}",
            operation="verify_transfer",
            log_context={"reference": reference},
        )
        return TransferVerification(
            transfer_code=data.get("transfer_code", ""),
            reference=data.get("reference", reference),
            status=data.get("status", ""),
            amount=int(data.get("amount") or 0),
            currency=data.get("currency", cls._default_currency()),
            raw_response=data,
        )

    # =========================================================================
    # Refunds
    # =========================================================================

    @classmethod
    def create_refund(
        cls,
        transaction_reference: str,
        amount: Decimal | None = None,
        currency: str | None = None,
        customer_note: str = "",
        merchant_note: str = "",
    ) -> RefundResult:
        """
        Refund a charge, in full or in part.

        Args:
            transaction_reference: Reference of the charge to refund
            amount: Amount in major units; None refunds the full charge
            currency: Currency code (defaults to PAYSTACK_CURRENCY)
            customer_note: Note shown to the customer
            merchant_note: Internal note

        Raises:
            ValidationError: Missing reference or non-positive amount
            PaystackError: Paystack rejected or failed the request
        """
        if not transaction_reference:
            raise ValidationError("Transaction reference is required")

        payload: dict[str, Any] = {"transaction": transaction_reference}
        if amount is not None:
            minor = to_minor_units(amount)
            if minor <= 0:
                raise ValidationError(
                    "Refund amount must be positive",
                    details={"amount": str(amount)},
                )
            payload["amount"] = minor
        if currency:
            payload["currency"] = currency
        if customer_note:
            payload["customer_note"] = customer_note
        if merchant_note:
            payload["merchant_note"] = merchant_note

        data = cls._request(
            "POST",
            "/refund",
            operation="create_refund",
            payload=payload,
            log_context={"transaction_reference": transaction_reference},
        )
        return cls._refund_result(data, transaction_reference)

    @classmethod
    def _refund_result(cls, data: dict[str, Any], transaction_reference: str = "") -> RefundResult:
        transaction = data.get("transaction")
        if isinstance(transaction, dict):
            transaction_reference = transaction.get("reference", transaction_reference)
        return RefundResult(
            id=str(data.get("id", "")),
            status=data.get("status", ""),
            amount=int(data.get("amount") or 0),
            currency=data.get("currency", cls._default_currency()),
            transaction_reference=transaction_reference,
            raw_response=data,
        )

    # =========================================================================
    # Webhooks
    # =========================================================================

    @classmethod
    def verify_webhook_signature(cls, payload: bytes, signature: str | None) -> bool:
        """
        Check a webhook body against its x-paystack-signature header.

        The signature is the hex HMAC-SHA512 of the raw body, keyed with
        PAYSTACK_WEBHOOK_SECRET. With no secret configured, verification is
        skipped (and logged) and the body is accepted.

        Args:
            payload: Raw request body bytes, exactly as received
            signature: Header value, or None if absent

        Returns:
            True if the signature matches or verification is skipped
        """
        secret = getattr(settings, "PAYSTACK_WEBHOOK_SECRET", "")
        if not secret:
            cls.get_logger().warning(
                "Paystack webhook secret not configured, skipping signature verification"
            )
            return True

        expected = hmac.new(secret.encode(), payload, hashlib.sha512).hexdigest()
        return hmac.compare_digest(expected.encode(), (signature or "").encode())


# =============================================================================
# Adapter Injection
# =============================================================================


class GatewayAdapterMixin:
    """
    Gives a service a replaceable gateway adapter.

    Services call cls.get_gateway_adapter() instead of naming PaystackAdapter
    directly. Setting the adapter on the mixin swaps it for every service
    that uses it; setting it on one service class swaps it there only.

    Usage:
        adapter = PayoutProcessingService.get_gateway_adapter()
        adapter.initiate_transfer(...)

        # Tests
        GatewayAdapterMixin.set_gateway_adapter(FakeGateway())
    """

    _gateway_adapter: Any = None

    @classmethod
    def get_gateway_adapter(cls) -> Any:
        return cls._gateway_adapter or PaystackAdapter

    @classmethod
    def set_gateway_adapter(cls, adapter: Any) -> None:
        cls._gateway_adapter = adapter
