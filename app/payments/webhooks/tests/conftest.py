"""
Pytest fixtures for webhook tests.

Provides a signed-POST helper for the Paystack endpoint and webhook events
in each processing status.
"""

import hashlib
import hmac
import json
from decimal import Decimal

import pytest
from django.urls import reverse

from merchants.tests.factories import MerchantBankDetailsFactory, MerchantFactory
from payments.state_machines import PayoutStatus, SplitStatus, WebhookEventStatus
from payments.tests.factories import (
    OrderMerchantSplitFactory,
    PayoutFactory,
    WebhookEventFactory,
)

WEBHOOK_SECRET = "whsec_test"


@pytest.fixture
def webhook_secret(settings):
    settings.PAYSTACK_WEBHOOK_SECRET = WEBHOOK_SECRET
    return WEBHOOK_SECRET


@pytest.fixture
def post_webhook(client, webhook_secret):
    """
    POST a body to the Paystack webhook endpoint.

    Usage:
        response = post_webhook({"event": "transfer.success", "data": {...}})
        response = post_webhook(body, signature="forged")
    """

    def _post(payload, signature=None):
        raw = payload if isinstance(payload, bytes) else json.dumps(payload).encode()
        if signature is None:
            signature = hmac.new(webhook_secret.encode(), raw, hashlib.sha512).hexdigest()
        headers = {"HTTP_X_PAYSTACK_SIGNATURE": signature} if signature else {}
        return client.post(
            reverse("payments:paystack-webhook"),
            data=raw,
            content_type="application/json",
            **headers,
        )

    return _post


# =============================================================================
# Payout Fixtures
# =============================================================================


@pytest.fixture
def merchant(db):
    merchant = MerchantFactory()
    MerchantBankDetailsFactory(merchant=merchant)
    return merchant


@pytest.fixture
def processing_payout(merchant):
    """Processing payout of 1,200.00 with transfer code TRF_webhook001."""
    payout = PayoutFactory(
        merchant=merchant,
        amount=Decimal("1200.00"),
        status=PayoutStatus.PROCESSING,
        transfer_code="TRF_webhook001",
        split_count=1,
    )
    OrderMerchantSplitFactory(
        merchant=merchant,
        payout=payout,
        amount_due=Decimal("1200.00"),
        status=SplitStatus.PROCESSING,
    )
    return payout


@pytest.fixture
def transfer_success_body(processing_payout):
    return {
        "event": "transfer.success",
        "data": {
            "amount": 120000,
            "currency": "NGN",
            "reference": processing_payout.reference,
            "status": "success",
            "transfer_code": "TRF_webhook001",
        },
    }


# =============================================================================
# WebhookEvent Fixtures
# =============================================================================


@pytest.fixture
def pending_webhook_event(transfer_success_body):
    return WebhookEventFactory(
        event_type="transfer.success",
        payload=transfer_success_body,
    )


@pytest.fixture
def processed_webhook_event(db):
    return WebhookEventFactory(status=WebhookEventStatus.PROCESSED)
