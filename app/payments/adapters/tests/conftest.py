"""
Pytest fixtures for Paystack adapter tests.

Sections:
    - Settings
    - Mock HTTP Response Fixtures
    - Test Data Fixtures
"""

import hashlib
import hmac
import json
from unittest.mock import MagicMock

import pytest
import requests

WEBHOOK_SECRET = "whsec_test"


# =============================================================================
# Settings
# =============================================================================


@pytest.fixture(autouse=True)
def paystack_settings(settings):
    """Point the adapter at a test account for every test in this package."""
    settings.PAYSTACK_SECRET_KEY = "sk_test_secret"
    settings.PAYSTACK_BASE_URL = "https://api.paystack.co"
    settings.PAYSTACK_TIMEOUT_SECONDS = 5
    settings.PAYSTACK_CURRENCY = "NGN"
    settings.PAYSTACK_WEBHOOK_SECRET = WEBHOOK_SECRET
    return settings


# =============================================================================
# Mock HTTP Response Fixtures
# =============================================================================


@pytest.fixture
def paystack_response():
    """Factory for mock requests.Response objects carrying a Paystack body."""

    def _create(data=None, status=True, message="OK", status_code=200, body=None):
        response = MagicMock(spec=requests.Response)
        response.status_code = status_code
        if body is None:
            body = {"status": status, "message": message, "data": data or {}}
        if isinstance(body, Exception):
            response.json.side_effect = body
        else:
            response.json.return_value = body
        return response

    return _create


@pytest.fixture
def mock_request(mocker):
    """Patch the HTTP call made by the adapter."""
    return mocker.patch("payments.adapters.paystack_adapter.requests.request")


# =============================================================================
# Test Data Fixtures
# =============================================================================


@pytest.fixture
def transfer_data():
    """A /transfer response "data" object."""
    return {
        "transfer_code": "TRF_1ptvuv321ahaa7q",
        "reference": "payout_42",
        "status": "pending",
        "amount": 1500000,
        "currency": "NGN",
        "recipient": "RCP_abc123",
    }


@pytest.fixture
def sign_body():
    """Compute the x-paystack-signature value for a body."""

    def _sign(payload: dict | bytes, secret: str = WEBHOOK_SECRET) -> tuple[bytes, str]:
        raw = payload if isinstance(payload, bytes) else json.dumps(payload).encode()
        return raw, hmac.new(secret.encode(), raw, hashlib.sha512).hexdigest()

    return _sign
