"""
Pytest fixtures for merchant tests.
"""

import pytest

from merchants.models import ApplicationStatus
from merchants.tests.factories import (
    MerchantApplicationFactory,
    MerchantBankDetailsFactory,
    MerchantFactory,
)


@pytest.fixture
def application(db):
    return MerchantApplicationFactory(store_name="Ada's Fabrics", work_email="sales@adafabrics.ng")


@pytest.fixture
def approved_application(db):
    return MerchantApplicationFactory(status=ApplicationStatus.APPROVED)


@pytest.fixture
def merchant(db):
    return MerchantFactory(store_name="Ada's Fabrics", work_email="sales@adafabrics.ng")


@pytest.fixture
def merchant_with_bank(merchant):
    MerchantBankDetailsFactory(merchant=merchant, recipient_code="RCP_old")
    return merchant
