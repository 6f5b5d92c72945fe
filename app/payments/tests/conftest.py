"""
Pytest fixtures for payout tests.

Usage:
    def test_process(pending_payout, fake_gateway):
        result = PayoutProcessingService.process_payout(pending_payout.id)
        assert result.payout.status == PayoutStatus.COMPLETED
"""

from decimal import Decimal

import pytest

from merchants.tests.factories import MerchantBankDetailsFactory, MerchantFactory
from payments.tests.factories import OrderMerchantSplitFactory, PayoutFactory


@pytest.fixture
def merchant(db):
    """Active merchant with a registered transfer recipient."""
    merchant = MerchantFactory()
    MerchantBankDetailsFactory(merchant=merchant, recipient_code="RCP_merchant001")
    return merchant


@pytest.fixture
def merchant_without_recipient(db):
    return MerchantFactory()


@pytest.fixture
def eligible_splits(merchant):
    """Two splits past their hold, 2,500.00 and 1,500.50."""
    return [
        OrderMerchantSplitFactory(merchant=merchant, amount_due=Decimal("2500.00")),
        OrderMerchantSplitFactory(merchant=merchant, amount_due=Decimal("1500.50")),
    ]


@pytest.fixture
def pending_payout(merchant):
    """Pending payout of 4,000.50 owning two splits."""
    payout = PayoutFactory(
        merchant=merchant,
        amount=Decimal("4000.50"),
        recipient_code="RCP_merchant001",
        split_count=2,
    )
    OrderMerchantSplitFactory(merchant=merchant, payout=payout, amount_due=Decimal("2500.00"))
    OrderMerchantSplitFactory(merchant=merchant, payout=payout, amount_due=Decimal("1500.50"))
    return payout
