"""
Pytest fixtures for return tests.

The returned item is 2 x 3,000.00 from merchant, its order paid with
reference txn_return_001, and its stock row at 5.
"""

from decimal import Decimal

import pytest

from merchants.tests.factories import MerchantFactory
from orders.tests.factories import (
    InventoryFactory,
    OrderFactory,
    OrderItemFactory,
    PaymentFactory,
)
from returns.models import ReturnStatus
from returns.tests.factories import ReturnRequestFactory


@pytest.fixture
def merchant(db):
    return MerchantFactory()


@pytest.fixture
def order(db):
    return OrderFactory(total_amount=Decimal("6000.00"), sub_total=Decimal("6000.00"))


@pytest.fixture
def item(order, merchant):
    item = OrderItemFactory(order=order, merchant=merchant, quantity=2, price=Decimal("3000.00"))
    InventoryFactory.for_item(item, quantity=5, reserved_quantity=0)
    return item


@pytest.fixture
def payment(order):
    return PaymentFactory(order=order, transaction_reference="txn_return_001")


@pytest.fixture
def pending_return(item, payment):
    return ReturnRequestFactory(order_item=item)


@pytest.fixture
def return_in(item, payment):
    """
    Build a return in the given status for the default item.

    Usage:
        rejected = return_in(ReturnStatus.MERCHANT_REJECTED)
    """

    def _make(status: str = ReturnStatus.PENDING, **kwargs):
        return ReturnRequestFactory(order_item=item, status=status, **kwargs)

    return _make
