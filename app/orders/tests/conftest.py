"""
Pytest fixtures for order tests.

The default order has two items from two merchants, each with a stock row
holding its reservation, and a completed payment.
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


@pytest.fixture
def merchant(db):
    return MerchantFactory()


@pytest.fixture
def other_merchant(db):
    return MerchantFactory()


@pytest.fixture
def order(db):
    return OrderFactory(total_amount=Decimal("12500.00"), sub_total=Decimal("12500.00"))


@pytest.fixture
def item(order, merchant):
    """2 x 5,000.00 from merchant, product stock 10 with 2 reserved."""
    item = OrderItemFactory(order=order, merchant=merchant, quantity=2, price=Decimal("5000.00"))
    InventoryFactory.for_item(item, quantity=10, reserved_quantity=2)
    return item


@pytest.fixture
def variant_item(order, other_merchant):
    """1 x 2,500.00 variant from other_merchant, variant stock 4 with 1 reserved."""
    item = OrderItemFactory(
        order=order,
        merchant=other_merchant,
        variant_id="var_blue_xl",
        quantity=1,
        price=Decimal("2500.00"),
    )
    InventoryFactory.for_item(item, quantity=4, reserved_quantity=1)
    return item


@pytest.fixture
def payment(order):
    return PaymentFactory(order=order, transaction_reference="txn_order_001")
