"""
Order status derivation.

An order's status follows from its items' fulfillment statuses. This module
holds that rule as a pure function so the fulfillment service, tests and
any backfill script apply exactly the same logic.

Rules, in order:
    1. Every item sent to the hub or out for delivery, and the order is not
       pending, cancelled or completed -> shipped
    2. Every item delivered, and the order is not completed or cancelled
       -> completed
    3. Otherwise the status is unchanged

Cancelled is terminal: no item change moves an order out of it.
"""

from __future__ import annotations

from collections.abc import Iterable

from orders.models import FulfillmentStatus, OrderStatus

IN_TRANSIT_STATUSES = frozenset({FulfillmentStatus.SENT_TO_HUB, FulfillmentStatus.OUT_FOR_DELIVERY})
NOT_SHIPPABLE_ORDER_STATUSES = frozenset(
    {OrderStatus.PENDING, OrderStatus.CANCELLED, OrderStatus.COMPLETED}
)
FINAL_ORDER_STATUSES = frozenset({OrderStatus.COMPLETED, OrderStatus.CANCELLED})


def derive_order_status(current: str, item_statuses: Iterable[str]) -> str:
    """
    Compute an order's status from its items.

    Args:
        current: The order's current status
        item_statuses: Fulfillment status of every item in the order

    Returns:
        The new order status (may equal current)

    Example:
        derive_order_status("paid", ["sent_to_hub", "out_for_delivery"])  # "shipped"
        derive_order_status("shipped", ["delivered", "sent_to_hub"])      # "shipped"
    """
    statuses = list(item_statuses)
    if not statuses:
        return current

    if all(s in IN_TRANSIT_STATUSES for s in statuses) and current not in NOT_SHIPPABLE_ORDER_STATUSES:
        return OrderStatus.SHIPPED

    if all(s == FulfillmentStatus.DELIVERED for s in statuses) and current not in FINAL_ORDER_STATUSES:
        return OrderStatus.COMPLETED

    return current
