"""
Order-specific exceptions.

Usage:
    from orders.exceptions import InvalidOrderStateError

    if order.status in NON_CANCELLABLE_STATUSES:
        raise InvalidOrderStateError(
            f"Cannot cancel order {order.id}: order is already {order.status}",
            details={"order_id": order.id, "status": order.status},
        )
"""

from core.exceptions import InvalidStateError, NotFoundError


class OrderNotFoundError(NotFoundError):
    default_error_code: str = "ORDER_NOT_FOUND"


class OrderItemNotFoundError(NotFoundError):
    default_error_code: str = "ORDER_ITEM_NOT_FOUND"


class InvalidOrderStateError(InvalidStateError):
    """Raised when an order's status does not allow the requested action."""

    default_error_code: str = "INVALID_ORDER_STATE"
