"""
Order fulfillment and cancellation.

FulfillmentService moves order items through their fulfillment statuses and
keeps the order status in step with them (orders.status_rules). It also
cancels orders: restocking every item and refunding the customer's charge.

Role Rules:
    merchant: may set sent_to_hub or declined, on their own items only
    admin: may set processing, confirmed, declined, out_for_delivery or
           delivered; never sent_to_hub

Inventory:
    declined item  -> reserved_quantity -= quantity
    cancelled order -> quantity += q, reserved_quantity -= q for every item

Usage:
    from orders.services import FulfillmentService

    item = FulfillmentService.update_order_item_fulfillment(
        item_id, FulfillmentStatus.SENT_TO_HUB, actor_id=str(merchant.id), role="merchant"
    )

    result = FulfillmentService.cancel_order(order_id, actor_id=admin_id, reason="Out of stock")
    if result.refund_id is None:
        # Refund failed or there was nothing to refund; handle manually
        ...
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from django.db.models import F
from django.utils import timezone

from core.exceptions import BaseApplicationError, PermissionDeniedError, ValidationError
from core.services import BaseService
from orders.exceptions import InvalidOrderStateError, OrderItemNotFoundError, OrderNotFoundError
from orders.models import (
    FulfillmentStatus,
    Inventory,
    Order,
    OrderItem,
    OrderStatus,
    PaymentStatus,
)
from orders.status_rules import derive_order_status
from payments.adapters import GatewayAdapterMixin
from toolkit.services import AuditService

if TYPE_CHECKING:
    from collections.abc import Iterable


ROLE_MERCHANT = "merchant"
ROLE_ADMIN = "admin"

MERCHANT_SETTABLE_STATUSES = frozenset({FulfillmentStatus.SENT_TO_HUB, FulfillmentStatus.DECLINED})
ADMIN_SETTABLE_STATUSES = frozenset(
    {
        FulfillmentStatus.PROCESSING,
        FulfillmentStatus.CONFIRMED,
        FulfillmentStatus.DECLINED,
        FulfillmentStatus.OUT_FOR_DELIVERY,
        FulfillmentStatus.DELIVERED,
    }
)
SETTABLE_STATUSES = {
    ROLE_MERCHANT: MERCHANT_SETTABLE_STATUSES,
    ROLE_ADMIN: ADMIN_SETTABLE_STATUSES,
}

NON_CANCELLABLE_STATUSES = frozenset({OrderStatus.COMPLETED, OrderStatus.PAID, OrderStatus.CANCELLED})


@dataclass
class CancellationResult:
    """
    Outcome of cancel_order.

    Attributes:
        order: The cancelled order
        refund_id: Gateway refund id, or None when no refund was made
        items_restocked: Number of order items returned to stock
    """

    order: Order
    refund_id: str | None
    items_restocked: int


class FulfillmentService(GatewayAdapterMixin, BaseService):
    """
    Item fulfillment updates, order status cascade and order cancellation.

    Error Handling:
        - OrderNotFoundError / OrderItemNotFoundError: Unknown id (404)
        - PermissionDeniedError: Role may not set that status, or a merchant
          updating another merchant's item (403)
        - ValidationError: Unknown fulfillment status (400)
        - InvalidOrderStateError: Order cannot be cancelled or delivered (400)
    """

    # =========================================================================
    # Fulfillment
    # =========================================================================

    @classmethod
    def update_order_item_fulfillment(
        cls,
        item_id,
        new_status: str,
        actor_id,
        role: str,
    ) -> OrderItem:
        """
        Set one item's fulfillment status and re-derive its order's status.

        Args:
            item_id: OrderItem id
            new_status: Target FulfillmentStatus value
            actor_id: Merchant id (role "merchant") or admin id (role "admin")
            role: "merchant" or "admin"

        Returns:
            The updated OrderItem
        """
        logger = cls.get_logger()

        if new_status not in FulfillmentStatus.values:
            raise ValidationError(
                f"Invalid fulfillment status: {new_status}",
                details={"status": new_status},
            )

        with cls.atomic():
            item = OrderItem.objects.select_for_update().filter(id=item_id).first()
            if item is None:
                raise OrderItemNotFoundError(f"Order item {item_id} not found")

            cls._check_permission(item, new_status, actor_id, role)

            previous_status = item.fulfillment_status
            item.fulfillment_status = new_status
            item.save(update_fields=["fulfillment_status", "updated_at"])

            if new_status == FulfillmentStatus.DECLINED and previous_status != FulfillmentStatus.DECLINED:
                cls._release_reservation(item)

            cls._sync_order_status(item.order_id)

        logger.info(
            f"Order item {item.id} updated to {new_status} by {role} {actor_id}",
            extra={
                "order_item_id": item.id,
                "order_id": item.order_id,
                "previous_status": previous_status,
            },
        )
        return item

    @classmethod
    def bulk_update_fulfillment(
        cls,
        item_ids: Iterable,
        new_status: str,
        actor_id,
        role: str,
    ) -> list[OrderItem]:
        """
        Apply update_order_item_fulfillment to every item, all or nothing.

        The first failure rolls back the items already updated.
        """
        with cls.atomic():
            items = [
                cls.update_order_item_fulfillment(item_id, new_status, actor_id, role)
                for item_id in item_ids
            ]

        cls.get_logger().info(
            f"Bulk updated {len(items)} order items to {new_status}",
            extra={"item_count": len(items), "role": role},
        )
        return items

    @classmethod
    def mark_order_delivered(cls, order_id, admin_id) -> Order:
        """
        Mark every item of the order delivered, completing the order.

        Raises:
            OrderNotFoundError: Unknown order
            InvalidOrderStateError: The order is cancelled
        """
        with cls.atomic():
            order = Order.objects.select_for_update().filter(id=order_id).first()
            if order is None:
                raise OrderNotFoundError(f"Order {order_id} not found")
            if order.status == OrderStatus.CANCELLED:
                raise InvalidOrderStateError(
                    f"Cannot deliver order {order.id}: order is cancelled",
                    details={"order_id": order.id, "status": order.status},
                )

            item_ids = list(order.items.values_list("id", flat=True))
            cls.bulk_update_fulfillment(item_ids, FulfillmentStatus.DELIVERED, admin_id, ROLE_ADMIN)

        return Order.objects.get(id=order.id)

    @classmethod
    def get_order_with_items(cls, order_id) -> Order:
        """The order with its items and payments prefetched."""
        order = Order.objects.prefetch_related("items", "payments").filter(id=order_id).first()
        if order is None:
            raise OrderNotFoundError(f"Order {order_id} not found")
        return order

    @classmethod
    def _check_permission(cls, item: OrderItem, new_status: str, actor_id, role: str) -> None:
        allowed = SETTABLE_STATUSES.get(role)
        if allowed is None:
            raise PermissionDeniedError(f"Unknown role: {role}")

        if new_status not in allowed:
            raise PermissionDeniedError(
                f"{role.capitalize()}s cannot set items to {new_status}",
                details={"role": role, "status": new_status},
            )

        if role == ROLE_MERCHANT and str(item.merchant_id) != str(actor_id):
            raise PermissionDeniedError(
                "Merchants can only update their own items",
                details={"order_item_id": item.id},
            )

    @classmethod
    def _release_reservation(cls, item: OrderItem) -> None:
        updated = Inventory.objects.for_item(item).update(
            reserved_quantity=F("reserved_quantity") - item.quantity,
            updated_at=timezone.now(),
        )
        if not updated:
            cls.get_logger().warning(
                f"No inventory row for declined item {item.id}",
                extra={"order_item_id": item.id, "product_id": item.product_id},
            )

    @classmethod
    def _sync_order_status(cls, order_id) -> Order:
        """Recompute the order status from its items, saving it if it changed."""
        order = Order.objects.select_for_update().get(id=order_id)
        item_statuses = order.items.values_list("fulfillment_status", flat=True)
        new_status = derive_order_status(order.status, item_statuses)

        if new_status != order.status:
            cls.get_logger().info(
                f"Order {order.id} status updated: {order.status} -> {new_status}",
                extra={"order_id": order.id},
            )
            order.status = new_status
            order.save(update_fields=["status", "updated_at"])

        return order

    # =========================================================================
    # Cancellation
    # =========================================================================

    @classmethod
    def cancel_order(cls, order_id, actor_id, reason: str = "") -> CancellationResult:
        """
        Cancel an order, restock its items and refund the customer.

        Runs in one transaction. A refund failure is logged and does not stop
        the cancellation; the payment stays COMPLETED for a manual refund.

        Args:
            order_id: Order id
            actor_id: Admin performing the cancellation
            reason: Shown in the audit trail

        Returns:
            CancellationResult

        Raises:
            OrderNotFoundError: Unknown order
            InvalidOrderStateError: Order is completed, paid or cancelled
        """
        logger = cls.get_logger()
        adapter = cls.get_gateway_adapter()

        with cls.atomic():
            order = Order.objects.select_for_update().filter(id=order_id).first()
            if order is None:
                raise OrderNotFoundError(f"Order {order_id} not found")

            if order.status in NON_CANCELLABLE_STATUSES:
                raise InvalidOrderStateError(
                    f"Cannot cancel order {order.id}: order is already {order.status}",
                    details={"order_id": order.id, "status": order.status},
                )

            items = list(order.items.all())
            logger.info(
                f"Cancelling order {order.id} with {len(items)} items",
                extra={"order_id": order.id, "actor_id": str(actor_id)},
            )

            for item in items:
                cls._restock(item)

            refund_id = cls._refund_order(order, reason, adapter)

            order.status = OrderStatus.CANCELLED
            order.cancelled_at = timezone.now()
            order.cancellation_reason = reason
            order.save(update_fields=["status", "cancelled_at", "cancellation_reason", "updated_at"])

            details = {
                "reason": reason,
                "items_restocked": len(items),
                "refund_amount": str(order.total_amount),
            }
            if refund_id is not None:
                details["refund_id"] = refund_id
            AuditService.record(
                action="order.cancelled",
                target_type="order",
                target_id=order.id,
                actor_id=actor_id,
                details=details,
            )

        logger.info(
            f"Order {order.id} cancelled, refund {'processed' if refund_id else 'pending'}",
            extra={"order_id": order.id, "refund_id": refund_id},
        )
        return CancellationResult(order=order, refund_id=refund_id, items_restocked=len(items))

    @classmethod
    def _restock(cls, item: OrderItem) -> None:
        updated = Inventory.objects.for_item(item).update(
            quantity=F("quantity") + item.quantity,
            reserved_quantity=F("reserved_quantity") - item.quantity,
            updated_at=timezone.now(),
        )
        if not updated:
            cls.get_logger().warning(
                f"No inventory row to restock for order item {item.id}",
                extra={"order_item_id": item.id, "product_id": item.product_id},
            )

    @classmethod
    def _refund_order(cls, order: Order, reason: str, adapter) -> str | None:
        """Refund the order total against its completed payment, if any."""
        logger = cls.get_logger()

        payment = (
            order.payments.select_for_update()
            .filter(status=PaymentStatus.COMPLETED)
            .first()
        )
        if payment is None or not payment.transaction_reference:
            logger.info(f"No completed payment to refund for order {order.id}")
            return None

        try:
            refund = adapter.create_refund(
                payment.transaction_reference,
                amount=order.total_amount,
                merchant_note=f"Order {order.id} cancelled: {reason}" if reason else "",
            )
        except BaseApplicationError as e:
            logger.error(
                f"Failed to process refund for order {order.id}: {e.message}",
                extra={
                    "order_id": order.id,
                    "payment_id": payment.id,
                    "error_code": e.error_code,
                },
            )
            return None

        payment.status = PaymentStatus.REFUNDED
        payment.save(update_fields=["status", "updated_at"])

        logger.info(
            f"Refund initiated for order {order.id}: {order.total_amount} (refund {refund.id})",
            extra={"order_id": order.id, "refund_id": refund.id},
        )
        return refund.id
