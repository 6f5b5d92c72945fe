"""
Order domain models.

Models:
    Order: A customer's order, possibly spanning several merchants
    OrderItem: One product line, fulfilled by one merchant
    Inventory: Stock per product (or variant) per merchant
    Payment: The customer's charge for an order

Status:
    Order.status is derived from its items' fulfillment statuses
    (orders.status_rules.derive_order_status), except for cancellation.

Usage:
    from orders.models import Order, OrderStatus

    open_orders = Order.objects.exclude(status__in=[OrderStatus.COMPLETED, OrderStatus.CANCELLED])
"""

from __future__ import annotations

from decimal import Decimal

from django.db import models

from core.models import BaseModel


# =============================================================================
# Choices
# =============================================================================


class OrderStatus(models.TextChoices):
    PENDING = "pending", "Pending"
    PAID = "paid", "Paid"
    PROCESSING = "processing", "Processing"
    SHIPPED = "shipped", "Shipped"
    OUT_FOR_DELIVERY = "out_for_delivery", "Out for Delivery"
    DELIVERED = "delivered", "Delivered"
    COMPLETED = "completed", "Completed"
    CANCELLED = "cancelled", "Cancelled"


class FulfillmentStatus(models.TextChoices):
    """
    Per-item fulfillment states.

    Merchants move items to SENT_TO_HUB or DECLINED; admins handle the rest.
    """

    PROCESSING = "processing", "Processing"
    CONFIRMED = "confirmed", "Confirmed"
    DECLINED = "declined", "Declined"
    SENT_TO_HUB = "sent_to_hub", "Sent to Hub"
    OUT_FOR_DELIVERY = "out_for_delivery", "Out for Delivery"
    DELIVERED = "delivered", "Delivered"


class PaymentStatus(models.TextChoices):
    PENDING = "pending", "Pending"
    COMPLETED = "completed", "Completed"
    FAILED = "failed", "Failed"
    REFUNDED = "refunded", "Refunded"


# =============================================================================
# Models
# =============================================================================


class Order(BaseModel):
    """
    A customer's order.

    Fields:
        customer_id: Id of the customer in the storefront
        status: Derived from item statuses; CANCELLED only via cancel_order
        sub_total / total_amount: Amounts in major units
        cancelled_at / cancellation_reason: Set by cancel_order
    """

    customer_id = models.CharField(max_length=64, db_index=True)
    status = models.CharField(
        max_length=20,
        choices=OrderStatus.choices,
        default=OrderStatus.PENDING,
        db_index=True,
    )
    sub_total = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal("0.00"))
    total_amount = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal("0.00"))
    currency = models.CharField(max_length=3, default="NGN")
    shipping_method = models.CharField(max_length=50, blank=True, default="")

    cancelled_at = models.DateTimeField(null=True, blank=True)
    cancellation_reason = models.TextField(blank=True, default="")

    class Meta:
        ordering = ["-created_at"]

    def __str__(self) -> str:
        return f"Order({self.pk}, {self.status})"


class OrderItem(BaseModel):
    """
    One product line of an order, fulfilled by a single merchant.

    variant_id is optional; when present, inventory is tracked on the
    variant rather than the product.
    """

    order = models.ForeignKey(Order, on_delete=models.CASCADE, related_name="items")
    merchant = models.ForeignKey(
        "merchants.Merchant",
        on_delete=models.PROTECT,
        related_name="order_items",
    )
    product_id = models.CharField(max_length=64, db_index=True)
    variant_id = models.CharField(max_length=64, null=True, blank=True, db_index=True)
    quantity = models.PositiveIntegerField()
    price = models.DecimalField(max_digits=14, decimal_places=2, help_text="Unit price")
    fulfillment_status = models.CharField(
        max_length=20,
        choices=FulfillmentStatus.choices,
        default=FulfillmentStatus.PROCESSING,
        db_index=True,
    )

    class Meta:
        ordering = ["id"]

    def __str__(self) -> str:
        return f"OrderItem({self.pk}, order={self.order_id}, {self.fulfillment_status})"

    @property
    def line_total(self) -> Decimal:
        return self.price * self.quantity


class InventoryQuerySet(models.QuerySet):
    def for_item(self, item: OrderItem):
        """
        The stock row an order item draws from.

        Keyed by variant when the item has one, else by product, and always
        by the item's merchant.
        """
        if item.variant_id:
            return self.filter(variant_id=item.variant_id, merchant_id=item.merchant_id)
        return self.filter(
            product_id=item.product_id,
            variant_id__isnull=True,
            merchant_id=item.merchant_id,
        )


class Inventory(BaseModel):
    """
    Stock for a product or variant held by one merchant.

    quantity: Units on hand
    reserved_quantity: Units held by open orders

    Note:
        Only ever updated with F() expressions so concurrent restocks and
        reservations do not overwrite each other.
    """

    merchant = models.ForeignKey(
        "merchants.Merchant",
        on_delete=models.CASCADE,
        related_name="inventory",
    )
    product_id = models.CharField(max_length=64, db_index=True)
    variant_id = models.CharField(max_length=64, null=True, blank=True, db_index=True)
    quantity = models.IntegerField(default=0)
    reserved_quantity = models.IntegerField(default=0)

    objects = InventoryQuerySet.as_manager()

    class Meta:
        verbose_name_plural = "Inventory"

    def __str__(self) -> str:
        key = self.variant_id or self.product_id
        return f"Inventory({key}, qty={self.quantity}, reserved={self.reserved_quantity})"


class Payment(BaseModel):
    """
    The customer's charge for an order.

    transaction_reference is the Paystack charge reference refunds are made
    against. Only COMPLETED payments are refunded.
    """

    order = models.ForeignKey(Order, on_delete=models.CASCADE, related_name="payments")
    amount = models.DecimalField(max_digits=14, decimal_places=2)
    currency = models.CharField(max_length=3, default="NGN")
    status = models.CharField(
        max_length=20,
        choices=PaymentStatus.choices,
        default=PaymentStatus.PENDING,
        db_index=True,
    )
    transaction_reference = models.CharField(
        max_length=100,
        unique=True,
        null=True,
        blank=True,
    )

    class Meta:
        ordering = ["-created_at"]

    def __str__(self) -> str:
        return f"Payment({self.pk}, order={self.order_id}, {self.status})"
