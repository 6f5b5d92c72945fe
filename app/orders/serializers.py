"""
Serializers for the orders API.

Read serializers:
    OrderItemSerializer, PaymentSerializer, OrderDetailSerializer

Request serializers:
    FulfillmentUpdateSerializer: single item
    BulkFulfillmentSerializer: several items
    CancelOrderSerializer: cancellation reason
"""

from __future__ import annotations

from rest_framework import serializers

from orders.models import FulfillmentStatus, Order, OrderItem, Payment


class OrderItemSerializer(serializers.ModelSerializer):
    merchant_id = serializers.UUIDField(read_only=True)
    line_total = serializers.DecimalField(max_digits=14, decimal_places=2, read_only=True)

    class Meta:
        model = OrderItem
        fields = [
            "id",
            "order_id",
            "merchant_id",
            "product_id",
            "variant_id",
            "quantity",
            "price",
            "line_total",
            "fulfillment_status",
            "updated_at",
        ]
        read_only_fields = fields


class PaymentSerializer(serializers.ModelSerializer):
    class Meta:
        model = Payment
        fields = ["id", "amount", "currency", "status", "transaction_reference", "created_at"]
        read_only_fields = fields


class OrderDetailSerializer(serializers.ModelSerializer):
    """Order with its items and payments."""

    items = OrderItemSerializer(many=True, read_only=True)
    payments = PaymentSerializer(many=True, read_only=True)

    class Meta:
        model = Order
        fields = [
            "id",
            "customer_id",
            "status",
            "sub_total",
            "total_amount",
            "currency",
            "shipping_method",
            "cancelled_at",
            "cancellation_reason",
            "items",
            "payments",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


class FulfillmentUpdateSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=FulfillmentStatus.choices)


class BulkFulfillmentSerializer(serializers.Serializer):
    item_ids = serializers.ListField(
        child=serializers.IntegerField(min_value=1),
        allow_empty=False,
    )
    status = serializers.ChoiceField(choices=FulfillmentStatus.choices)


class CancelOrderSerializer(serializers.Serializer):
    reason = serializers.CharField(required=False, allow_blank=True, default="", max_length=500)
