"""
Serializers for the returns API.
"""

from __future__ import annotations

from rest_framework import serializers

from returns.models import ReturnRequest, ReturnStatus
from returns.services import MERCHANT_DECISIONS


class ReturnRequestSerializer(serializers.ModelSerializer):
    merchant_id = serializers.UUIDField(source="order_item.merchant_id", read_only=True)

    class Meta:
        model = ReturnRequest
        fields = [
            "id",
            "order_item_id",
            "merchant_id",
            "customer_id",
            "reason",
            "description",
            "status",
            "merchant_notes",
            "merchant_reviewed_at",
            "admin_notes",
            "reviewed_by",
            "admin_reviewed_at",
            "refund_reference",
            "refund_amount",
            "refunded_at",
            "created_at",
        ]
        read_only_fields = fields


class CreateReturnSerializer(serializers.Serializer):
    order_item_id = serializers.IntegerField(min_value=1)
    customer_id = serializers.CharField(max_length=64)
    reason = serializers.CharField(max_length=255)
    description = serializers.CharField(required=False, allow_blank=True, default="")


class ReturnListQuerySerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=ReturnStatus.choices, required=False)
    merchant_id = serializers.UUIDField(required=False)
    limit = serializers.IntegerField(required=False, min_value=1, max_value=200, default=50)


class MerchantReviewSerializer(serializers.Serializer):
    merchant_id = serializers.UUIDField()
    decision = serializers.ChoiceField(choices=MERCHANT_DECISIONS)
    notes = serializers.CharField(required=False, allow_blank=True, default="")


class EscalateReturnSerializer(serializers.Serializer):
    notes = serializers.CharField(required=False, allow_blank=True, default="")
