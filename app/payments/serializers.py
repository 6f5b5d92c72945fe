"""
DRF serializers for the payouts API.

Usage:
    serializer = PayoutSerializer(payout)
    data = serializer.data
"""

from __future__ import annotations

from rest_framework import serializers

from payments.models import Payout
from payments.state_machines import PayoutStatus


class PayoutSerializer(serializers.ModelSerializer):
    """Payout for API responses; everything is read-only."""

    merchant_id = serializers.UUIDField(read_only=True)
    store_name = serializers.CharField(source="merchant.store_name", read_only=True)

    class Meta:
        model = Payout
        fields = [
            "id",
            "merchant_id",
            "store_name",
            "amount",
            "currency",
            "status",
            "reference",
            "transfer_code",
            "recipient_code",
            "split_count",
            "processed_at",
            "completed_at",
            "failed_at",
            "failure_reason",
            "created_at",
        ]
        read_only_fields = fields


class PayoutListQuerySerializer(serializers.Serializer):
    """Query parameters for the payout list."""

    merchant_id = serializers.UUIDField(required=False)
    status = serializers.ChoiceField(choices=PayoutStatus.choices, required=False)
    limit = serializers.IntegerField(required=False, min_value=1, max_value=200, default=50)


class AggregateRequestSerializer(serializers.Serializer):
    """Body of the aggregate endpoint."""

    process = serializers.BooleanField(
        required=False,
        default=False,
        help_text="Also send every created payout to Paystack",
    )


class MerchantPayoutSummarySerializer(serializers.Serializer):
    merchant_id = serializers.UUIDField(source="merchant.id")
    store_name = serializers.CharField(source="merchant.store_name")
    total_payouts = serializers.DecimalField(max_digits=14, decimal_places=2)
    last_payout_at = serializers.DateTimeField(allow_null=True)
    pending_amount = serializers.DecimalField(max_digits=14, decimal_places=2)
    pending_splits = serializers.IntegerField()
    payout_counts = serializers.DictField(child=serializers.IntegerField())
    recent_payouts = PayoutSerializer(many=True)
