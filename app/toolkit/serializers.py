"""
Serializers for the marketplace settings API.
"""

from __future__ import annotations

from rest_framework import serializers

from toolkit.models import MarketplaceSettings


class ShippingOptionSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=100)
    description = serializers.CharField(max_length=500, allow_blank=True, default="")
    price = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=0)
    enabled = serializers.BooleanField(default=True)


class MarketplaceSettingsSerializer(serializers.ModelSerializer):
    class Meta:
        model = MarketplaceSettings
        fields = ["fees", "tax_rate", "shipping_options", "updated_at"]
        read_only_fields = fields


class UpdateSettingsSerializer(serializers.Serializer):
    """Partial update: only the fields sent are changed."""

    fees = serializers.DecimalField(
        max_digits=10, decimal_places=2, min_value=0, max_value=100, required=False
    )
    tax_rate = serializers.DecimalField(
        max_digits=10, decimal_places=2, min_value=0, max_value=100, required=False
    )
    shipping_options = ShippingOptionSerializer(many=True, required=False)

    def validate_shipping_options(self, value):
        names = [option["name"] for option in value]
        if len(names) != len(set(names)):
            raise serializers.ValidationError("Shipping option names must be unique.")
        # Prices are stored as strings, like every other amount in the API
        return [{**option, "price": str(option["price"])} for option in value]
