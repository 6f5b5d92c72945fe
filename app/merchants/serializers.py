"""
Serializers for merchant API.

Read serializers:
    MerchantApplicationSerializer, MerchantSerializer, MerchantBankDetailsSerializer

Request serializers:
    ReviewReasonSerializer: reject / suspend
    MoreInfoRequestSerializer: request more information
    CommissionTierSerializer: change tier
    BankDetailsRequestSerializer: register payout account
"""

from __future__ import annotations

from rest_framework import serializers

from merchants.models import CommissionTier, Merchant, MerchantApplication, MerchantBankDetails
from payments.adapters.paystack_adapter import SUPPORTED_BANK_COUNTRIES
from toolkit.helpers import mask_account_number


class MerchantApplicationSerializer(serializers.ModelSerializer):
    class Meta:
        model = MerchantApplication
        fields = [
            "id",
            "store_name",
            "contact_name",
            "personal_email",
            "work_email",
            "phone_number",
            "business_type",
            "business_registration_number",
            "business_description",
            "website",
            "status",
            "reviewed_by",
            "reviewed_at",
            "rejection_reason",
            "created_at",
        ]
        read_only_fields = fields


class MerchantBankDetailsSerializer(serializers.ModelSerializer):
    """Bank details with the account number masked."""

    account_number = serializers.SerializerMethodField()

    class Meta:
        model = MerchantBankDetails
        fields = [
            "bank_name",
            "bank_code",
            "account_number",
            "account_name",
            "recipient_code",
            "currency",
            "updated_at",
        ]
        read_only_fields = fields

    def get_account_number(self, obj: MerchantBankDetails) -> str:
        return mask_account_number(obj.account_number)


class MerchantSerializer(serializers.ModelSerializer):
    has_recipient = serializers.SerializerMethodField()

    class Meta:
        model = Merchant
        fields = [
            "id",
            "store_name",
            "contact_name",
            "work_email",
            "phone_number",
            "status",
            "suspended_at",
            "suspension_reason",
            "commission_tier",
            "commission_rate",
            "total_payouts",
            "last_payout_at",
            "has_recipient",
            "created_at",
        ]
        read_only_fields = fields

    def get_has_recipient(self, obj: Merchant) -> bool:
        return bool(obj.recipient_code)


class ReviewReasonSerializer(serializers.Serializer):
    reason = serializers.CharField(max_length=2000)


class MoreInfoRequestSerializer(serializers.Serializer):
    message = serializers.CharField(max_length=2000)


class CommissionTierSerializer(serializers.Serializer):
    tier = serializers.ChoiceField(choices=CommissionTier.choices)


class BankListQuerySerializer(serializers.Serializer):
    country = serializers.ChoiceField(choices=SUPPORTED_BANK_COUNTRIES, required=False)


class BankDetailsRequestSerializer(serializers.Serializer):
    bank_code = serializers.RegexField(r"^\d{3}$", error_messages={"invalid": "Bank code must be 3 digits."})
    account_number = serializers.RegexField(
        r"^\d{10}$", error_messages={"invalid": "Account number must be 10 digits."}
    )
