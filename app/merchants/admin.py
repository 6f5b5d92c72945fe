"""
Merchant admin configuration.

Review decisions go through MerchantService (API), so the admin shows
applications and merchants read-mostly.
"""

from django.contrib import admin

from merchants.models import Merchant, MerchantApplication, MerchantBankDetails


@admin.register(MerchantApplication)
class MerchantApplicationAdmin(admin.ModelAdmin):
    list_display = ["store_name", "work_email", "status", "reviewed_at", "created_at"]
    list_filter = ["status"]
    search_fields = ["store_name", "work_email", "personal_email"]
    readonly_fields = ["id", "status", "reviewed_by", "reviewed_at", "created_at", "updated_at"]
    ordering = ["-created_at"]


class MerchantBankDetailsInline(admin.StackedInline):
    model = MerchantBankDetails
    extra = 0
    readonly_fields = ["recipient_code", "created_at", "updated_at"]


@admin.register(Merchant)
class MerchantAdmin(admin.ModelAdmin):
    """
    Admin configuration for Merchant.

    total_payouts and last_payout_at are maintained by payout settlement
    and are never edited here.
    """

    list_display = [
        "store_name",
        "status",
        "commission_tier",
        "commission_rate",
        "total_payouts",
        "last_payout_at",
    ]
    list_filter = ["status", "commission_tier"]
    search_fields = ["store_name", "work_email"]
    readonly_fields = ["id", "total_payouts", "last_payout_at", "created_at", "updated_at"]
    inlines = [MerchantBankDetailsInline]
