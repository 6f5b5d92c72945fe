"""
Payment admin configuration.

Payouts, splits and webhook events are read-only in the admin: their state
only changes through the payout services and Paystack webhooks.
"""

from django.contrib import admin

from payments.models import OrderMerchantSplit, Payout, WebhookEvent


class ReadOnlyAdminMixin:
    def has_add_permission(self, request) -> bool:
        return False

    def has_delete_permission(self, request, obj=None) -> bool:
        return False


class OrderMerchantSplitInline(admin.TabularInline):
    model = OrderMerchantSplit
    fields = ["order", "amount_due", "commission_amount", "status", "hold_until", "paid_at"]
    readonly_fields = fields
    extra = 0
    can_delete = False
    show_change_link = True


@admin.register(Payout)
class PayoutAdmin(ReadOnlyAdminMixin, admin.ModelAdmin):
    """
    Admin configuration for Payout.

    Provides visibility into payout status and history.
    """

    list_display = [
        "id",
        "merchant",
        "amount_display",
        "status",
        "transfer_code",
        "split_count",
        "completed_at",
        "created_at",
    ]
    list_filter = ["status", "currency", "created_at"]
    search_fields = ["id", "reference", "transfer_code", "merchant__store_name"]
    readonly_fields = [
        "id",
        "merchant",
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
        "updated_at",
    ]
    date_hierarchy = "created_at"
    ordering = ["-created_at"]
    inlines = [OrderMerchantSplitInline]

    fieldsets = (
        (None, {"fields": ("id", "merchant", "status")}),
        ("Amount", {"fields": ("amount", "currency", "split_count")}),
        ("Paystack Details", {"fields": ("reference", "transfer_code", "recipient_code")}),
        ("Status Timestamps", {"fields": ("processed_at", "completed_at", "failed_at")}),
        ("Failure Info", {"fields": ("failure_reason",), "classes": ("collapse",)}),
        ("Timestamps", {"fields": ("created_at", "updated_at")}),
    )

    @admin.display(description="Amount")
    def amount_display(self, obj: Payout) -> str:
        return f"{obj.amount} {obj.currency}"


@admin.register(OrderMerchantSplit)
class OrderMerchantSplitAdmin(ReadOnlyAdminMixin, admin.ModelAdmin):
    list_display = ["id", "order", "merchant", "amount_due", "status", "hold_until", "payout"]
    list_filter = ["status"]
    search_fields = ["id", "merchant__store_name", "payout__reference"]
    readonly_fields = [
        "id",
        "order",
        "merchant",
        "amount_due",
        "commission_amount",
        "status",
        "hold_until",
        "payout",
        "paid_at",
        "created_at",
        "updated_at",
    ]
    ordering = ["-created_at"]


@admin.register(WebhookEvent)
class WebhookEventAdmin(ReadOnlyAdminMixin, admin.ModelAdmin):
    """
    Admin configuration for WebhookEvent.

    Webhook events are immutable once received.
    """

    list_display = [
        "id",
        "event_type",
        "status",
        "retry_count",
        "processed_at",
        "created_at",
    ]
    list_filter = ["status", "event_type", "created_at"]
    search_fields = ["id", "idempotency_key", "event_type"]
    readonly_fields = [
        "id",
        "idempotency_key",
        "event_type",
        "payload",
        "status",
        "processed_at",
        "retry_count",
        "error_message",
        "created_at",
        "updated_at",
    ]
    date_hierarchy = "created_at"
    ordering = ["-created_at"]

    fieldsets = (
        (None, {"fields": ("id", "idempotency_key", "event_type", "status")}),
        ("Processing", {"fields": ("processed_at", "retry_count")}),
        ("Error Info", {"fields": ("error_message",), "classes": ("collapse",)}),
        ("Payload", {"fields": ("payload",), "classes": ("collapse",)}),
        ("Timestamps", {"fields": ("created_at", "updated_at")}),
    )
