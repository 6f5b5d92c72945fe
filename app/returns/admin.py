"""
Return request admin configuration.

Status changes go through ReturnService so refunds happen exactly once.
"""

from django.contrib import admin

from returns.models import ReturnRequest


@admin.register(ReturnRequest)
class ReturnRequestAdmin(admin.ModelAdmin):
    list_display = ["id", "order_item", "customer_id", "status", "refund_amount", "refunded_at"]
    list_filter = ["status"]
    search_fields = ["customer_id", "refund_reference"]
    readonly_fields = [
        "status",
        "merchant_notes",
        "merchant_reviewed_at",
        "reviewed_by",
        "admin_reviewed_at",
        "refund_reference",
        "refund_amount",
        "refunded_at",
        "created_at",
        "updated_at",
    ]
    raw_id_fields = ["order_item"]
    ordering = ["-created_at"]
