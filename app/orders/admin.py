"""
Order admin configuration.

Statuses and stock are changed through FulfillmentService (API) so the order
status cascade and inventory stay consistent; the admin only displays them.
"""

from django.contrib import admin

from orders.models import Inventory, Order, OrderItem, Payment


class OrderItemInline(admin.TabularInline):
    model = OrderItem
    extra = 0
    can_delete = False
    readonly_fields = [
        "merchant",
        "product_id",
        "variant_id",
        "quantity",
        "price",
        "fulfillment_status",
    ]


class PaymentInline(admin.TabularInline):
    model = Payment
    extra = 0
    can_delete = False
    readonly_fields = ["amount", "currency", "status", "transaction_reference", "created_at"]


@admin.register(Order)
class OrderAdmin(admin.ModelAdmin):
    list_display = ["id", "customer_id", "status", "total_amount", "currency", "created_at"]
    list_filter = ["status", "currency"]
    search_fields = ["customer_id"]
    readonly_fields = ["status", "cancelled_at", "cancellation_reason", "created_at", "updated_at"]
    inlines = [OrderItemInline, PaymentInline]
    ordering = ["-created_at"]


@admin.register(Inventory)
class InventoryAdmin(admin.ModelAdmin):
    list_display = ["product_id", "variant_id", "merchant", "quantity", "reserved_quantity"]
    search_fields = ["product_id", "variant_id"]
    readonly_fields = ["quantity", "reserved_quantity", "updated_at"]
    list_select_related = ["merchant"]
