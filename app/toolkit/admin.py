"""
Toolkit admin configuration.
"""

from django.contrib import admin

from toolkit.models import AuditLog, MarketplaceSettings


@admin.register(AuditLog)
class AuditLogAdmin(admin.ModelAdmin):
    """Read-only view of the audit trail."""

    list_display = ["created_at", "action", "target_type", "target_id", "actor_id"]
    list_filter = ["action", "target_type"]
    search_fields = ["target_id", "actor_id"]
    readonly_fields = [
        "actor_id",
        "action",
        "target_type",
        "target_id",
        "details",
        "created_at",
        "updated_at",
    ]
    ordering = ["-created_at"]

    def has_add_permission(self, request):
        return False


@admin.register(MarketplaceSettings)
class MarketplaceSettingsAdmin(admin.ModelAdmin):
    list_display = ["id", "fees", "tax_rate", "updated_at"]
    readonly_fields = ["id", "created_at", "updated_at"]
