"""
Global marketplace settings.

The settings row is created with its defaults on first read. Every update is
audited with the submitted values.

Usage:
    from toolkit.services import SettingsService

    SettingsService.update_settings({"tax_rate": Decimal("7.50")}, admin_id=str(request.user.pk))
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from core.exceptions import ValidationError
from core.services import BaseService
from toolkit.models import MarketplaceSettings
from toolkit.services.audit import AuditService

if TYPE_CHECKING:
    from typing import Any

UPDATABLE_FIELDS = ("fees", "tax_rate", "shipping_options")


class SettingsService(BaseService):
    """Read and update the marketplace settings row."""

    @classmethod
    def get_settings(cls) -> MarketplaceSettings:
        settings_row, created = MarketplaceSettings.objects.get_or_create(
            id=MarketplaceSettings.GLOBAL_ID
        )
        if created:
            cls.get_logger().info("Created marketplace settings with defaults")
        return settings_row

    @classmethod
    def update_settings(cls, data: dict[str, Any], admin_id: str) -> MarketplaceSettings:
        """
        Apply a partial update to the settings.

        Raises:
            ValidationError: No fields given, or a field that cannot be updated
        """
        unknown = sorted(set(data) - set(UPDATABLE_FIELDS))
        if unknown:
            raise ValidationError(
                f"Unknown settings: {', '.join(unknown)}",
                details={"fields": unknown},
            )
        if not data:
            raise ValidationError("No settings to update")

        with cls.atomic():
            cls.get_settings()
            settings_row = MarketplaceSettings.objects.select_for_update().get(
                id=MarketplaceSettings.GLOBAL_ID
            )
            for field_name, value in data.items():
                setattr(settings_row, field_name, value)
            settings_row.save(update_fields=[*data, "updated_at"])

            AuditService.record(
                action="settings.updated",
                target_type="settings",
                target_id=MarketplaceSettings.GLOBAL_ID,
                actor_id=admin_id,
                details=data,
            )

        cls.get_logger().info(
            "Updated marketplace settings",
            extra={"fields": list(data), "admin_id": str(admin_id)},
        )
        return settings_row
