"""
Audit trail and global marketplace settings.

Every admin action that changes merchant, order, return or payout state
writes an AuditLog row through toolkit.services.AuditService. Writes are
best-effort: a failed audit insert never undoes the action it describes.
"""

from __future__ import annotations

from decimal import Decimal

from django.core.serializers.json import DjangoJSONEncoder
from django.db import models

from core.models import BaseModel


class AuditLog(BaseModel):
    """
    Record of a single admin or system action.

    Fields:
        actor_id: Id of the admin/merchant who acted (empty for system jobs)
        action: Dotted action name (e.g. "order.cancelled")
        target_type: Kind of entity acted on (e.g. "order")
        target_id: Id of the entity acted on
        details: JSON context (reason, refund id, restocked items)
    """

    actor_id = models.CharField(
        max_length=64,
        blank=True,
        default="",
        db_index=True,
        help_text="Id of the acting admin or merchant; empty for system jobs",
    )
    action = models.CharField(
        max_length=100,
        db_index=True,
        help_text="Dotted action name, e.g. order.cancelled",
    )
    target_type = models.CharField(max_length=50)
    target_id = models.CharField(max_length=64, blank=True, default="")
    details = models.JSONField(default=dict, blank=True, encoder=DjangoJSONEncoder)

    class Meta:
        ordering = ["-created_at"]
        verbose_name = "Audit Log"
        verbose_name_plural = "Audit Logs"
        indexes = [
            models.Index(fields=["target_type", "target_id"]),
        ]

    def __str__(self) -> str:
        return f"AuditLog({self.action}, {self.target_type}:{self.target_id})"


class MarketplaceSettings(BaseModel):
    """
    Global marketplace configuration. A single row, id "global".

    Fields:
        fees: Marketplace fee percentage
        tax_rate: Tax percentage applied at checkout
        shipping_options: List of {"name", "description", "price", "enabled"}
    """

    GLOBAL_ID = "global"

    id = models.CharField(primary_key=True, max_length=20, default=GLOBAL_ID, editable=False)
    fees = models.DecimalField(max_digits=10, decimal_places=2, default=Decimal("5.00"))
    tax_rate = models.DecimalField(max_digits=10, decimal_places=2, default=Decimal("0.00"))
    shipping_options = models.JSONField(default=list, blank=True, encoder=DjangoJSONEncoder)

    class Meta:
        verbose_name = "Marketplace Settings"
        verbose_name_plural = "Marketplace Settings"

    def __str__(self) -> str:
        return f"MarketplaceSettings(fees={self.fees}, tax_rate={self.tax_rate})"
