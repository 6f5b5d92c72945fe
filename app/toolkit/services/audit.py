"""
Audit trail service.

AuditService.record writes an AuditLog row inside a savepoint. If the insert
fails, the savepoint is rolled back and the error is logged, leaving the
enclosing transaction (the action being audited) intact.

Usage:
    from toolkit.services import AuditService

    AuditService.record(
        actor_id=admin_id,
        action="order.cancelled",
        target_type="order",
        target_id=order.id,
        details={"items_restocked": 3, "reason": reason},
    )
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from django.db import DatabaseError, transaction

from core.services import BaseService
from toolkit.models import AuditLog

if TYPE_CHECKING:
    from typing import Any


class AuditService(BaseService):
    """Best-effort audit trail writes."""

    @classmethod
    def record(
        cls,
        action: str,
        target_type: str,
        target_id: Any = "",
        actor_id: Any = "",
        details: dict[str, Any] | None = None,
    ) -> AuditLog | None:
        """
        Write one audit record.

        Returns:
            The AuditLog, or None when the write failed
        """
        try:
            with transaction.atomic():
                return AuditLog.objects.create(
                    actor_id=str(actor_id or ""),
                    action=action,
                    target_type=target_type,
                    target_id=str(target_id or ""),
                    details=details or {},
                )
        except DatabaseError:
            cls.get_logger().error(
                f"Audit write failed for {action}",
                extra={"target_type": target_type, "target_id": str(target_id)},
                exc_info=True,
            )
            return None
