"""
Service classes for toolkit app.

This package contains service classes for common operations:
- EmailService: Email sending with template support
- AuditService: Best-effort audit trail writes
- SettingsService: Global marketplace settings

Usage:
    from toolkit.services import AuditService, EmailService, SettingsService
"""

from toolkit.services.audit import AuditService
from toolkit.services.email import EmailService
from toolkit.services.marketplace_settings import SettingsService

__all__ = ["AuditService", "EmailService", "SettingsService"]
