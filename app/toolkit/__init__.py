"""
Toolkit - Cross-cutting services shared by the marketplace apps.

This app provides:
- EmailService: Template email sending, synchronous or via Celery
- AuditService / AuditLog: Best-effort audit trail of admin actions
- run_on_commit: Post-commit side effects that never fail the caller
- SettingsService / MarketplaceSettings: Global fees, tax rate and shipping options
- Helper functions: PII masking for logs

Key components:
    - services/email.py: EmailService class
    - services/audit.py: AuditService class
    - services/marketplace_settings.py: SettingsService class
    - views.py: GET/PATCH /api/v1/settings/
    - side_effects.py: run_on_commit
    - tasks.py: send_email_task
    - helpers.py: mask_email, mask_account_number

Usage:
    from toolkit.services import AuditService, EmailService
    from toolkit.side_effects import run_on_commit
"""
