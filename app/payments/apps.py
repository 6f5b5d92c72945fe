"""
Payments app configuration.

This app provides merchant payout infrastructure:
- Payout aggregation and processing through Paystack
- Transfer webhook reconciliation
"""

from django.apps import AppConfig


class PaymentsConfig(AppConfig):
    """Configuration for the payments application."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "payments"
    verbose_name = "Payments"
