"""
Merchants app configuration.
"""

from django.apps import AppConfig


class MerchantsConfig(AppConfig):
    """Configuration for the merchants application."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "merchants"
    verbose_name = "Merchants"
