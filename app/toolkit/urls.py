"""
URL configuration for the marketplace settings.

All routes are prefixed with /api/v1/settings/ when included in the main URLconf.
"""

from django.urls import path

from toolkit import views

app_name = "toolkit"

urlpatterns = [
    path("", views.MarketplaceSettingsView.as_view(), name="marketplace-settings"),
]
