"""
URL configuration for the merchants app.

All routes are prefixed with /api/v1/merchants/ when included in the main URLconf.
"""

from django.urls import path

from merchants import views

app_name = "merchants"

urlpatterns = [
    path("", views.MerchantListView.as_view(), name="merchant-list"),
    path("banks/", views.BankListView.as_view(), name="bank-list"),
    # Applications
    path("applications/", views.MerchantApplicationListView.as_view(), name="application-list"),
    path(
        "applications/<uuid:application_id>/approve/",
        views.ApproveApplicationView.as_view(),
        name="application-approve",
    ),
    path(
        "applications/<uuid:application_id>/reject/",
        views.RejectApplicationView.as_view(),
        name="application-reject",
    ),
    path(
        "applications/<uuid:application_id>/request-info/",
        views.RequestMoreInfoView.as_view(),
        name="application-request-info",
    ),
    # Merchant accounts
    path("<uuid:merchant_id>/suspend/", views.SuspendMerchantView.as_view(), name="merchant-suspend"),
    path(
        "<uuid:merchant_id>/commission-tier/",
        views.CommissionTierView.as_view(),
        name="merchant-commission-tier",
    ),
    path(
        "<uuid:merchant_id>/bank-details/",
        views.BankDetailsView.as_view(),
        name="merchant-bank-details",
    ),
]
