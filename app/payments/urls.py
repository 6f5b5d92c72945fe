"""
URL configuration for the payments app.

Routes:
    - GET /payouts/ - List payouts
    - POST /payouts/aggregate/ - Aggregate eligible splits
    - POST /payouts/<id>/process/ - Process a pending payout
    - GET /merchants/<id>/payout-summary/ - Merchant payout summary
    - POST /webhooks/paystack/ - Paystack webhook endpoint

All routes are prefixed with /api/v1/payments/ when included in the main URLconf.
"""

from django.urls import path

from payments import views
from payments.webhooks.views import paystack_webhook

app_name = "payments"

urlpatterns = [
    path("payouts/", views.PayoutListView.as_view(), name="payout-list"),
    path("payouts/aggregate/", views.AggregatePayoutsView.as_view(), name="payout-aggregate"),
    path(
        "payouts/<uuid:payout_id>/process/",
        views.ProcessPayoutView.as_view(),
        name="payout-process",
    ),
    path(
        "merchants/<uuid:merchant_id>/payout-summary/",
        views.MerchantPayoutSummaryView.as_view(),
        name="merchant-payout-summary",
    ),
    # Webhook endpoints
    path("webhooks/paystack/", paystack_webhook, name="paystack-webhook"),
]
