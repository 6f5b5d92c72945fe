"""
URL configuration for the marketplace back-office.

URL Structure:
    /admin/                                   - Django admin interface
    /health/                                  - Health check endpoint
    /api/v1/payments/                         - Payout and webhook endpoints
        payouts/                              - List payouts (GET)
        payouts/aggregate/                    - Aggregate eligible splits (POST)
        payouts/{id}/process/                 - Process a pending payout (POST)
        merchants/{id}/payout-summary/        - Merchant payout summary (GET)
        webhooks/paystack/                    - Paystack webhook endpoint (POST)
    /api/v1/orders/                           - Order fulfillment endpoints
        {id}/                                 - Order with items (GET)
        {id}/cancel/                          - Cancel order (POST)
        {id}/mark-delivered/                  - Mark every item delivered (POST)
        items/{id}/fulfillment/               - Update item fulfillment (POST)
        items/bulk-fulfillment/               - Bulk fulfillment update (POST)
    /api/v1/returns/                          - Return request endpoints
        (root)                                - List/create returns (GET, POST)
        {id}/merchant-review/                 - Merchant decision (POST)
        {id}/escalate/                        - Escalate to admin (POST)
        {id}/approve/                         - Admin approval (POST)
        {id}/refund/                          - Retry a failed refund (POST)
    /api/v1/merchants/                        - Merchant administration
        (root)                                - List merchants (GET)
        banks/                                - Banks for payout accounts (GET)
        applications/                         - List applications (GET)
        applications/{id}/approve/            - Approve (POST)
        applications/{id}/reject/             - Reject (POST)
        applications/{id}/request-info/       - Request more info (POST)
        {id}/suspend/                         - Suspend merchant (POST)
        {id}/commission-tier/                 - Update commission tier (POST)
        {id}/bank-details/                    - Register payout account (POST)
    /api/v1/settings/                         - Marketplace settings (GET, PATCH)

For more information, see:
https://docs.djangoproject.com/en/5.2/topics/http/urls/
"""

from django.contrib import admin
from django.urls import include, path

from core.views import health_check

# =============================================================================
# API v1 Routes
# =============================================================================
api_v1_patterns = [
    path("payments/", include("payments.urls")),
    path("orders/", include("orders.urls")),
    path("returns/", include("returns.urls")),
    path("merchants/", include("merchants.urls")),
    path("settings/", include("toolkit.urls")),
]

urlpatterns = [
    path("admin/", admin.site.urls),
    # Health check (Docker, Kubernetes, load balancers)
    path("health/", health_check, name="health_check"),
    path("api/v1/", include(api_v1_patterns)),
]

# =============================================================================
# Admin Site Customization
# =============================================================================
admin.site.site_header = "Marketplace Back-Office"
admin.site.site_title = "Back-Office Admin"
admin.site.index_title = "Merchants, orders and payouts"
