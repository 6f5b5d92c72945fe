"""
URL configuration for the returns app.

All routes are prefixed with /api/v1/returns/ when included in the main URLconf.
"""

from django.urls import path

from returns import views

app_name = "returns"

urlpatterns = [
    path("", views.ReturnListCreateView.as_view(), name="return-list"),
    path(
        "<uuid:return_id>/merchant-review/",
        views.MerchantReviewView.as_view(),
        name="return-merchant-review",
    ),
    path("<uuid:return_id>/escalate/", views.EscalateReturnView.as_view(), name="return-escalate"),
    path("<uuid:return_id>/approve/", views.ApproveReturnView.as_view(), name="return-approve"),
    path("<uuid:return_id>/refund/", views.RetryRefundView.as_view(), name="return-refund"),
]
