"""
URL configuration for the orders app.

All routes are prefixed with /api/v1/orders/ when included in the main URLconf.
"""

from django.urls import path

from orders import views

app_name = "orders"

urlpatterns = [
    path("<int:order_id>/", views.OrderDetailView.as_view(), name="order-detail"),
    path("<int:order_id>/cancel/", views.CancelOrderView.as_view(), name="order-cancel"),
    path(
        "<int:order_id>/mark-delivered/",
        views.MarkOrderDeliveredView.as_view(),
        name="order-mark-delivered",
    ),
    path(
        "items/<int:item_id>/fulfillment/",
        views.ItemFulfillmentView.as_view(),
        name="item-fulfillment",
    ),
    path(
        "items/bulk-fulfillment/",
        views.BulkFulfillmentView.as_view(),
        name="item-bulk-fulfillment",
    ),
]
