"""
Tests for the orders admin API.
"""

from django.urls import reverse

from orders.models import FulfillmentStatus, Order, OrderItem, OrderStatus
from orders.tests.factories import OrderFactory
from payments.exceptions import PaystackTimeoutError


class TestOrderDetailView:
    def test_returns_items_and_payments(self, admin_api_client, order, item, variant_item, payment):
        response = admin_api_client.get(reverse("orders:order-detail", args=[order.id]))

        assert response.status_code == 200
        assert [i["id"] for i in response.data["items"]] == [item.id, variant_item.id]
        assert response.data["items"][0]["line_total"] == "10000.00"
        assert response.data["payments"][0]["transaction_reference"] == "txn_order_001"

    def test_unknown_order_is_404(self, admin_api_client, db):
        response = admin_api_client.get(reverse("orders:order-detail", args=[999999]))

        assert response.status_code == 404
        assert response.data["error_code"] == "ORDER_NOT_FOUND"

    def test_requires_admin(self, api_client, order):
        response = api_client.get(reverse("orders:order-detail", args=[order.id]))

        assert response.status_code in (401, 403)


class TestCancelOrderView:
    def test_cancels(self, admin_api_client, order, item, payment, fake_gateway):
        response = admin_api_client.post(
            reverse("orders:order-cancel", args=[order.id]),
            {"reason": "Customer request"},
            format="json",
        )

        assert response.status_code == 200
        assert response.data["order"]["status"] == OrderStatus.CANCELLED
        assert response.data["refund_id"] == "9000"
        assert response.data["items_restocked"] == 1

    def test_refund_failure_still_cancels(self, admin_api_client, order, item, payment, fake_gateway):
        fake_gateway.refund_error = PaystackTimeoutError("timed out")

        response = admin_api_client.post(reverse("orders:order-cancel", args=[order.id]), {}, format="json")

        assert response.status_code == 200
        assert response.data["refund_id"] is None
        assert Order.objects.get(id=order.id).status == OrderStatus.CANCELLED

    def test_completed_order_is_400(self, admin_api_client, fake_gateway, db):
        order = OrderFactory(status=OrderStatus.COMPLETED)

        response = admin_api_client.post(reverse("orders:order-cancel", args=[order.id]), {}, format="json")

        assert response.status_code == 400
        assert response.data["error_code"] == "INVALID_ORDER_STATE"


class TestItemFulfillmentView:
    def test_updates_item_and_returns_order(self, admin_api_client, order, item):
        response = admin_api_client.post(
            reverse("orders:item-fulfillment", args=[item.id]),
            {"status": "delivered"},
            format="json",
        )

        assert response.status_code == 200
        assert response.data["item"]["fulfillment_status"] == FulfillmentStatus.DELIVERED
        assert response.data["order"]["status"] == OrderStatus.COMPLETED

    def test_admin_cannot_send_to_hub(self, admin_api_client, item):
        response = admin_api_client.post(
            reverse("orders:item-fulfillment", args=[item.id]),
            {"status": "sent_to_hub"},
            format="json",
        )

        assert response.status_code == 403
        assert response.data["error_code"] == "PERMISSION_DENIED"

    def test_invalid_status_is_400(self, admin_api_client, item):
        response = admin_api_client.post(
            reverse("orders:item-fulfillment", args=[item.id]),
            {"status": "teleported"},
            format="json",
        )

        assert response.status_code == 400


class TestBulkFulfillmentView:
    def test_updates_items(self, admin_api_client, order, item, variant_item):
        response = admin_api_client.post(
            reverse("orders:item-bulk-fulfillment"),
            {"item_ids": [item.id, variant_item.id], "status": "out_for_delivery"},
            format="json",
        )

        assert response.status_code == 200
        assert len(response.data["items"]) == 2
        assert Order.objects.get(id=order.id).status == OrderStatus.SHIPPED

    def test_unknown_item_rolls_back(self, admin_api_client, item):
        response = admin_api_client.post(
            reverse("orders:item-bulk-fulfillment"),
            {"item_ids": [item.id, 999999], "status": "confirmed"},
            format="json",
        )

        assert response.status_code == 404
        assert OrderItem.objects.get(id=item.id).fulfillment_status == FulfillmentStatus.PROCESSING

    def test_empty_list_is_400(self, admin_api_client, db):
        response = admin_api_client.post(
            reverse("orders:item-bulk-fulfillment"),
            {"item_ids": [], "status": "confirmed"},
            format="json",
        )

        assert response.status_code == 400


class TestMarkOrderDeliveredView:
    def test_completes_order(self, admin_api_client, order, item, variant_item):
        response = admin_api_client.post(reverse("orders:order-mark-delivered", args=[order.id]))

        assert response.status_code == 200
        assert response.data["status"] == OrderStatus.COMPLETED
        assert {i["fulfillment_status"] for i in response.data["items"]} == {"delivered"}
