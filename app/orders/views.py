"""
DRF views for order fulfillment administration.

Endpoints:
    GET  /api/v1/orders/<id>/ - Order with items and payments
    POST /api/v1/orders/<id>/cancel/ - Cancel, restock and refund
    POST /api/v1/orders/<id>/mark-delivered/ - Mark every item delivered
    POST /api/v1/orders/items/<id>/fulfillment/ - Update one item
    POST /api/v1/orders/items/bulk-fulfillment/ - Update several items

Security:
    - All endpoints require an admin user (IsAdminUser) and act with the
      admin role
"""

from __future__ import annotations

from rest_framework.permissions import IsAdminUser
from rest_framework.response import Response
from rest_framework.views import APIView

from orders.serializers import (
    BulkFulfillmentSerializer,
    CancelOrderSerializer,
    FulfillmentUpdateSerializer,
    OrderDetailSerializer,
    OrderItemSerializer,
)
from orders.services import ROLE_ADMIN, FulfillmentService


class OrderDetailView(APIView):
    """
    GET /api/v1/orders/<id>/
    """

    permission_classes = [IsAdminUser]

    def get(self, request, order_id):
        order = FulfillmentService.get_order_with_items(order_id)
        return Response(OrderDetailSerializer(order).data)


class CancelOrderView(APIView):
    """
    Cancel an order.

    POST /api/v1/orders/<id>/cancel/

    Request body:
        {"reason": "Customer requested cancellation"}

    Returns:
        200 with the order, refund_id (null when no refund was made) and
        items_restocked; 400 when the order is completed, paid or cancelled
    """

    permission_classes = [IsAdminUser]

    def post(self, request, order_id):
        serializer = CancelOrderSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        result = FulfillmentService.cancel_order(
            order_id,
            actor_id=str(request.user.pk),
            reason=serializer.validated_data["reason"],
        )
        order = FulfillmentService.get_order_with_items(result.order.id)
        return Response(
            {
                "order": OrderDetailSerializer(order).data,
                "refund_id": result.refund_id,
                "items_restocked": result.items_restocked,
            }
        )


class MarkOrderDeliveredView(APIView):
    """
    POST /api/v1/orders/<id>/mark-delivered/
    """

    permission_classes = [IsAdminUser]

    def post(self, request, order_id):
        FulfillmentService.mark_order_delivered(order_id, admin_id=str(request.user.pk))
        order = FulfillmentService.get_order_with_items(order_id)
        return Response(OrderDetailSerializer(order).data)


class ItemFulfillmentView(APIView):
    """
    Update one item's fulfillment status.

    POST /api/v1/orders/items/<id>/fulfillment/

    Request body:
        {"status": "out_for_delivery"}

    Returns:
        200 with the item and its order
    """

    permission_classes = [IsAdminUser]

    def post(self, request, item_id):
        serializer = FulfillmentUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        item = FulfillmentService.update_order_item_fulfillment(
            item_id,
            serializer.validated_data["status"],
            actor_id=str(request.user.pk),
            role=ROLE_ADMIN,
        )
        order = FulfillmentService.get_order_with_items(item.order_id)
        return Response(
            {
                "item": OrderItemSerializer(item).data,
                "order": OrderDetailSerializer(order).data,
            }
        )


class BulkFulfillmentView(APIView):
    """
    Update several items at once; nothing changes if any update is refused.

    POST /api/v1/orders/items/bulk-fulfillment/

    Request body:
        {"item_ids": [12, 13], "status": "delivered"}
    """

    permission_classes = [IsAdminUser]

    def post(self, request):
        serializer = BulkFulfillmentSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        items = FulfillmentService.bulk_update_fulfillment(
            serializer.validated_data["item_ids"],
            serializer.validated_data["status"],
            actor_id=str(request.user.pk),
            role=ROLE_ADMIN,
        )
        return Response({"items": OrderItemSerializer(items, many=True).data})
