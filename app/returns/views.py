"""
DRF views for return requests.

Endpoints:
    GET  /api/v1/returns/ - List returns (?status=&merchant_id=&limit=)
    POST /api/v1/returns/ - Open a return for an order item
    POST /api/v1/returns/<id>/merchant-review/ - Merchant decision
    POST /api/v1/returns/<id>/escalate/ - Escalate to admin review
    POST /api/v1/returns/<id>/approve/ - Admin approval and refund
    POST /api/v1/returns/<id>/refund/ - Retry the refund of an approved return

Security:
    - All endpoints require an admin user (IsAdminUser); merchant reviews
      are recorded on behalf of the merchant named in the body
"""

from __future__ import annotations

from rest_framework import status
from rest_framework.permissions import IsAdminUser
from rest_framework.response import Response
from rest_framework.views import APIView

from returns.serializers import (
    CreateReturnSerializer,
    EscalateReturnSerializer,
    MerchantReviewSerializer,
    ReturnListQuerySerializer,
    ReturnRequestSerializer,
)
from returns.services import ReturnService


class ReturnListCreateView(APIView):
    """
    GET  /api/v1/returns/?status=admin_review
    POST /api/v1/returns/

    Request body (POST):
        {"order_item_id": 12, "customer_id": "cust_1", "reason": "Wrong size"}
    """

    permission_classes = [IsAdminUser]

    def get(self, request):
        query = ReturnListQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)

        returns = ReturnService.list_returns(**query.validated_data)
        return Response(ReturnRequestSerializer(returns, many=True).data)

    def post(self, request):
        serializer = CreateReturnSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        return_request = ReturnService.create_return_request(**serializer.validated_data)
        return Response(
            ReturnRequestSerializer(return_request).data,
            status=status.HTTP_201_CREATED,
        )


class MerchantReviewView(APIView):
    """
    POST /api/v1/returns/<id>/merchant-review/

    Request body:
        {"merchant_id": "<uuid>", "decision": "approved", "notes": "..."}
    """

    permission_classes = [IsAdminUser]

    def post(self, request, return_id):
        serializer = MerchantReviewSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        return_request = ReturnService.merchant_review(return_id, **serializer.validated_data)
        return Response(ReturnRequestSerializer(return_request).data)


class EscalateReturnView(APIView):
    """
    POST /api/v1/returns/<id>/escalate/
    """

    permission_classes = [IsAdminUser]

    def post(self, request, return_id):
        serializer = EscalateReturnSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        return_request = ReturnService.admin_escalate(
            return_id,
            admin_id=str(request.user.pk),
            notes=serializer.validated_data["notes"],
        )
        return Response(ReturnRequestSerializer(return_request).data)


class ApproveReturnView(APIView):
    """
    Approve and refund a return.

    POST /api/v1/returns/<id>/approve/

    Returns:
        200 with the return, 400 when it cannot be approved from its status,
        502 when the refund failed (the approval is kept; retry with
        POST /api/v1/returns/<id>/refund/)
    """

    permission_classes = [IsAdminUser]

    def post(self, request, return_id):
        return_request = ReturnService.admin_approve_refund(return_id, admin_id=str(request.user.pk))
        return Response(ReturnRequestSerializer(return_request).data)


class RetryRefundView(APIView):
    """
    POST /api/v1/returns/<id>/refund/
    """

    permission_classes = [IsAdminUser]

    def post(self, request, return_id):
        return_request = ReturnService.retry_refund(return_id, admin_id=str(request.user.pk))
        return Response(ReturnRequestSerializer(return_request).data)
