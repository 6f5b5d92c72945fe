"""
DRF views for payout administration.

Endpoints:
    GET  /api/v1/payments/payouts/ - List payouts (?merchant_id=&status=&limit=)
    POST /api/v1/payments/payouts/aggregate/ - Aggregate eligible splits
    POST /api/v1/payments/payouts/<id>/process/ - Send a pending payout
    GET  /api/v1/payments/merchants/<id>/payout-summary/ - Merchant summary

The Paystack webhook lives in payments.webhooks.views.

Security:
    - All endpoints require an admin user (IsAdminUser)
    - Errors raised by the services are rendered by
      core.exception_handler.api_exception_handler
"""

from __future__ import annotations

from rest_framework import status
from rest_framework.permissions import IsAdminUser
from rest_framework.response import Response
from rest_framework.views import APIView

from payments.serializers import (
    AggregateRequestSerializer,
    MerchantPayoutSummarySerializer,
    PayoutListQuerySerializer,
    PayoutSerializer,
)
from payments.services import (
    PayoutAggregationService,
    PayoutProcessingService,
    PayoutQueryService,
)


class PayoutListView(APIView):
    """
    List payouts, newest first.

    GET /api/v1/payments/payouts/?status=processing&limit=20
    """

    permission_classes = [IsAdminUser]

    def get(self, request):
        query = PayoutListQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)

        payouts = PayoutQueryService.list_payouts(**query.validated_data)
        return Response(PayoutSerializer(payouts, many=True).data)


class AggregatePayoutsView(APIView):
    """
    Aggregate eligible splits into pending payouts.

    POST /api/v1/payments/payouts/aggregate/

    Request body:
        {"process": true}  # optional; also queue each payout for processing

    Returns:
        {"created": [{"payout_id", "merchant_id", "amount", "splits_count"}, ...]}
    """

    permission_classes = [IsAdminUser]

    def post(self, request):
        serializer = AggregateRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        created = PayoutAggregationService.aggregate_eligible_payouts()

        if serializer.validated_data["process"]:
            from payments.tasks import process_payout_task

            for item in created:
                process_payout_task.delay(str(item.payout_id))

        return Response({"created": [item.to_dict() for item in created]})


class ProcessPayoutView(APIView):
    """
    Initiate the transfer for a pending payout.

    POST /api/v1/payments/payouts/<id>/process/

    Returns:
        200 with the payout (completed, or processing until the webhook)
        404 unknown payout, 400 not pending or no recipient,
        502 Paystack refused the transfer (payout is now failed)
    """

    permission_classes = [IsAdminUser]

    def post(self, request, payout_id):
        result = PayoutProcessingService.process_payout(payout_id)
        return Response(
            {
                "payout": PayoutSerializer(result.payout).data,
                "transfer_code": result.transfer.transfer_code,
                "verification_status": (
                    result.verification.status if result.verification else None
                ),
            },
            status=status.HTTP_200_OK,
        )


class MerchantPayoutSummaryView(APIView):
    """
    Payout totals for one merchant.

    GET /api/v1/payments/merchants/<id>/payout-summary/
    """

    permission_classes = [IsAdminUser]

    def get(self, request, merchant_id):
        summary = PayoutQueryService.get_merchant_payout_summary(merchant_id)
        return Response(MerchantPayoutSummarySerializer(summary).data)
