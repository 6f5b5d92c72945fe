"""
DRF views for merchant administration.

Endpoints:
    GET  /api/v1/merchants/ - List merchants (?status=)
    GET  /api/v1/merchants/banks/ - List banks for payout accounts (?country=)
    GET  /api/v1/merchants/applications/ - List applications (?status=)
    POST /api/v1/merchants/applications/<id>/approve/ - Approve application
    POST /api/v1/merchants/applications/<id>/reject/ - Reject application
    POST /api/v1/merchants/applications/<id>/request-info/ - Ask for more info
    POST /api/v1/merchants/<id>/suspend/ - Suspend merchant
    POST /api/v1/merchants/<id>/commission-tier/ - Change commission tier
    POST /api/v1/merchants/<id>/bank-details/ - Register payout account

Security:
    - All endpoints require an admin user (IsAdminUser)
"""

from __future__ import annotations

from rest_framework import generics, status
from rest_framework.permissions import IsAdminUser
from rest_framework.response import Response
from rest_framework.views import APIView

from core.exception_handler import service_failure_response
from merchants.serializers import (
    BankDetailsRequestSerializer,
    BankListQuerySerializer,
    CommissionTierSerializer,
    MerchantApplicationSerializer,
    MerchantBankDetailsSerializer,
    MerchantSerializer,
    MoreInfoRequestSerializer,
    ReviewReasonSerializer,
)
from merchants.services import MerchantService


class MerchantListView(generics.ListAPIView):
    """
    List merchants by store name.

    GET /api/v1/merchants/?status=suspended
    """

    permission_classes = [IsAdminUser]
    serializer_class = MerchantSerializer

    def get_queryset(self):
        return MerchantService.list_merchants(status=self.request.query_params.get("status"))


class BankListView(APIView):
    """
    Banks a payout account can be registered with.

    GET /api/v1/merchants/banks/?country=nigeria

    Returns:
        200 with the bank list, 400 for an unsupported country, 502
        when Paystack fails and no earlier list is cached
    """

    permission_classes = [IsAdminUser]

    def get(self, request):
        query = BankListQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)

        banks = MerchantService.list_banks(country=query.validated_data.get("country"))
        return Response(banks)


class MerchantApplicationListView(generics.ListAPIView):
    """
    List merchant applications, newest first.

    GET /api/v1/merchants/applications/?status=pending
    """

    permission_classes = [IsAdminUser]
    serializer_class = MerchantApplicationSerializer

    def get_queryset(self):
        return MerchantService.list_applications(status=self.request.query_params.get("status"))


class ApproveApplicationView(APIView):
    """
    Approve a pending application.

    POST /api/v1/merchants/applications/<id>/approve/

    Returns:
        201 with the created merchant
    """

    permission_classes = [IsAdminUser]

    def post(self, request, application_id):
        result = MerchantService.approve_application(application_id, admin_id=str(request.user.pk))
        if not result.success:
            return service_failure_response(result)
        return Response(MerchantSerializer(result.data).data, status=status.HTTP_201_CREATED)


class RejectApplicationView(APIView):
    """
    Reject a pending application.

    POST /api/v1/merchants/applications/<id>/reject/

    Request body:
        {"reason": "Incomplete business registration"}
    """

    permission_classes = [IsAdminUser]

    def post(self, request, application_id):
        serializer = ReviewReasonSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        result = MerchantService.reject_application(
            application_id,
            reason=serializer.validated_data["reason"],
            admin_id=str(request.user.pk),
        )
        if not result.success:
            return service_failure_response(result)
        return Response(MerchantApplicationSerializer(result.data).data)


class RequestMoreInfoView(APIView):
    """
    Ask the applicant for more information.

    POST /api/v1/merchants/applications/<id>/request-info/

    Request body:
        {"message": "Please upload your CAC certificate"}
    """

    permission_classes = [IsAdminUser]

    def post(self, request, application_id):
        serializer = MoreInfoRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        result = MerchantService.request_more_info(
            application_id,
            message=serializer.validated_data["message"],
            admin_id=str(request.user.pk),
        )
        if not result.success:
            return service_failure_response(result)
        return Response(MerchantApplicationSerializer(result.data).data)


class SuspendMerchantView(APIView):
    """
    Suspend a merchant.

    POST /api/v1/merchants/<id>/suspend/

    Request body:
        {"reason": "Repeated fulfillment failures"}
    """

    permission_classes = [IsAdminUser]

    def post(self, request, merchant_id):
        serializer = ReviewReasonSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        result = MerchantService.suspend_merchant(
            merchant_id,
            reason=serializer.validated_data["reason"],
            admin_id=str(request.user.pk),
        )
        if not result.success:
            return service_failure_response(result)
        return Response(MerchantSerializer(result.data).data)


class CommissionTierView(APIView):
    """
    Change a merchant's commission tier.

    POST /api/v1/merchants/<id>/commission-tier/

    Request body:
        {"tier": "premium"}
    """

    permission_classes = [IsAdminUser]

    def post(self, request, merchant_id):
        serializer = CommissionTierSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        result = MerchantService.update_commission_tier(
            merchant_id,
            tier=serializer.validated_data["tier"],
            admin_id=str(request.user.pk),
        )
        if not result.success:
            return service_failure_response(result)
        return Response(MerchantSerializer(result.data).data)


class BankDetailsView(APIView):
    """
    Register the merchant's payout bank account with Paystack.

    POST /api/v1/merchants/<id>/bank-details/

    Request body:
        {"bank_code": "058", "account_number": "0123456789"}
    """

    permission_classes = [IsAdminUser]

    def post(self, request, merchant_id):
        serializer = BankDetailsRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        result = MerchantService.register_bank_details(
            merchant_id,
            bank_code=serializer.validated_data["bank_code"],
            account_number=serializer.validated_data["account_number"],
            admin_id=str(request.user.pk),
        )
        if not result.success:
            return service_failure_response(result)
        return Response(MerchantBankDetailsSerializer(result.data).data, status=status.HTTP_201_CREATED)
