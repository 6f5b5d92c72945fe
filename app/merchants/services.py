"""
Merchant onboarding and account management.

MerchantService covers the admin side of the merchant lifecycle:
    - Application review: approve, reject, request more information
    - Account actions: suspend, change commission tier
    - Listing: merchants by status
    - Payout setup: list banks (cached), register bank details with the gateway

Every operation returns a ServiceResult. Review actions only apply to pending
applications; anything else yields APPLICATION_ALREADY_PROCESSED. Each state
change writes an audit record and schedules an email after commit.

Usage:
    from merchants.services import MerchantService

    result = MerchantService.approve_application(application_id, admin_id=str(request.user.pk))
    if not result.success:
        return Response(result.to_response(), status=400)
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from django.conf import settings
from django.core.cache import cache
from django.utils import timezone

from core.exceptions import BaseApplicationError, NotFoundError
from core.services import BaseService, ServiceResult
from merchants import notifications
from merchants.exceptions import ApplicationAlreadyProcessedError
from merchants.models import (
    COMMISSION_RATES,
    ApplicationStatus,
    CommissionTier,
    Merchant,
    MerchantApplication,
    MerchantBankDetails,
    MerchantStatus,
)
from payments.adapters import GatewayAdapterMixin
from payments.exceptions import PaystackError
from toolkit.services import AuditService

if TYPE_CHECKING:
    from django.db.models import QuerySet

BANKS_CACHE_PREFIX = "paystack:banks"


class MerchantService(GatewayAdapterMixin, BaseService):
    """Admin operations on merchant applications and merchant accounts."""

    # =========================================================================
    # Merchants
    # =========================================================================

    @classmethod
    def list_merchants(cls, status: str | None = None) -> QuerySet[Merchant]:
        """Merchants by store name, optionally filtered by status."""
        queryset = Merchant.objects.select_related("bank_details")
        if status:
            queryset = queryset.filter(status=status)
        return queryset

    # =========================================================================
    # Applications
    # =========================================================================

    @classmethod
    def list_applications(cls, status: str | None = None) -> QuerySet[MerchantApplication]:
        """Applications, newest first, optionally filtered by status."""
        queryset = MerchantApplication.objects.all()
        if status:
            queryset = queryset.filter(status=status)
        return queryset

    @classmethod
    def approve_application(cls, application_id, admin_id: str) -> ServiceResult[Merchant]:
        """
        Approve a pending application and create its Merchant.

        The merchant starts active on the standard commission tier.

        Returns:
            ServiceResult with the new Merchant
        """
        with cls.atomic():
            application = cls._get_application_for_review(application_id)
            if isinstance(application, ServiceResult):
                return application

            application.status = ApplicationStatus.APPROVED
            application.reviewed_by = str(admin_id)
            application.reviewed_at = timezone.now()
            application.save(update_fields=["status", "reviewed_by", "reviewed_at", "updated_at"])

            merchant = Merchant.objects.create(
                application=application,
                store_name=application.store_name,
                contact_name=application.contact_name,
                work_email=application.work_email,
                phone_number=application.phone_number,
                status=MerchantStatus.ACTIVE,
                commission_tier=CommissionTier.STANDARD,
                commission_rate=COMMISSION_RATES[CommissionTier.STANDARD],
            )

            AuditService.record(
                action="merchant_application.approved",
                target_type="merchant_application",
                target_id=application.id,
                actor_id=admin_id,
                details={"merchant_id": str(merchant.id)},
            )
            notifications.notify_application_approved(merchant)

        cls.get_logger().info(
            f"Approved merchant application {application.id}",
            extra={"application_id": str(application.id), "merchant_id": str(merchant.id)},
        )
        return ServiceResult.success(merchant)

    @classmethod
    def reject_application(
        cls, application_id, reason: str, admin_id: str
    ) -> ServiceResult[MerchantApplication]:
        """Reject a pending application with a reason the applicant will see."""
        with cls.atomic():
            application = cls._get_application_for_review(application_id)
            if isinstance(application, ServiceResult):
                return application

            application.status = ApplicationStatus.REJECTED
            application.rejection_reason = reason
            application.reviewed_by = str(admin_id)
            application.reviewed_at = timezone.now()
            application.save(
                update_fields=[
                    "status",
                    "rejection_reason",
                    "reviewed_by",
                    "reviewed_at",
                    "updated_at",
                ]
            )

            AuditService.record(
                action="merchant_application.rejected",
                target_type="merchant_application",
                target_id=application.id,
                actor_id=admin_id,
                details={"reason": reason},
            )
            notifications.notify_application_rejected(application, reason)

        cls.get_logger().info(f"Rejected merchant application {application.id}")
        return ServiceResult.success(application)

    @classmethod
    def request_more_info(
        cls, application_id, message: str, admin_id: str
    ) -> ServiceResult[MerchantApplication]:
        """Put a pending application on hold until the applicant answers."""
        with cls.atomic():
            application = cls._get_application_for_review(application_id)
            if isinstance(application, ServiceResult):
                return application

            application.status = ApplicationStatus.MORE_INFO
            application.reviewed_by = str(admin_id)
            application.reviewed_at = timezone.now()
            application.save(update_fields=["status", "reviewed_by", "reviewed_at", "updated_at"])

            AuditService.record(
                action="merchant_application.more_info_requested",
                target_type="merchant_application",
                target_id=application.id,
                actor_id=admin_id,
                details={"message": message},
            )
            notifications.notify_more_info_requested(application, message)

        cls.get_logger().info(f"Requested more info for merchant application {application.id}")
        return ServiceResult.success(application)

    @classmethod
    def _get_application_for_review(cls, application_id):
        """
        Lock the application, or explain why it cannot be reviewed.

        Returns:
            The MerchantApplication, or a failed ServiceResult
        """
        application = (
            MerchantApplication.objects.select_for_update().filter(id=application_id).first()
        )
        if application is None:
            return ServiceResult.from_exception(
                NotFoundError("Application not found", error_code="APPLICATION_NOT_FOUND")
            )
        if application.status != ApplicationStatus.PENDING:
            return ServiceResult.from_exception(
                ApplicationAlreadyProcessedError(
                    "Application already processed",
                    details={"application_id": str(application.id), "status": application.status},
                )
            )
        return application

    # =========================================================================
    # Merchant Accounts
    # =========================================================================

    @classmethod
    def suspend_merchant(cls, merchant_id, reason: str, admin_id: str) -> ServiceResult[Merchant]:
        """
        Suspend an active merchant.

        Suspension is a status change only: the merchant's data, splits and
        payouts are kept. Suspended merchants are skipped by payout
        aggregation.
        """
        with cls.atomic():
            merchant = Merchant.objects.select_for_update().filter(id=merchant_id).first()
            if merchant is None:
                return ServiceResult.failure("Merchant not found", "MERCHANT_NOT_FOUND")
            if merchant.status == MerchantStatus.SUSPENDED:
                return ServiceResult.failure(
                    "Merchant is already suspended", "MERCHANT_ALREADY_SUSPENDED"
                )

            merchant.status = MerchantStatus.SUSPENDED
            merchant.suspended_at = timezone.now()
            merchant.suspension_reason = reason
            merchant.save(
                update_fields=["status", "suspended_at", "suspension_reason", "updated_at"]
            )

            AuditService.record(
                action="merchant.suspended",
                target_type="merchant",
                target_id=merchant.id,
                actor_id=admin_id,
                details={"reason": reason},
            )
            notifications.notify_merchant_suspended(merchant, reason)

        cls.get_logger().info(
            f"Suspended merchant {merchant.id}", extra={"merchant_id": str(merchant.id)}
        )
        return ServiceResult.success(merchant)

    @classmethod
    def update_commission_tier(cls, merchant_id, tier: str, admin_id: str) -> ServiceResult[Merchant]:
        """Move a merchant to another commission tier and apply its rate."""
        if tier not in COMMISSION_RATES:
            return ServiceResult.failure(
                f"Unknown commission tier: {tier}",
                "INVALID_COMMISSION_TIER",
                errors={"tier": [f"Must be one of: {', '.join(CommissionTier.values)}"]},
            )

        with cls.atomic():
            merchant = Merchant.objects.select_for_update().filter(id=merchant_id).first()
            if merchant is None:
                return ServiceResult.failure("Merchant not found", "MERCHANT_NOT_FOUND")

            previous_tier = merchant.commission_tier
            merchant.commission_tier = tier
            merchant.commission_rate = COMMISSION_RATES[tier]
            merchant.save(update_fields=["commission_tier", "commission_rate", "updated_at"])

            AuditService.record(
                action="merchant.commission_tier_updated",
                target_type="merchant",
                target_id=merchant.id,
                actor_id=admin_id,
                details={
                    "previous_tier": previous_tier,
                    "tier": tier,
                    "commission_rate": merchant.commission_rate,
                },
            )

        return ServiceResult.success(merchant)

    # =========================================================================
    # Payout Setup
    # =========================================================================

    @classmethod
    def list_banks(cls, country: str | None = None) -> list[dict[str, str]]:
        """
        Banks a payout account can be registered with.

        Served from the cache while fresh. When the gateway fails, the last
        list fetched for the country is served instead; with no such copy
        the gateway error is raised.

        Raises:
            ValidationError: Unsupported country
            PaystackError: Gateway failure with nothing cached
        """
        cache_key = f"{BANKS_CACHE_PREFIX}:{country or 'all'}"
        banks = cache.get(cache_key)
        if banks is not None:
            return banks

        try:
            banks = [bank.to_dict() for bank in cls.get_gateway_adapter().list_banks(country)]
        except PaystackError as e:
            banks = cache.get(f"{cache_key}:last")
            if banks is None:
                raise
            cls.get_logger().warning(
                f"Bank list unavailable, serving last fetched copy: {e}",
                extra={"country": country or "", "error_code": e.error_code},
            )
            return banks

        cache.set(cache_key, banks, timeout=settings.BANKS_CACHE_TIMEOUT_SECONDS)
        cache.set(f"{cache_key}:last", banks, timeout=None)
        return banks

    @classmethod
    def register_bank_details(
        cls,
        merchant_id,
        bank_code: str,
        account_number: str,
        admin_id: str = "",
    ) -> ServiceResult[MerchantBankDetails]:
        """
        Register the merchant's payout account with the gateway.

        Resolves the account holder name, creates a transfer recipient and
        stores its recipient code. Registering again replaces the previous
        account. Gateway calls happen before any row is locked.

        Returns:
            ServiceResult with the MerchantBankDetails
        """
        merchant = Merchant.objects.filter(id=merchant_id).first()
        if merchant is None:
            return ServiceResult.failure("Merchant not found", "MERCHANT_NOT_FOUND")

        adapter = cls.get_gateway_adapter()
        try:
            resolution = adapter.resolve_account(account_number, bank_code)
            recipient = adapter.create_transfer_recipient(
                name=resolution.account_name or merchant.store_name,
                account_number=account_number,
                bank_code=bank_code,
            )
        except BaseApplicationError as e:
            return cls.handle_exception(e, f"Bank details registration for merchant {merchant.id}")

        with cls.atomic():
            bank_details, _ = MerchantBankDetails.objects.update_or_create(
                merchant=merchant,
                defaults={
                    "bank_code": bank_code,
                    "bank_name": recipient.bank_name,
                    "account_number": account_number,
                    "account_name": resolution.account_name,
                    "recipient_code": recipient.recipient_code,
                    "currency": recipient.currency,
                },
            )

            AuditService.record(
                action="merchant.bank_details_registered",
                target_type="merchant",
                target_id=merchant.id,
                actor_id=admin_id,
                details={"bank_code": bank_code, "recipient_code": recipient.recipient_code},
            )

        cls.get_logger().info(
            f"Registered bank details for merchant {merchant.id}",
            extra={"merchant_id": str(merchant.id), "recipient_code": recipient.recipient_code},
        )
        return ServiceResult.success(bank_details)
