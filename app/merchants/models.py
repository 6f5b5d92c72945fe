"""
Merchant domain models.

Models:
    MerchantApplication: A store's request to sell on the marketplace
    Merchant: An approved store; receives payouts for its order splits
    MerchantBankDetails: Payout bank account and gateway recipient code

Lifecycle:
    MerchantApplication: pending -> approved | rejected | more_info
    Merchant: active <-> suspended (never hard-deleted)

Usage:
    from merchants.models import Merchant, MerchantStatus

    active = Merchant.objects.filter(status=MerchantStatus.ACTIVE)
"""

from __future__ import annotations

from decimal import Decimal

from django.db import models

from core.models import BaseModel
from core.model_mixins import UUIDPrimaryKeyMixin


# =============================================================================
# Choices
# =============================================================================


class ApplicationStatus(models.TextChoices):
    """Review states of a merchant application."""

    PENDING = "pending", "Pending"
    APPROVED = "approved", "Approved"
    REJECTED = "rejected", "Rejected"
    MORE_INFO = "more_info", "More Info Requested"


class MerchantStatus(models.TextChoices):
    """Merchant account states. Suspension is soft: data is kept."""

    ACTIVE = "active", "Active"
    SUSPENDED = "suspended", "Suspended"


class CommissionTier(models.TextChoices):
    """Commission tiers and the platform rate (percent) each one pays."""

    STANDARD = "standard", "Standard"
    PREMIUM = "premium", "Premium"


COMMISSION_RATES: dict[str, Decimal] = {
    CommissionTier.STANDARD: Decimal("5.00"),
    CommissionTier.PREMIUM: Decimal("3.00"),
}


# =============================================================================
# Models
# =============================================================================


class MerchantApplication(UUIDPrimaryKeyMixin, BaseModel):
    """
    Application submitted by a store that wants to sell on the marketplace.

    Only pending applications can be reviewed. Approval creates the Merchant.
    """

    store_name = models.CharField(max_length=255)
    contact_name = models.CharField(max_length=255)
    personal_email = models.EmailField()
    work_email = models.EmailField()
    phone_number = models.CharField(max_length=32, blank=True, default="")
    business_type = models.CharField(max_length=100, blank=True, default="")
    business_registration_number = models.CharField(max_length=100, blank=True, default="")
    business_description = models.TextField(blank=True, default="")
    website = models.URLField(blank=True, default="")

    status = models.CharField(
        max_length=20,
        choices=ApplicationStatus.choices,
        default=ApplicationStatus.PENDING,
        db_index=True,
    )
    reviewed_by = models.CharField(
        max_length=64,
        blank=True,
        default="",
        help_text="Id of the admin who reviewed the application",
    )
    reviewed_at = models.DateTimeField(null=True, blank=True)
    rejection_reason = models.TextField(blank=True, default="")

    class Meta:
        ordering = ["-created_at"]
        verbose_name = "Merchant Application"
        verbose_name_plural = "Merchant Applications"

    def __str__(self) -> str:
        return f"MerchantApplication({self.store_name}, {self.status})"


class Merchant(UUIDPrimaryKeyMixin, BaseModel):
    """
    An approved store.

    Fields:
        status: active or suspended; only active merchants are paid out
        commission_tier / commission_rate: platform fee tier and percent
        total_payouts: Running total of completed payouts (major units)
        last_payout_at: When the most recent payout completed

    Note:
        total_payouts is only changed through PayoutSettlement, with an F()
        expression, and only on a payout's transition into completed.
    """

    application = models.OneToOneField(
        MerchantApplication,
        on_delete=models.PROTECT,
        related_name="merchant",
        null=True,
        blank=True,
    )
    store_name = models.CharField(max_length=255)
    contact_name = models.CharField(max_length=255, blank=True, default="")
    work_email = models.EmailField()
    phone_number = models.CharField(max_length=32, blank=True, default="")

    status = models.CharField(
        max_length=20,
        choices=MerchantStatus.choices,
        default=MerchantStatus.ACTIVE,
        db_index=True,
    )
    suspended_at = models.DateTimeField(null=True, blank=True)
    suspension_reason = models.TextField(blank=True, default="")

    commission_tier = models.CharField(
        max_length=20,
        choices=CommissionTier.choices,
        default=CommissionTier.STANDARD,
    )
    commission_rate = models.DecimalField(
        max_digits=5,
        decimal_places=2,
        default=COMMISSION_RATES[CommissionTier.STANDARD],
    )

    total_payouts = models.DecimalField(
        max_digits=14,
        decimal_places=2,
        default=Decimal("0.00"),
        help_text="Sum of completed payouts in major currency units",
    )
    last_payout_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        ordering = ["store_name"]
        verbose_name = "Merchant"
        verbose_name_plural = "Merchants"

    def __str__(self) -> str:
        return f"Merchant({self.store_name}, {self.status})"

    @property
    def is_active(self) -> bool:
        return self.status == MerchantStatus.ACTIVE

    @property
    def recipient_code(self) -> str | None:
        """Gateway transfer recipient, if bank details are registered."""
        bank_details = getattr(self, "bank_details", None)
        if bank_details is None:
            return None
        return bank_details.recipient_code or None


class MerchantBankDetails(BaseModel):
    """
    Payout bank account for a merchant.

    recipient_code is the gateway's transfer recipient reference. A merchant
    without one is skipped by payout aggregation.
    """

    merchant = models.OneToOneField(
        Merchant,
        on_delete=models.CASCADE,
        related_name="bank_details",
    )
    bank_name = models.CharField(max_length=255, blank=True, default="")
    bank_code = models.CharField(max_length=10)
    account_number = models.CharField(max_length=20)
    account_name = models.CharField(max_length=255, blank=True, default="")
    recipient_code = models.CharField(max_length=50, blank=True, default="", db_index=True)
    currency = models.CharField(max_length=8, default="NGN")

    class Meta:
        verbose_name = "Merchant Bank Details"
        verbose_name_plural = "Merchant Bank Details"

    def __str__(self) -> str:
        return f"MerchantBankDetails({self.merchant_id}, {self.bank_code})"
