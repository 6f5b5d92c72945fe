"""
Tests for ReturnService.

Covers:
- Creating returns
- Merchant review: ownership, approval refunds, rejection
- Admin escalation and approval with audit records
- Approvals committed before the refund, retry_refund after a failure
- process_return_refund: exactly once, restock, missing payment, gateway
  failure leaving the return unrefunded
"""

import uuid
from decimal import Decimal

import pytest

from core.exceptions import PermissionDeniedError, ValidationError
from merchants.tests.factories import MerchantFactory
from orders.exceptions import OrderItemNotFoundError
from orders.models import Inventory, Payment, PaymentStatus
from payments.exceptions import PaystackInvalidRequestError
from returns.exceptions import InvalidReturnStateError, RefundProcessingError, ReturnNotFoundError
from returns.models import ReturnRequest, ReturnStatus
from returns.services import ReturnService
from toolkit.models import AuditLog


def stock(item):
    return Inventory.objects.for_item(item).get().quantity


def reload(return_request):
    return ReturnRequest.objects.get(id=return_request.id)


class TestCreateReturnRequest:
    def test_creates_pending_return(self, item):
        return_request = ReturnService.create_return_request(
            item.id, customer_id="cust_9", reason="Damaged", description="Cracked screen"
        )

        assert return_request.status == ReturnStatus.PENDING
        assert return_request.order_item_id == item.id
        assert return_request.customer_id == "cust_9"

    def test_unknown_item(self, db):
        with pytest.raises(OrderItemNotFoundError):
            ReturnService.create_return_request(999999, customer_id="cust_9", reason="Damaged")


class TestMerchantReview:
    def test_approval_refunds_and_restocks(self, pending_return, merchant, item, fake_gateway):
        result = ReturnService.merchant_review(pending_return.id, merchant.id, "approved", notes="OK")

        assert result.status == ReturnStatus.REFUNDED
        assert result.merchant_notes == "OK"
        assert result.merchant_reviewed_at is not None
        assert result.refund_reference == "9000"
        assert result.refund_amount == Decimal("6000.00")
        assert result.refunded_at is not None
        assert stock(item) == 7

        [call] = fake_gateway.calls_to("create_refund")
        assert call == {"transaction_reference": "txn_return_001", "amount": Decimal("6000.00")}

    def test_rejection(self, pending_return, merchant, fake_gateway):
        result = ReturnService.merchant_review(pending_return.id, merchant.id, "rejected")

        assert result.status == ReturnStatus.MERCHANT_REJECTED
        assert fake_gateway.calls == []

    def test_other_merchant_refused(self, pending_return, fake_gateway):
        with pytest.raises(PermissionDeniedError):
            ReturnService.merchant_review(pending_return.id, MerchantFactory().id, "approved")

        assert reload(pending_return).status == ReturnStatus.PENDING

    def test_invalid_decision(self, pending_return, merchant):
        with pytest.raises(ValidationError):
            ReturnService.merchant_review(pending_return.id, merchant.id, "maybe")

    def test_only_from_pending(self, return_in, merchant, fake_gateway):
        rejected = return_in(ReturnStatus.MERCHANT_REJECTED)

        with pytest.raises(InvalidReturnStateError):
            ReturnService.merchant_review(rejected.id, merchant.id, "approved")

    def test_gateway_failure_keeps_approval(self, pending_return, merchant, item, fake_gateway):
        fake_gateway.refund_error = PaystackInvalidRequestError("Transaction already refunded")

        with pytest.raises(RefundProcessingError):
            ReturnService.merchant_review(pending_return.id, merchant.id, "approved", notes="OK")

        kept = reload(pending_return)
        assert kept.status == ReturnStatus.MERCHANT_APPROVED
        assert kept.merchant_notes == "OK"
        assert kept.refunded_at is None
        assert stock(item) == 5

    def test_unknown_return(self, merchant):
        with pytest.raises(ReturnNotFoundError):
            ReturnService.merchant_review(uuid.uuid4(), merchant.id, "approved")


class TestAdminEscalate:
    @pytest.mark.parametrize("status", [ReturnStatus.PENDING, ReturnStatus.MERCHANT_REJECTED])
    def test_escalates(self, return_in, status):
        return_request = return_in(status)

        result = ReturnService.admin_escalate(return_request.id, admin_id="42", notes="Customer called")

        assert result.status == ReturnStatus.ADMIN_REVIEW
        assert result.admin_notes == "Customer called"
        log = AuditLog.objects.get(action="return.escalated")
        assert log.actor_id == "42"
        assert log.target_id == str(return_request.id)

    @pytest.mark.parametrize(
        "status",
        [ReturnStatus.MERCHANT_APPROVED, ReturnStatus.ADMIN_REVIEW, ReturnStatus.REFUNDED],
    )
    def test_refused_statuses(self, return_in, status):
        return_request = return_in(status)

        with pytest.raises(InvalidReturnStateError):
            ReturnService.admin_escalate(return_request.id, admin_id="42")

        assert not AuditLog.objects.exists()


class TestAdminApproveRefund:
    @pytest.mark.parametrize("status", [ReturnStatus.ADMIN_REVIEW, ReturnStatus.MERCHANT_REJECTED])
    def test_approves_and_refunds(self, return_in, item, status, fake_gateway):
        return_request = return_in(status)

        result = ReturnService.admin_approve_refund(return_request.id, admin_id="42")

        assert result.status == ReturnStatus.REFUNDED
        assert result.reviewed_by == "42"
        assert result.admin_reviewed_at is not None
        assert stock(item) == 7
        assert set(AuditLog.objects.values_list("action", flat=True)) == {
            "return.refunded",
            "return.refund_approved",
        }

    def test_refund_audit_details(self, return_in, item, fake_gateway):
        return_request = return_in(ReturnStatus.ADMIN_REVIEW)

        ReturnService.admin_approve_refund(return_request.id, admin_id="42")

        assert AuditLog.objects.get(action="return.refunded").details == {
            "order_item_id": item.id,
            "refund_amount": "6000.00",
            "quantity_restocked": 2,
        }

    def test_pending_refused(self, pending_return, fake_gateway):
        with pytest.raises(InvalidReturnStateError):
            ReturnService.admin_approve_refund(pending_return.id, admin_id="42")

        assert fake_gateway.calls == []

    def test_gateway_failure_keeps_approval_and_audit(self, return_in, item, fake_gateway):
        return_request = return_in(ReturnStatus.ADMIN_REVIEW)
        fake_gateway.refund_error = PaystackInvalidRequestError("Insufficient balance")

        with pytest.raises(RefundProcessingError):
            ReturnService.admin_approve_refund(return_request.id, admin_id="42")

        kept = reload(return_request)
        assert kept.status == ReturnStatus.ADMIN_APPROVED
        assert kept.reviewed_by == "42"
        assert stock(item) == 5
        assert list(AuditLog.objects.values_list("action", flat=True)) == ["return.refund_approved"]


class TestRetryRefund:
    def test_refunds_after_earlier_failure(self, return_in, item, fake_gateway):
        return_request = return_in(ReturnStatus.ADMIN_REVIEW)
        fake_gateway.refund_error = PaystackInvalidRequestError("Insufficient balance")
        with pytest.raises(RefundProcessingError):
            ReturnService.admin_approve_refund(return_request.id, admin_id="42")

        fake_gateway.refund_error = None
        result = ReturnService.retry_refund(return_request.id, admin_id="42")

        assert result.status == ReturnStatus.REFUNDED
        assert result.refund_reference == "9000"
        assert stock(item) == 7
        assert AuditLog.objects.filter(action="return.refunded").count() == 1

    def test_refunded_return_is_unchanged(self, return_in, fake_gateway):
        return_request = return_in(ReturnStatus.REFUNDED, refund_reference="8000")

        result = ReturnService.retry_refund(return_request.id, admin_id="42")

        assert result.refund_reference == "8000"
        assert fake_gateway.calls == []

    def test_unapproved_refused(self, pending_return, fake_gateway):
        with pytest.raises(InvalidReturnStateError):
            ReturnService.retry_refund(pending_return.id, admin_id="42")

    def test_unknown_return(self, db, fake_gateway):
        with pytest.raises(ReturnNotFoundError):
            ReturnService.retry_refund(uuid.uuid4(), admin_id="42")


class TestProcessReturnRefund:
    def test_refunds_exactly_once(self, return_in, item, fake_gateway):
        return_request = return_in(ReturnStatus.ADMIN_APPROVED)

        ReturnService.process_return_refund(return_request.id)
        ReturnService.process_return_refund(return_request.id)

        assert len(fake_gateway.calls_to("create_refund")) == 1
        assert stock(item) == 7

    def test_refunded_return_is_noop(self, return_in, fake_gateway):
        return_request = return_in(ReturnStatus.REFUNDED, refund_reference="8000")

        result = ReturnService.process_return_refund(return_request.id)

        assert result.refund_reference == "8000"
        assert fake_gateway.calls == []

    @pytest.mark.parametrize(
        "status",
        [ReturnStatus.PENDING, ReturnStatus.MERCHANT_REJECTED, ReturnStatus.ADMIN_REVIEW],
    )
    def test_unapproved_refused(self, return_in, status, fake_gateway):
        return_request = return_in(status)

        with pytest.raises(InvalidReturnStateError):
            ReturnService.process_return_refund(return_request.id)

    def test_missing_return_is_silent(self, db, fake_gateway, caplog):
        assert ReturnService.process_return_refund(uuid.uuid4()) is None
        assert "not found" in caplog.text

    def test_missing_payment_is_silent(self, return_in, payment, item, fake_gateway, caplog):
        Payment.objects.filter(id=payment.id).update(status=PaymentStatus.FAILED)
        return_request = return_in(ReturnStatus.MERCHANT_APPROVED)

        ReturnService.process_return_refund(return_request.id)

        assert reload(return_request).status == ReturnStatus.MERCHANT_APPROVED
        assert stock(item) == 5
        assert "No completed payment" in caplog.text

    def test_payment_without_reference_refunds_locally(self, return_in, payment, item, fake_gateway):
        Payment.objects.filter(id=payment.id).update(transaction_reference=None)
        return_request = return_in(ReturnStatus.MERCHANT_APPROVED)

        ReturnService.process_return_refund(return_request.id)

        refunded = reload(return_request)
        assert refunded.status == ReturnStatus.REFUNDED
        assert refunded.refund_reference == ""
        assert fake_gateway.calls == []
        assert stock(item) == 7

    def test_gateway_failure(self, return_in, item, fake_gateway):
        fake_gateway.refund_error = PaystackInvalidRequestError("Insufficient balance")
        return_request = return_in(ReturnStatus.ADMIN_APPROVED)

        with pytest.raises(RefundProcessingError) as exc_info:
            ReturnService.process_return_refund(return_request.id)

        assert exc_info.value.http_status == 502
        assert exc_info.value.details["upstream_code"] == "PAYSTACK_INVALID_REQUEST"
        assert reload(return_request).status == ReturnStatus.ADMIN_APPROVED
        assert stock(item) == 5

    def test_no_audit_without_admin(self, return_in, fake_gateway):
        return_request = return_in(ReturnStatus.MERCHANT_APPROVED)

        ReturnService.process_return_refund(return_request.id)

        assert not AuditLog.objects.exists()


class TestListReturns:
    def test_filters(self, return_in, merchant):
        pending = return_in(ReturnStatus.PENDING)
        return_in(ReturnStatus.ADMIN_REVIEW)

        assert list(ReturnService.list_returns(status=ReturnStatus.PENDING)) == [pending]
        assert len(ReturnService.list_returns(merchant_id=merchant.id)) == 2
        assert len(ReturnService.list_returns(merchant_id=MerchantFactory().id)) == 0
        assert len(ReturnService.list_returns(limit=1)) == 1
