"""
Tests for the returns API.
"""

import uuid

from django.urls import reverse

from payments.exceptions import PaystackAPIUnavailableError
from returns.models import ReturnRequest, ReturnStatus


class TestReturnListCreateView:
    url = "/api/v1/returns/"

    def test_create(self, admin_api_client, item):
        response = admin_api_client.post(
            self.url,
            {"order_item_id": item.id, "customer_id": "cust_5", "reason": "Wrong colour"},
            format="json",
        )

        assert response.status_code == 201
        assert response.data["status"] == ReturnStatus.PENDING
        assert response.data["merchant_id"] == str(item.merchant_id)

    def test_create_for_unknown_item_is_404(self, admin_api_client, db):
        response = admin_api_client.post(
            self.url,
            {"order_item_id": 999999, "customer_id": "cust_5", "reason": "Wrong colour"},
            format="json",
        )

        assert response.status_code == 404
        assert response.data["error_code"] == "ORDER_ITEM_NOT_FOUND"

    def test_list_by_status(self, admin_api_client, return_in):
        escalated = return_in(ReturnStatus.ADMIN_REVIEW)
        return_in(ReturnStatus.PENDING)

        response = admin_api_client.get(self.url, {"status": "admin_review"})

        assert response.status_code == 200
        assert [r["id"] for r in response.data] == [str(escalated.id)]

    def test_requires_admin(self, api_client, db):
        response = api_client.get(self.url)

        assert response.status_code in (401, 403)


class TestMerchantReviewView:
    def test_approval_refunds(self, admin_api_client, pending_return, merchant, fake_gateway):
        response = admin_api_client.post(
            reverse("returns:return-merchant-review", args=[pending_return.id]),
            {"merchant_id": str(merchant.id), "decision": "approved"},
            format="json",
        )

        assert response.status_code == 200
        assert response.data["status"] == ReturnStatus.REFUNDED
        assert response.data["refund_amount"] == "6000.00"

    def test_wrong_merchant_is_403(self, admin_api_client, pending_return, fake_gateway):
        response = admin_api_client.post(
            reverse("returns:return-merchant-review", args=[pending_return.id]),
            {"merchant_id": str(uuid.uuid4()), "decision": "approved"},
            format="json",
        )

        assert response.status_code == 403

    def test_invalid_decision_is_400(self, admin_api_client, pending_return, merchant):
        response = admin_api_client.post(
            reverse("returns:return-merchant-review", args=[pending_return.id]),
            {"merchant_id": str(merchant.id), "decision": "later"},
            format="json",
        )

        assert response.status_code == 400


class TestEscalateAndApproveViews:
    def test_escalate_then_approve(self, admin_api_client, pending_return, admin_user, fake_gateway):
        escalate = admin_api_client.post(
            reverse("returns:return-escalate", args=[pending_return.id]),
            {"notes": "Merchant unresponsive"},
            format="json",
        )
        approve = admin_api_client.post(reverse("returns:return-approve", args=[pending_return.id]))

        assert escalate.status_code == 200
        assert escalate.data["status"] == ReturnStatus.ADMIN_REVIEW
        assert approve.status_code == 200
        assert approve.data["status"] == ReturnStatus.REFUNDED
        assert approve.data["reviewed_by"] == str(admin_user.pk)

    def test_approve_pending_is_400(self, admin_api_client, pending_return, fake_gateway):
        response = admin_api_client.post(reverse("returns:return-approve", args=[pending_return.id]))

        assert response.status_code == 400
        assert response.data["error_code"] == "INVALID_RETURN_STATE"

    def test_refund_failure_is_502(self, admin_api_client, return_in, fake_gateway):
        escalated = return_in(ReturnStatus.ADMIN_REVIEW)
        fake_gateway.refund_error = PaystackAPIUnavailableError("Paystack is down")

        response = admin_api_client.post(reverse("returns:return-approve", args=[escalated.id]))

        assert response.status_code == 502
        assert response.data["error_code"] == "REFUND_PROCESSING_FAILED"
        assert ReturnRequest.objects.get(id=escalated.id).status == ReturnStatus.ADMIN_APPROVED

    def test_unknown_return_is_404(self, admin_api_client, db):
        response = admin_api_client.post(reverse("returns:return-escalate", args=[uuid.uuid4()]))

        assert response.status_code == 404


class TestRetryRefundView:
    def test_retry_after_failed_refund(self, admin_api_client, return_in, fake_gateway):
        escalated = return_in(ReturnStatus.ADMIN_REVIEW)
        fake_gateway.refund_error = PaystackAPIUnavailableError("Paystack is down")
        failed = admin_api_client.post(reverse("returns:return-approve", args=[escalated.id]))

        fake_gateway.refund_error = None
        retried = admin_api_client.post(reverse("returns:return-refund", args=[escalated.id]))

        assert failed.status_code == 502
        assert retried.status_code == 200
        assert retried.data["status"] == ReturnStatus.REFUNDED
        assert len(fake_gateway.calls_to("create_refund")) == 2

    def test_unapproved_is_400(self, admin_api_client, pending_return, fake_gateway):
        response = admin_api_client.post(reverse("returns:return-refund", args=[pending_return.id]))

        assert response.status_code == 400
        assert response.data["error_code"] == "INVALID_RETURN_STATE"

    def test_unknown_return_is_404(self, admin_api_client, db, fake_gateway):
        response = admin_api_client.post(reverse("returns:return-refund", args=[uuid.uuid4()]))

        assert response.status_code == 404
