"""
Tests for the merchant administration API.
"""

import uuid

from django.urls import reverse

from merchants.models import ApplicationStatus, MerchantStatus
from merchants.tests.factories import MerchantFactory
from payments.exceptions import PaystackAPIUnavailableError


class TestApplicationViews:
    def test_list_filters_by_status(self, admin_api_client, application, approved_application):
        response = admin_api_client.get(reverse("merchants:application-list"), {"status": "pending"})

        assert response.status_code == 200
        assert [a["id"] for a in response.data["results"]] == [str(application.id)]

    def test_approve(self, admin_api_client, application, admin_user):
        response = admin_api_client.post(
            reverse("merchants:application-approve", args=[application.id])
        )

        assert response.status_code == 201
        assert response.data["status"] == MerchantStatus.ACTIVE
        assert response.data["commission_rate"] == "5.00"
        assert response.data["has_recipient"] is False

    def test_approve_processed_application_is_400(self, admin_api_client, approved_application):
        response = admin_api_client.post(
            reverse("merchants:application-approve", args=[approved_application.id])
        )

        assert response.status_code == 400
        assert response.data == {
            "error": "Application already processed",
            "error_code": "APPLICATION_ALREADY_PROCESSED",
        }

    def test_approve_unknown_is_404(self, admin_api_client, db):
        response = admin_api_client.post(reverse("merchants:application-approve", args=[uuid.uuid4()]))

        assert response.status_code == 404

    def test_reject_requires_reason(self, admin_api_client, application):
        response = admin_api_client.post(
            reverse("merchants:application-reject", args=[application.id]), {}, format="json"
        )

        assert response.status_code == 400

    def test_reject(self, admin_api_client, application):
        response = admin_api_client.post(
            reverse("merchants:application-reject", args=[application.id]),
            {"reason": "Incomplete documents"},
            format="json",
        )

        assert response.status_code == 200
        assert response.data["status"] == ApplicationStatus.REJECTED

    def test_request_info(self, admin_api_client, application):
        response = admin_api_client.post(
            reverse("merchants:application-request-info", args=[application.id]),
            {"message": "Please upload your CAC certificate"},
            format="json",
        )

        assert response.status_code == 200
        assert response.data["status"] == ApplicationStatus.MORE_INFO

    def test_requires_admin(self, api_client, application):
        response = api_client.post(reverse("merchants:application-approve", args=[application.id]))

        assert response.status_code in (401, 403)


class TestMerchantViews:
    def test_suspend(self, admin_api_client, merchant):
        response = admin_api_client.post(
            reverse("merchants:merchant-suspend", args=[merchant.id]),
            {"reason": "Repeated fulfillment failures"},
            format="json",
        )

        assert response.status_code == 200
        assert response.data["status"] == MerchantStatus.SUSPENDED

    def test_commission_tier(self, admin_api_client, merchant):
        response = admin_api_client.post(
            reverse("merchants:merchant-commission-tier", args=[merchant.id]),
            {"tier": "premium"},
            format="json",
        )

        assert response.status_code == 200
        assert response.data["commission_rate"] == "3.00"

    def test_invalid_tier_is_400(self, admin_api_client, merchant):
        response = admin_api_client.post(
            reverse("merchants:merchant-commission-tier", args=[merchant.id]),
            {"tier": "gold"},
            format="json",
        )

        assert response.status_code == 400


class TestBankDetailsView:
    def url(self, merchant):
        return reverse("merchants:merchant-bank-details", args=[merchant.id])

    def test_registers(self, admin_api_client, merchant, fake_gateway):
        response = admin_api_client.post(
            self.url(merchant),
            {"bank_code": "058", "account_number": "0123456789"},
            format="json",
        )

        assert response.status_code == 201
        assert response.data["recipient_code"] == "RCP_0123456789"
        assert response.data["account_number"] != "0123456789"

    def test_bank_code_must_be_three_digits(self, admin_api_client, merchant, fake_gateway):
        response = admin_api_client.post(
            self.url(merchant),
            {"bank_code": "58", "account_number": "0123456789"},
            format="json",
        )

        assert response.status_code == 400
        assert "bank_code" in response.data
        assert fake_gateway.calls == []

    def test_gateway_failure_is_400(self, admin_api_client, merchant, fake_gateway):
        fake_gateway.recipient_error = PaystackAPIUnavailableError("Paystack is down")

        response = admin_api_client.post(
            self.url(merchant),
            {"bank_code": "058", "account_number": "0123456789"},
            format="json",
        )

        assert response.status_code == 400
        assert response.data["error_code"] == "PAYSTACK_UNAVAILABLE"


class TestMerchantListView:
    def test_list_filters_by_status(self, admin_api_client, merchant):
        MerchantFactory(status=MerchantStatus.SUSPENDED)

        response = admin_api_client.get(reverse("merchants:merchant-list"), {"status": "active"})

        assert response.status_code == 200
        assert [m["id"] for m in response.data["results"]] == [str(merchant.id)]

    def test_requires_admin(self, api_client, db):
        response = api_client.get(reverse("merchants:merchant-list"))

        assert response.status_code in (401, 403)


class TestBankListView:
    url = "/api/v1/merchants/banks/"

    def test_lists_banks(self, admin_api_client, fake_gateway):
        response = admin_api_client.get(self.url, {"country": "nigeria"})

        assert response.status_code == 200
        assert [bank["code"] for bank in response.data] == ["044", "058"]
        assert fake_gateway.calls_to("list_banks") == [{"country": "nigeria"}]

    def test_unsupported_country_is_400(self, admin_api_client, fake_gateway):
        response = admin_api_client.get(self.url, {"country": "france"})

        assert response.status_code == 400
        assert "country" in response.data
        assert fake_gateway.calls == []

    def test_gateway_failure_without_cache_is_502(self, admin_api_client, fake_gateway):
        fake_gateway.banks_error = PaystackAPIUnavailableError("Paystack is down")

        response = admin_api_client.get(self.url)

        assert response.status_code == 502
        assert response.data["error_code"] == "PAYSTACK_UNAVAILABLE"
