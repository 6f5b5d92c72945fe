"""
Tests for the Paystack webhook view.

Tests cover:
- Signature verification
- Webhook event creation and idempotency
- Task queuing by event type
- Always acknowledging once the signature is valid
- Relaying verified bodies to the merchant API
"""

import hashlib
import hmac
import json
import logging
from decimal import Decimal
from unittest.mock import patch

from merchants.models import Merchant
from payments.models import Payout, WebhookEvent
from payments.state_machines import PayoutStatus, WebhookEventStatus


class TestPaystackWebhookSignature:
    def test_forged_signature_returns_400(self, post_webhook, transfer_success_body):
        response = post_webhook(transfer_success_body, signature="0" * 128)

        assert response.status_code == 400
        assert WebhookEvent.objects.count() == 0
        assert Payout.objects.get().status == PayoutStatus.PROCESSING

    def test_missing_signature_returns_400(self, post_webhook, transfer_success_body):
        response = post_webhook(transfer_success_body, signature="")

        assert response.status_code == 400

    def test_signature_skipped_without_secret(self, client, settings, db, caplog):
        settings.PAYSTACK_WEBHOOK_SECRET = ""

        with caplog.at_level(logging.WARNING):
            response = client.post(
                "/api/v1/payments/webhooks/paystack/",
                data=json.dumps({"event": "charge.success", "data": {}}),
                content_type="application/json",
            )

        assert response.status_code == 200
        assert "skipping signature verification" in caplog.text

    def test_non_ascii_signature_returns_400(self, post_webhook, transfer_success_body):
        response = post_webhook(transfer_success_body, signature="é" * 128)

        assert response.status_code == 400
        assert WebhookEvent.objects.count() == 0
        assert Payout.objects.get().status == PayoutStatus.PROCESSING

    def test_invalid_json_is_acknowledged(self, post_webhook, db, caplog):
        response = post_webhook(b"not json")

        assert response.status_code == 200
        assert WebhookEvent.objects.count() == 0
        assert "not valid JSON" in caplog.text

    def test_non_object_body_is_acknowledged(self, post_webhook, db, caplog):
        response = post_webhook([{"event": "transfer.success"}])

        assert response.status_code == 200
        assert WebhookEvent.objects.count() == 0
        assert "not a JSON object" in caplog.text

    def test_get_not_allowed(self, client, db):
        response = client.get("/api/v1/payments/webhooks/paystack/")

        assert response.status_code == 405


class TestPaystackWebhookProcessing:
    def test_transfer_success_settles_payout(self, post_webhook, transfer_success_body, merchant):
        response = post_webhook(transfer_success_body)

        assert response.status_code == 200
        assert response.json() == {"status": "success"}
        assert Payout.objects.get().status == PayoutStatus.COMPLETED
        assert Merchant.objects.get(id=merchant.id).total_payouts == Decimal("1200.00")

    def test_event_stored_with_body_hash(self, post_webhook, transfer_success_body):
        raw = json.dumps(transfer_success_body).encode()

        post_webhook(raw)

        event = WebhookEvent.objects.get()
        assert event.idempotency_key == hashlib.sha256(raw).hexdigest()
        assert event.event_type == "transfer.success"
        assert event.status == WebhookEventStatus.PROCESSED
        assert event.payload == transfer_success_body

    def test_duplicate_delivery_is_applied_once(
        self, post_webhook, transfer_success_body, merchant
    ):
        raw = json.dumps(transfer_success_body).encode()

        first = post_webhook(raw)
        second = post_webhook(raw)

        assert first.status_code == second.status_code == 200
        assert WebhookEvent.objects.count() == 1
        assert Merchant.objects.get(id=merchant.id).total_payouts == Decimal("1200.00")

    def test_duplicate_of_processed_event_is_not_queued(self, post_webhook, transfer_success_body):
        raw = json.dumps(transfer_success_body).encode()
        post_webhook(raw)

        with patch("payments.tasks.process_webhook_event.delay") as mock_delay:
            response = post_webhook(raw)

        assert response.status_code == 200
        mock_delay.assert_not_called()

    def test_transfer_failed_releases_payout(self, post_webhook, processing_payout):
        response = post_webhook(
            {
                "event": "transfer.failed",
                "data": {"transfer_code": "TRF_webhook001", "reason": "Account closed"},
            }
        )

        assert response.status_code == 200
        payout = Payout.objects.get(id=processing_payout.id)
        assert payout.status == PayoutStatus.FAILED
        assert payout.splits.count() == 0

    def test_charge_success_is_logged_not_queued(self, post_webhook, db, caplog):
        with patch("payments.tasks.process_webhook_event.delay") as mock_delay:
            with caplog.at_level(logging.INFO):
                response = post_webhook(
                    {"event": "charge.success", "data": {"reference": "txn_1", "amount": 500000}}
                )

        assert response.status_code == 200
        mock_delay.assert_not_called()
        assert "Charge succeeded" in caplog.text
        assert WebhookEvent.objects.get().event_type == "charge.success"

    def test_unknown_event_is_acknowledged(self, post_webhook, db):
        with patch("payments.tasks.process_webhook_event.delay") as mock_delay:
            response = post_webhook({"event": "subscription.create", "data": {}})

        assert response.status_code == 200
        mock_delay.assert_not_called()

    def test_processing_failure_still_returns_200(self, post_webhook, transfer_success_body):
        with patch(
            "payments.tasks.process_webhook_event.delay",
            side_effect=ConnectionError("broker down"),
        ):
            response = post_webhook(transfer_success_body)

        assert response.status_code == 200
        assert WebhookEvent.objects.get().status == WebhookEventStatus.PENDING

    def test_conflicting_event_still_returns_200(self, post_webhook, merchant):
        from payments.tests.factories import PayoutFactory

        PayoutFactory(merchant=merchant, status=PayoutStatus.FAILED, transfer_code="TRF_gone")

        response = post_webhook({"event": "transfer.success", "data": {"transfer_code": "TRF_gone"}})

        assert response.status_code == 200
        event = WebhookEvent.objects.get()
        assert event.status == WebhookEventStatus.FAILED
        assert "already failed" in event.error_message


class TestWebhookForwarding:
    def test_verified_body_is_forwarded_with_signature(
        self, post_webhook, transfer_success_body, settings, mocker
    ):
        settings.MERCHANT_API_WEBHOOK_URL = "https://merchant-api.example.com/webhooks/paystack"
        mock_post = mocker.patch("payments.tasks.requests.post")
        mock_post.return_value.status_code = 200
        raw = json.dumps(transfer_success_body).encode()
        signature = hmac.new(b"whsec_test", raw, hashlib.sha512).hexdigest()

        response = post_webhook(raw)

        assert response.status_code == 200
        args, kwargs = mock_post.call_args
        assert args == ("https://merchant-api.example.com/webhooks/paystack",)
        assert kwargs["data"] == raw
        assert kwargs["headers"]["X-Paystack-Signature"] == signature
        assert Payout.objects.get().status == PayoutStatus.COMPLETED

    def test_forged_body_is_not_forwarded(self, post_webhook, transfer_success_body, settings, mocker):
        settings.MERCHANT_API_WEBHOOK_URL = "https://merchant-api.example.com/webhooks/paystack"
        mock_post = mocker.patch("payments.tasks.requests.post")

        post_webhook(transfer_success_body, signature="0" * 128)

        mock_post.assert_not_called()

    def test_not_forwarded_without_url(self, post_webhook, transfer_success_body, settings, mocker):
        settings.MERCHANT_API_WEBHOOK_URL = ""
        mock_delay = mocker.patch("payments.tasks.forward_webhook_task.delay")

        post_webhook(transfer_success_body)

        mock_delay.assert_not_called()

    def test_queue_failure_still_returns_200(
        self, post_webhook, transfer_success_body, settings, mocker, caplog
    ):
        settings.MERCHANT_API_WEBHOOK_URL = "https://merchant-api.example.com/webhooks/paystack"
        mocker.patch(
            "payments.tasks.forward_webhook_task.delay",
            side_effect=ConnectionError("broker down"),
        )

        response = post_webhook(transfer_success_body)

        assert response.status_code == 200
        assert "Failed to queue webhook forward" in caplog.text
        assert Payout.objects.get().status == PayoutStatus.COMPLETED
