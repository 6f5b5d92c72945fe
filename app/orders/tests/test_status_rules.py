"""
Tests for derive_order_status.
"""

import pytest

from orders.models import FulfillmentStatus as F
from orders.models import OrderStatus as S
from orders.status_rules import derive_order_status


class TestShipped:
    @pytest.mark.parametrize("current", [S.PAID, S.PROCESSING, S.OUT_FOR_DELIVERY, S.SHIPPED])
    def test_all_in_transit_ships(self, current):
        assert derive_order_status(current, [F.SENT_TO_HUB, F.OUT_FOR_DELIVERY]) == S.SHIPPED

    @pytest.mark.parametrize("current", [S.PENDING, S.CANCELLED, S.COMPLETED])
    def test_excluded_statuses_unchanged(self, current):
        assert derive_order_status(current, [F.SENT_TO_HUB]) == current

    def test_one_item_not_in_transit(self):
        assert derive_order_status(S.PROCESSING, [F.SENT_TO_HUB, F.CONFIRMED]) == S.PROCESSING


class TestCompleted:
    @pytest.mark.parametrize("current", [S.PENDING, S.PAID, S.PROCESSING, S.SHIPPED, S.DELIVERED])
    def test_all_delivered_completes(self, current):
        assert derive_order_status(current, [F.DELIVERED, F.DELIVERED]) == S.COMPLETED

    def test_cancelled_is_terminal(self):
        assert derive_order_status(S.CANCELLED, [F.DELIVERED]) == S.CANCELLED

    def test_partially_delivered(self):
        assert derive_order_status(S.SHIPPED, [F.DELIVERED, F.SENT_TO_HUB]) == S.SHIPPED


class TestUnchanged:
    def test_no_items(self):
        assert derive_order_status(S.PROCESSING, []) == S.PROCESSING

    def test_declined_item_blocks_both_rules(self):
        assert derive_order_status(S.PROCESSING, [F.DELIVERED, F.DECLINED]) == S.PROCESSING

    @pytest.mark.parametrize("current", [S.PAID, S.PROCESSING])
    def test_declined_and_confirmed_items(self, current):
        assert derive_order_status(current, [F.DECLINED, F.CONFIRMED]) == current

    @pytest.mark.parametrize(
        "items",
        [[F.PROCESSING], [F.CONFIRMED], [F.DECLINED], [F.CONFIRMED, F.SENT_TO_HUB]],
    )
    def test_items_not_yet_in_transit(self, items):
        assert derive_order_status(S.PAID, items) == S.PAID

    def test_accepts_plain_strings(self):
        assert derive_order_status("paid", ["sent_to_hub", "out_for_delivery"]) == "shipped"

    def test_accepts_generator(self):
        statuses = (s for s in [F.DELIVERED])
        assert derive_order_status(S.SHIPPED, statuses) == S.COMPLETED
