"""Tests for the order status transition table."""

from itertools import product

import pytest
from ordering.order.transitions import (
    TERMINAL_STATUSES,
    VALID_TRANSITIONS,
    OrderStatus,
    allowed_successors,
    is_allowed,
    parse_status,
)

EXPECTED = {
    ("pending", "processing"),
    ("pending", "cancelled"),
    ("processing", "awaiting_shipment"),
    ("processing", "shipped"),
    ("processing", "cancelled"),
    ("awaiting_shipment", "shipped"),
    ("awaiting_shipment", "cancelled"),
    ("shipped", "out_for_delivery"),
    ("shipped", "delivered"),
    ("shipped", "cancelled"),
    ("out_for_delivery", "delivered"),
    ("out_for_delivery", "cancelled"),
    ("delivered", "returned"),
}

ALL_STATUSES = [status.value for status in OrderStatus]


class TestTransitionTable:
    def test_every_status_has_an_entry(self):
        assert set(VALID_TRANSITIONS) == set(OrderStatus)

    @pytest.mark.parametrize("current,requested", list(product(ALL_STATUSES, ALL_STATUSES)))
    def test_pair_is_allowed_only_when_listed(self, current, requested):
        assert is_allowed(current, requested) == ((current, requested) in EXPECTED)

    def test_self_transitions_are_denied(self):
        for status in OrderStatus:
            assert not is_allowed(status, status)

    def test_terminal_statuses(self):
        assert TERMINAL_STATUSES == {OrderStatus.CANCELLED, OrderStatus.RETURNED}
        assert allowed_successors("cancelled") == frozenset()
        assert allowed_successors("returned") == frozenset()

    def test_enum_members_and_strings_are_interchangeable(self):
        assert is_allowed(OrderStatus.PENDING, "processing")
        assert is_allowed("pending", OrderStatus.PROCESSING)


class TestUnknownTokens:
    @pytest.mark.parametrize("token", ["refunded", "Shipped", "", None, "completed"])
    def test_unknown_target_is_denied(self, token):
        assert not is_allowed("pending", token)

    def test_unknown_source_is_denied(self):
        assert not is_allowed("refunded", "processing")
        assert allowed_successors("refunded") == frozenset()

    def test_parse_status(self):
        assert parse_status("shipped") is OrderStatus.SHIPPED
        assert parse_status(OrderStatus.SHIPPED) is OrderStatus.SHIPPED
        assert parse_status("bogus") is None
