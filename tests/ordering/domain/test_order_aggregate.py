"""Tests for the Order aggregate: creation, status changes and invariants."""

import pytest
from ordering.errors import InvalidTransition, MissingTrackingInfo
from ordering.order.events import OrderCancelled, OrderCreated, OrderShipped, OrderStatusChanged
from ordering.order.order import Order, PaymentStatus, RefundStatus, StatusChange
from ordering.order.transitions import OrderStatus
from protean.exceptions import ValidationError

ITEMS = [
    {"product_id": "prod-001", "product_name": "Widget", "quantity": 2, "unit_price": 25.0},
    {"product_id": "prod-002", "product_name": "Gadget", "quantity": 1, "unit_price": 10.5},
]


def _order(**overrides):
    kwargs = {
        "customer_id": "cust-001",
        "customer_email": "ada@example.com",
        "items_data": ITEMS,
        "tax": 5.0,
        "shipping": 4.5,
        "discount": 10.0,
        "actor_id": "cust-001",
    }
    kwargs.update(overrides)
    return Order.create(**kwargs)


def _advance(order, *statuses):
    for status in statuses:
        if status == "shipped":
            order.change_status(status, actor_id="admin-1", tracking_number="1Z999", carrier="UPS")
        else:
            order.change_status(status, actor_id="admin-1")
    return order


class TestOrderCreation:
    def test_totals(self):
        order = _order()
        assert order.subtotal == 60.5
        assert order.total_amount == 60.0  # 60.50 + 5.00 + 4.50 - 10.00
        assert order.items[0].total_price == 50.0

    def test_initial_state(self):
        order = _order()
        assert order.status == OrderStatus.PENDING.value
        assert order.payment_status == PaymentStatus.PENDING.value
        assert order.refund_status == RefundStatus.NONE.value
        assert order.total_refunded_amount == 0.0
        assert order.order_date is not None

    def test_order_number_format(self):
        order = _order()
        prefix, millis, suffix = order.order_number.split("-")
        assert prefix == "ORD"
        assert len(millis) == 8 and millis.isdigit()
        assert len(suffix) == 3 and suffix.isdigit()

    def test_single_creation_history_entry(self):
        history = _order().history()
        assert len(history) == 1
        assert history[0].status == "pending"
        assert history[0].note == "Order created"
        assert history[0].sequence == 1

    def test_raises_order_created(self):
        order = _order()
        assert isinstance(order._events[-1], OrderCreated)

    def test_empty_items_rejected(self):
        with pytest.raises(ValidationError):
            _order(items_data=[])

    def test_quantity_limit(self):
        with pytest.raises(ValidationError):
            _order(items_data=[{"product_id": "p", "product_name": "X", "quantity": 100, "unit_price": 1.0}])

    def test_discount_cannot_make_total_negative(self):
        with pytest.raises(ValidationError):
            _order(discount=500.0)


class TestChangeStatus:
    def test_appends_history_and_keeps_items(self):
        order = _order()
        items_before = [(i.product_id, i.quantity, i.unit_price) for i in order.items]

        order.change_status("processing", actor_id="admin-1")

        assert order.status == "processing"
        history = order.history()
        assert len(history) == 2
        assert history[-1].status == "processing"
        assert history[-1].actor_id == "admin-1"
        assert history[-1].note == "Status changed from pending to processing by admin"
        assert [(i.product_id, i.quantity, i.unit_price) for i in order.items] == items_before

    def test_custom_note_is_kept(self):
        order = _order()
        order.change_status("processing", actor_id="admin-1", note="  Picked by warehouse  ")
        assert order.history()[-1].note == "Picked by warehouse"

    def test_invalid_transition_leaves_order_untouched(self):
        order = _order()
        with pytest.raises(InvalidTransition) as exc:
            order.change_status("delivered", actor_id="admin-1")
        assert exc.value.messages == {"status": ["Invalid status transition from pending to delivered"]}
        assert order.status == "pending"
        assert len(order.history()) == 1

    def test_unknown_status_is_an_invalid_transition(self):
        order = _order()
        with pytest.raises(InvalidTransition):
            order.change_status("refunded", actor_id="admin-1")

    def test_shipped_requires_tracking(self):
        order = _advance(_order(), "processing")
        with pytest.raises(MissingTrackingInfo):
            order.change_status("shipped", actor_id="admin-1", tracking_number="   ", carrier="UPS")
        assert order.status == "processing"

    def test_shipped_records_tracking(self):
        order = _advance(_order(), "processing")
        order.change_status(
            "shipped",
            actor_id="admin-1",
            tracking_number=" 1Z999 ",
            carrier=" UPS ",
            tracking_url="https://www.ups.com/track?tracknum=1Z999",
        )
        assert order.tracking_number == "1Z999"
        assert order.carrier == "UPS"
        assert order.tracking_url == "https://www.ups.com/track?tracknum=1Z999"
        assert any(isinstance(e, OrderShipped) for e in order._events)

    def test_delivered_stamps_delivered_at(self):
        order = _advance(_order(), "processing", "shipped")
        assert order.delivered_at is None
        order.change_status("delivered", actor_id="admin-1")
        assert order.delivered_at is not None

    def test_cancel_raises_cancelled_event(self):
        order = _order()
        order.change_status("cancelled", actor_id="admin-1")
        assert any(isinstance(e, OrderCancelled) for e in order._events)
        changed = [e for e in order._events if isinstance(e, OrderStatusChanged)]
        assert changed[-1].previous_status == "pending"
        assert changed[-1].new_status == "cancelled"

    def test_history_sequence_is_gap_free(self):
        order = _advance(_order(), "processing", "awaiting_shipment", "shipped", "out_for_delivery", "delivered")
        assert [entry.sequence for entry in order.history()] == [1, 2, 3, 4, 5, 6]
        assert order.history()[-1].status == order.status

    def test_terminal_status_accepts_nothing(self):
        order = _order()
        order.change_status("cancelled", actor_id="admin-1")
        for status in OrderStatus:
            with pytest.raises(InvalidTransition):
                order.change_status(status.value, actor_id="admin-1")


class TestInvariants:
    def test_latest_history_entry_must_match_status(self):
        order = _order()
        with pytest.raises(ValidationError):
            order.add_status_history(
                StatusChange(sequence=2, status="shipped", timestamp=order.order_date, note="tampered")
            )

    def test_refunded_amount_cannot_exceed_total(self):
        order = _order()
        with pytest.raises(ValidationError):
            order.total_refunded_amount = 60.01


class TestReadHelpers:
    def test_status_display(self):
        order = _advance(_order(), "processing", "shipped", "out_for_delivery")
        assert order.status_display() == "Out for Delivery"

    def test_snapshot_has_ordered_history(self):
        order = _advance(_order(), "processing")
        snapshot = order.to_snapshot()
        assert [entry["status"] for entry in snapshot["status_history"]] == ["pending", "processing"]
        assert snapshot["refund_history"] == []
        assert snapshot["is_refund_eligible"] is False
        assert snapshot["max_refundable_amount"] == 60.0
