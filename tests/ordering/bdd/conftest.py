"""Shared BDD fixtures and step definitions for the Ordering domain."""

import pytest
from ordering.errors import InvalidTransition
from ordering.order.events import (
    OrderCancelled,
    OrderCreated,
    OrderFullyRefunded,
    OrderShipped,
    OrderStatusChanged,
    PaymentStatusRecorded,
    RefundIssued,
)
from ordering.order.order import Order
from pytest_bdd import given, parsers, then

# Map event name strings to classes for dynamic lookup in Then steps
_EVENT_CLASSES = {
    "OrderCreated": OrderCreated,
    "PaymentStatusRecorded": PaymentStatusRecorded,
    "OrderStatusChanged": OrderStatusChanged,
    "OrderShipped": OrderShipped,
    "OrderCancelled": OrderCancelled,
    "RefundIssued": RefundIssued,
    "OrderFullyRefunded": OrderFullyRefunded,
}

# Shortest path from pending to each status
_PATHS = {
    "pending": [],
    "processing": ["processing"],
    "awaiting_shipment": ["processing", "awaiting_shipment"],
    "shipped": ["processing", "shipped"],
    "out_for_delivery": ["processing", "shipped", "out_for_delivery"],
    "delivered": ["processing", "shipped", "delivered"],
    "cancelled": ["cancelled"],
    "returned": ["processing", "shipped", "delivered", "returned"],
}


def _place(total):
    return Order.create(
        customer_id="cust-001",
        customer_email="ada@example.com",
        items_data=[{"product_id": "prod-001", "product_name": "Widget", "quantity": 1, "unit_price": total}],
    )


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------
@pytest.fixture()
def error():
    """Container for captured domain errors."""
    return {"exc": None}


# ---------------------------------------------------------------------------
# Given steps
# ---------------------------------------------------------------------------
@given("a placed order", target_fixture="order")
def placed_order():
    order = _place(50.0)
    order._events.clear()
    return order


@given(parsers.cfparse("a paid order totalling {total:f}"), target_fixture="order")
def paid_order(total):
    order = _place(total)
    order.record_payment_status("completed")
    order._events.clear()
    return order


@given(parsers.cfparse("an unpaid order totalling {total:f}"), target_fixture="order")
def unpaid_order(total):
    order = _place(total)
    order._events.clear()
    return order


@given(parsers.cfparse('the order is "{status}"'))
def order_is_in_status(order, status):
    for step in _PATHS[status]:
        if step == "shipped":
            order.change_status(step, actor_id="admin-1", tracking_number="TRACK-001", carrier="UPS")
        else:
            order.change_status(step, actor_id="admin-1")
    order._events.clear()


# ---------------------------------------------------------------------------
# Then steps (shared)
# ---------------------------------------------------------------------------
@then(parsers.cfparse('the order status is "{status}"'))
def order_status_is(order, status):
    assert order.status == status


@then("the action fails with an invalid transition")
def fails_with_invalid_transition(error):
    assert error["exc"] is not None, "Expected an invalid transition but none was raised"
    assert isinstance(error["exc"], InvalidTransition)


@then(parsers.cfparse("a {event_type} event is raised"))
def generic_event_raised(order, event_type):
    event_cls = _EVENT_CLASSES[event_type]
    assert any(
        isinstance(e, event_cls) for e in order._events
    ), f"No {event_type} event found. Events: {[type(e).__name__ for e in order._events]}"


@then(parsers.cfparse("an {event_type} event is raised"))
def generic_event_raised_an(order, event_type):
    generic_event_raised(order, event_type)
