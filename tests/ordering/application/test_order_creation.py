"""Application tests for order placement and payment recording."""

import json

import pytest
from ordering.errors import OrderNotFound
from ordering.order.creation import CreateOrder
from ordering.order.order import Order
from ordering.order.payment import RecordPaymentStatus
from ordering.order.repository import load_order
from protean import current_domain
from protean.exceptions import ValidationError


class TestCreateOrder:
    def test_persisted_with_history(self, place_order):
        order_id = place_order(tax=2.0, shipping=3.0)
        order = current_domain.repository_for(Order).get(order_id)

        assert order.status == "pending"
        assert order.total_amount == 55.0
        assert order.customer_email == "ada@example.com"
        assert order.shipping_address.city == "London"
        assert order.billing_address == order.shipping_address
        assert [entry.note for entry in order.history()] == ["Order created"]

    def test_item_quantity_out_of_range(self):
        with pytest.raises(ValidationError):
            current_domain.process(
                CreateOrder(
                    customer_id="cust-001",
                    customer_email="ada@example.com",
                    items=json.dumps([{"product_id": "p", "product_name": "X", "quantity": 0, "unit_price": 1.0}]),
                ),
                asynchronous=False,
            )


class TestRecordPaymentStatus:
    def test_completed(self, place_order):
        order_id = place_order()
        current_domain.process(
            RecordPaymentStatus(order_id=order_id, payment_status="completed"),
            asynchronous=False,
        )
        assert load_order(order_id).payment_status == "completed"

    def test_payment_axis_leaves_fulfillment_alone(self, place_order):
        order_id = place_order(paid=True)
        order = load_order(order_id)
        assert order.status == "pending"
        assert len(order.history()) == 1

    def test_unknown_order(self):
        with pytest.raises(OrderNotFound):
            current_domain.process(
                RecordPaymentStatus(order_id="missing-order", payment_status="completed"),
                asynchronous=False,
            )


def test_load_order_raises_not_found():
    with pytest.raises(OrderNotFound) as exc:
        load_order("does-not-exist")
    assert exc.value.messages == {"order_id": ["Order not found"]}
