"""Domain events for the Order aggregate.

All events are versioned, immutable facts representing state changes. They
are written alongside the aggregate in the same unit of work and feed
downstream consumers (fulfillment, reporting). The audit trail itself lives
on the aggregate (status and refund history), not in these events.
"""

from protean.fields import DateTime, Float, Identifier, Integer, String, Text

from ordering.domain import ordering


@ordering.event(part_of="Order")
class OrderCreated:
    """A new order was placed."""

    __version__ = 1

    order_id = Identifier(required=True)
    order_number = String(required=True)
    customer_id = Identifier(required=True)
    items = Text(required=True)  # JSON: list of item dicts
    total_amount = Float(required=True)
    created_at = DateTime(required=True)


@ordering.event(part_of="Order")
class PaymentStatusRecorded:
    """The payment axis of the order moved to a new value."""

    __version__ = 1

    order_id = Identifier(required=True)
    previous_status = String(required=True)
    payment_status = String(required=True)
    recorded_at = DateTime(required=True)


@ordering.event(part_of="Order")
class OrderStatusChanged:
    """An administrator moved the order to a new fulfillment status."""

    __version__ = 1

    order_id = Identifier(required=True)
    order_number = String(required=True)
    previous_status = String(required=True)
    new_status = String(required=True)
    actor_id = Identifier(required=True)
    note = String(max_length=200)
    sequence = Integer(required=True)
    changed_at = DateTime(required=True)


@ordering.event(part_of="Order")
class OrderShipped:
    """The order was handed to a carrier with tracking information."""

    __version__ = 1

    order_id = Identifier(required=True)
    carrier = String(required=True)
    tracking_number = String(required=True)
    tracking_url = String()
    shipped_at = DateTime(required=True)


@ordering.event(part_of="Order")
class OrderCancelled:
    """The order was cancelled and its items returned to sellable stock."""

    __version__ = 1

    order_id = Identifier(required=True)
    previous_status = String(required=True)
    actor_id = Identifier(required=True)
    items = Text(required=True)  # JSON: list of {product_id, quantity}
    cancelled_at = DateTime(required=True)


@ordering.event(part_of="Order")
class RefundIssued:
    """A refund was appended to the order's refund ledger."""

    __version__ = 1

    order_id = Identifier(required=True)
    refund_id = String(required=True)
    amount = Float(required=True)
    reason = String(required=True)
    actor_id = Identifier(required=True)
    total_refunded_amount = Float(required=True)
    refund_status = String(required=True)
    issued_at = DateTime(required=True)


@ordering.event(part_of="Order")
class OrderFullyRefunded:
    """Cumulative refunds reached the order total."""

    __version__ = 1

    order_id = Identifier(required=True)
    total_amount = Float(required=True)
    total_refunded_amount = Float(required=True)
    refunded_at = DateTime(required=True)
