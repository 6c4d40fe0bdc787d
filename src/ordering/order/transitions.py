"""Order status state machine: the allowed-successor table.

Pure data and a pure lookup: no persistence, no domain context. The table is
the only place that decides whether a status change is legal; the Order
aggregate and the status workflow both consult it before mutating anything.

    pending            → processing, cancelled
    processing         → awaiting_shipment, shipped, cancelled
    awaiting_shipment  → shipped, cancelled
    shipped            → out_for_delivery, delivered, cancelled
    out_for_delivery   → delivered, cancelled
    delivered          → returned
    cancelled          (terminal)
    returned           (terminal)
"""

from enum import Enum


class OrderStatus(Enum):
    PENDING = "pending"
    PROCESSING = "processing"
    AWAITING_SHIPMENT = "awaiting_shipment"
    SHIPPED = "shipped"
    OUT_FOR_DELIVERY = "out_for_delivery"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"
    RETURNED = "returned"


VALID_TRANSITIONS: dict[OrderStatus, frozenset[OrderStatus]] = {
    OrderStatus.PENDING: frozenset({OrderStatus.PROCESSING, OrderStatus.CANCELLED}),
    OrderStatus.PROCESSING: frozenset(
        {OrderStatus.AWAITING_SHIPMENT, OrderStatus.SHIPPED, OrderStatus.CANCELLED}
    ),
    OrderStatus.AWAITING_SHIPMENT: frozenset({OrderStatus.SHIPPED, OrderStatus.CANCELLED}),
    OrderStatus.SHIPPED: frozenset(
        {OrderStatus.OUT_FOR_DELIVERY, OrderStatus.DELIVERED, OrderStatus.CANCELLED}
    ),
    OrderStatus.OUT_FOR_DELIVERY: frozenset({OrderStatus.DELIVERED, OrderStatus.CANCELLED}),
    OrderStatus.DELIVERED: frozenset({OrderStatus.RETURNED}),
    OrderStatus.CANCELLED: frozenset(),  # Terminal
    OrderStatus.RETURNED: frozenset(),  # Terminal
}

TERMINAL_STATUSES = frozenset(status for status, successors in VALID_TRANSITIONS.items() if not successors)


def parse_status(value) -> OrderStatus | None:
    """Return the OrderStatus for ``value``, or None for unknown tokens."""
    if isinstance(value, OrderStatus):
        return value
    try:
        return OrderStatus(value)
    except ValueError:
        return None


def allowed_successors(current) -> frozenset[OrderStatus]:
    """Statuses reachable in one step from ``current`` (empty for unknown)."""
    status = parse_status(current)
    if status is None:
        return frozenset()
    return VALID_TRANSITIONS[status]


def is_allowed(current, requested) -> bool:
    """True when ``current → requested`` is listed in the table.

    Self transitions and unknown tokens on either side are denied.
    """
    target = parse_status(requested)
    if target is None:
        return False
    return target in allowed_successors(current)
