"""Order aggregate (CQRS): the order record, its audit trail and refund ledger.

The Order is a standard CQRS aggregate (not event sourced). The fulfillment
status and the payment status are two independent axes. Every status change
appends a ``StatusChange`` entry and every refund appends a ``RefundEntry``;
neither list is ever rewritten.

    status          pending → processing → (awaiting_shipment) → shipped
                    → (out_for_delivery) → delivered → returned
                    cancelled from anything before delivered
    payment_status  pending, completed, failed, refunded, ...
    refund_status   none → partial_refunded → fully_refunded
"""

import json
import random
import secrets
import string
import time
from datetime import UTC, datetime
from enum import Enum

from protean import atomic_change, invariant
from protean.exceptions import ValidationError
from protean.fields import DateTime, Float, HasMany, Identifier, Integer, String, ValueObject

from ordering.domain import ordering
from ordering.errors import (
    InvalidPaymentState,
    InvalidTransition,
    MissingTrackingInfo,
    RefundExceedsLimit,
)
from ordering.order.events import (
    OrderCancelled,
    OrderCreated,
    OrderFullyRefunded,
    OrderShipped,
    OrderStatusChanged,
    PaymentStatusRecorded,
    RefundIssued,
)
from ordering.order.transitions import OrderStatus, is_allowed, parse_status
from ordering.shared.money import ZERO, format_money, parse_amount, to_float, to_money

NOTE_MAX_LENGTH = 200


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------
class PaymentStatus(Enum):
    PENDING = "pending"
    COMPLETED = "completed"
    FAILED = "failed"
    REFUNDED = "refunded"
    AWAITING_CONFIRMATION = "awaiting_confirmation"
    UNDERPAID = "underpaid"
    EXPIRED = "expired"


class RefundStatus(Enum):
    NONE = "none"
    PARTIAL_REFUNDED = "partial_refunded"
    FULLY_REFUNDED = "fully_refunded"
    PENDING_REFUND = "pending_refund"


class RefundEntryStatus(Enum):
    PENDING = "pending"
    SUCCEEDED = "succeeded"
    FAILED = "failed"
    CANCELED = "canceled"


# A fully refunded payment stays captured, so further requests fail on the balance.
_CAPTURED_PAYMENT_STATES = frozenset({PaymentStatus.COMPLETED.value, PaymentStatus.REFUNDED.value})

_STATUS_DISPLAY = {
    OrderStatus.PENDING: "Pending",
    OrderStatus.PROCESSING: "Processing",
    OrderStatus.AWAITING_SHIPMENT: "Awaiting Shipment",
    OrderStatus.SHIPPED: "Shipped",
    OrderStatus.OUT_FOR_DELIVERY: "Out for Delivery",
    OrderStatus.DELIVERED: "Delivered",
    OrderStatus.CANCELLED: "Cancelled",
    OrderStatus.RETURNED: "Returned",
}


def display_status(status) -> str:
    """Human readable status label, e.g. ``Out for Delivery``."""
    return _STATUS_DISPLAY.get(parse_status(status), status)


def generate_order_number() -> str:
    """Human readable order number, e.g. ``ORD-12345678-042``."""
    millis = str(int(time.time() * 1000))[-8:]
    return f"ORD-{millis}-{random.randint(0, 999):03d}"


def generate_refund_id() -> str:
    alphabet = string.ascii_lowercase + string.digits
    suffix = "".join(secrets.choice(alphabet) for _ in range(9))
    return f"refund_{int(time.time() * 1000)}_{suffix}"


def validate_refund_request(amount, reason):
    """Check the shape of a refund request before any order is loaded.

    Returns the parsed ``Decimal`` amount and the trimmed reason.
    """
    try:
        parsed = parse_amount(amount)
    except (ValueError, ArithmeticError):
        raise ValidationError({"amount": ["Refund amount must be a positive number"]}) from None
    if parsed <= ZERO:
        raise ValidationError({"amount": ["Refund amount must be a positive number"]})

    cleaned_reason = reason.strip() if isinstance(reason, str) else ""
    if not cleaned_reason:
        raise ValidationError({"reason": ["Refund reason is required"]})

    return parsed, cleaned_reason


def _clean(value):
    if value is None:
        return None
    value = str(value).strip()
    return value or None


# ---------------------------------------------------------------------------
# Value Objects
# ---------------------------------------------------------------------------
@ordering.value_object(part_of="Order")
class Address:
    """A delivery or billing address captured when the order was placed."""

    first_name = String(required=True, max_length=50)
    last_name = String(required=True, max_length=50)
    address_line1 = String(required=True, max_length=100)
    address_line2 = String(max_length=100)
    city = String(required=True, max_length=50)
    state_province = String(required=True, max_length=50)
    postal_code = String(required=True, max_length=20)
    country = String(required=True, max_length=50)
    phone_number = String(max_length=20)


# ---------------------------------------------------------------------------
# Entities
# ---------------------------------------------------------------------------
@ordering.entity(part_of="Order")
class OrderItem:
    """A line item. Prices are locked when the order is placed."""

    product_id = Identifier(required=True)
    product_name = String(required=True, max_length=100)
    quantity = Integer(required=True, min_value=1, max_value=99)
    unit_price = Float(required=True, min_value=0.0)
    total_price = Float(required=True, min_value=0.0)


@ordering.entity(part_of="Order")
class StatusChange:
    """One entry of the order's status history."""

    sequence = Integer(required=True, min_value=1)
    status = String(required=True, choices=OrderStatus)
    timestamp = DateTime(required=True)
    actor_id = Identifier()
    note = String(max_length=NOTE_MAX_LENGTH)


@ordering.entity(part_of="Order")
class RefundEntry:
    """One entry of the refund ledger."""

    sequence = Integer(required=True, min_value=1)
    refund_id = String(required=True, max_length=255)
    amount = Float(required=True, min_value=0.01)
    date = DateTime(required=True)
    reason = String(required=True, max_length=500)
    actor_id = Identifier(required=True)
    status = String(choices=RefundEntryStatus, default=RefundEntryStatus.SUCCEEDED.value)

    def to_snapshot(self) -> dict:
        return {
            "refund_id": self.refund_id,
            "amount": self.amount,
            "date": self.date,
            "reason": self.reason,
            "actor_id": self.actor_id,
            "status": self.status,
        }


# ---------------------------------------------------------------------------
# Aggregate Root
# ---------------------------------------------------------------------------
@ordering.aggregate
class Order:
    order_number = String(required=True, max_length=20, unique=True)
    customer_id = Identifier(required=True)
    customer_email = String(required=True, max_length=255)
    status = String(choices=OrderStatus, default=OrderStatus.PENDING.value)
    items = HasMany(OrderItem)
    shipping_address = ValueObject(Address)
    billing_address = ValueObject(Address)
    subtotal = Float(default=0.0, min_value=0.0)
    tax = Float(default=0.0, min_value=0.0)
    shipping = Float(default=0.0, min_value=0.0)
    discount = Float(default=0.0, min_value=0.0)
    total_amount = Float(default=0.0, min_value=0.0)
    payment_method = String(max_length=50)
    payment_status = String(choices=PaymentStatus, default=PaymentStatus.PENDING.value)
    tracking_number = String(max_length=100)
    tracking_url = String(max_length=500)
    carrier = String(max_length=100)
    refund_status = String(choices=RefundStatus, default=RefundStatus.NONE.value)
    total_refunded_amount = Float(default=0.0)
    status_history = HasMany(StatusChange)
    refund_history = HasMany(RefundEntry)
    order_date = DateTime()
    delivered_at = DateTime()
    updated_at = DateTime()

    @invariant.post
    def latest_history_entry_matches_status(self):
        # An order under construction has no history yet; ``create`` adds it.
        if not self.status_history:
            return
        latest = max(self.status_history, key=lambda entry: entry.sequence)
        if latest.status != self.status:
            raise ValidationError(
                {"status_history": [f"Latest history entry is {latest.status} but order is {self.status}"]}
            )

    @invariant.post
    def refunds_cannot_exceed_total(self):
        refunded = to_money(self.total_refunded_amount)
        if refunded < ZERO or refunded > to_money(self.total_amount):
            raise ValidationError({"total_refunded_amount": ["Total refunded amount must be between 0 and order total"]})

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def create(
        cls,
        customer_id,
        customer_email,
        items_data,
        shipping_address=None,
        billing_address=None,
        tax=0.0,
        shipping=0.0,
        discount=0.0,
        payment_method=None,
        actor_id=None,
    ):
        """Place a new order.

        Args:
            items_data: List of dicts with product_id, product_name,
                        quantity, unit_price.
            shipping_address / billing_address: Dicts matching ``Address``.
        """
        if not items_data:
            raise ValidationError({"items": ["Order must contain at least one item"]})

        lines = []
        subtotal = ZERO
        for item in items_data:
            line_total = to_money(item["unit_price"]) * int(item["quantity"])
            subtotal += line_total
            lines.append({**item, "total_price": to_float(line_total)})

        total = subtotal + to_money(tax) + to_money(shipping) - to_money(discount)
        if total < ZERO:
            raise ValidationError({"discount": ["Discount cannot exceed the order value"]})

        billing = billing_address or shipping_address
        now = datetime.now(UTC)
        order = cls(
            order_number=generate_order_number(),
            customer_id=customer_id,
            customer_email=customer_email,
            status=OrderStatus.PENDING.value,
            shipping_address=Address(**shipping_address) if shipping_address else None,
            billing_address=Address(**billing) if billing else None,
            subtotal=to_float(subtotal),
            tax=to_float(to_money(tax)),
            shipping=to_float(to_money(shipping)),
            discount=to_float(to_money(discount)),
            total_amount=to_float(total),
            payment_method=payment_method,
            payment_status=PaymentStatus.PENDING.value,
            refund_status=RefundStatus.NONE.value,
            total_refunded_amount=0.0,
            order_date=now,
            updated_at=now,
        )

        with atomic_change(order):
            for line in lines:
                order.add_items(
                    OrderItem(
                        product_id=line["product_id"],
                        product_name=line["product_name"],
                        quantity=line["quantity"],
                        unit_price=line["unit_price"],
                        total_price=line["total_price"],
                    )
                )
            order.add_status_history(
                StatusChange(
                    sequence=1,
                    status=OrderStatus.PENDING.value,
                    timestamp=now,
                    actor_id=actor_id,
                    note="Order created",
                )
            )

        order.raise_(
            OrderCreated(
                order_id=str(order.id),
                order_number=order.order_number,
                customer_id=str(customer_id),
                items=json.dumps(
                    [
                        {
                            "product_id": str(line["product_id"]),
                            "product_name": line["product_name"],
                            "quantity": line["quantity"],
                            "unit_price": line["unit_price"],
                        }
                        for line in lines
                    ]
                ),
                total_amount=order.total_amount,
                created_at=now,
            )
        )
        return order

    # -------------------------------------------------------------------
    # Read helpers
    # -------------------------------------------------------------------
    def history(self) -> list[StatusChange]:
        """Status history, oldest first."""
        return sorted(self.status_history or [], key=lambda entry: entry.sequence)

    def refunds(self) -> list[RefundEntry]:
        """Refund ledger, oldest first."""
        return sorted(self.refund_history or [], key=lambda entry: entry.sequence)

    def max_refundable_amount(self):
        """Remaining refundable balance as a ``Decimal``; never negative."""
        remaining = to_money(self.total_amount) - to_money(self.total_refunded_amount)
        return max(ZERO, remaining)

    def is_refund_eligible(self) -> bool:
        return (
            self.payment_status == PaymentStatus.COMPLETED.value
            and self.refund_status != RefundStatus.FULLY_REFUNDED.value
            and self.max_refundable_amount() > ZERO
        )

    def status_display(self) -> str:
        return display_status(self.status)

    def _next_sequence(self, entries) -> int:
        return max((entry.sequence for entry in entries or []), default=0) + 1

    # -------------------------------------------------------------------
    # Payment axis
    # -------------------------------------------------------------------
    def record_payment_status(self, payment_status):
        """Move the payment axis. ``refunded`` is reserved for the refund ledger."""
        try:
            new_status = PaymentStatus(payment_status)
        except ValueError:
            raise ValidationError({"payment_status": [f"Unknown payment status: {payment_status}"]}) from None

        if new_status == PaymentStatus.REFUNDED:
            raise ValidationError({"payment_status": ["Payment status refunded is set by issuing refunds"]})
        if self.payment_status == PaymentStatus.REFUNDED.value:
            raise InvalidPaymentState({"payment_status": ["Payment has already been refunded"]})

        previous = self.payment_status
        now = datetime.now(UTC)
        self.payment_status = new_status.value
        self.updated_at = now

        self.raise_(
            PaymentStatusRecorded(
                order_id=str(self.id),
                previous_status=previous,
                payment_status=new_status.value,
                recorded_at=now,
            )
        )

    # -------------------------------------------------------------------
    # Fulfillment axis
    # -------------------------------------------------------------------
    def assert_can_transition(self, new_status) -> OrderStatus:
        """Return the parsed target status or raise ``InvalidTransition``."""
        if not is_allowed(self.status, new_status):
            target = new_status.value if isinstance(new_status, OrderStatus) else new_status
            raise InvalidTransition({"status": [f"Invalid status transition from {self.status} to {target}"]})
        return parse_status(new_status)

    @staticmethod
    def require_tracking(tracking_number, carrier):
        """Trimmed tracking number and carrier, or ``MissingTrackingInfo``."""
        tracking_number = _clean(tracking_number)
        carrier = _clean(carrier)
        if not tracking_number or not carrier:
            raise MissingTrackingInfo(
                {"tracking": ["Tracking number and carrier are required for shipped status"]}
            )
        return tracking_number, carrier

    def change_status(
        self,
        new_status,
        actor_id,
        note=None,
        tracking_number=None,
        carrier=None,
        tracking_url=None,
    ) -> StatusChange:
        """Move the order to ``new_status`` and append the history entry.

        The caller is responsible for side effects on other aggregates
        (stock restoration) and for deriving a tracking URL.
        """
        target = self.assert_can_transition(new_status)
        if target == OrderStatus.SHIPPED:
            tracking_number, carrier = self.require_tracking(tracking_number, carrier)

        previous = self.status
        now = datetime.now(UTC)
        note = _clean(note) or f"Status changed from {previous} to {target.value} by admin"

        with atomic_change(self):
            self.status = target.value
            if target == OrderStatus.SHIPPED:
                self.tracking_number = tracking_number
                self.carrier = carrier
                self.tracking_url = _clean(tracking_url)
            if target == OrderStatus.DELIVERED:
                self.delivered_at = now
            entry = StatusChange(
                sequence=self._next_sequence(self.status_history),
                status=target.value,
                timestamp=now,
                actor_id=actor_id,
                note=note,
            )
            self.add_status_history(entry)
            self.updated_at = now

        self.raise_(
            OrderStatusChanged(
                order_id=str(self.id),
                order_number=self.order_number,
                previous_status=previous,
                new_status=target.value,
                actor_id=str(actor_id),
                note=note,
                sequence=entry.sequence,
                changed_at=now,
            )
        )

        if target == OrderStatus.SHIPPED:
            self.raise_(
                OrderShipped(
                    order_id=str(self.id),
                    carrier=self.carrier,
                    tracking_number=self.tracking_number,
                    tracking_url=self.tracking_url,
                    shipped_at=now,
                )
            )
        elif target == OrderStatus.CANCELLED:
            self.raise_(
                OrderCancelled(
                    order_id=str(self.id),
                    previous_status=previous,
                    actor_id=str(actor_id),
                    items=json.dumps(
                        [{"product_id": str(item.product_id), "quantity": item.quantity} for item in self.items]
                    ),
                    cancelled_at=now,
                )
            )

        return entry

    # -------------------------------------------------------------------
    # Refund ledger
    # -------------------------------------------------------------------
    def issue_refund(self, amount, reason, actor_id) -> RefundEntry:
        """Append a refund to the ledger and reconcile the refund totals."""
        requested, reason = validate_refund_request(amount, reason)

        if self.payment_status not in _CAPTURED_PAYMENT_STATES:
            raise InvalidPaymentState(
                {"payment_status": [f"Cannot refund order with payment status: {self.payment_status}"]}
            )

        max_refundable = self.max_refundable_amount()
        if requested > max_refundable:
            raise RefundExceedsLimit(
                {
                    "amount": [
                        f"Refund amount ({format_money(requested)}) exceeds maximum "
                        f"refundable amount ({format_money(max_refundable)})"
                    ]
                }
            )

        now = datetime.now(UTC)
        new_total = to_money(self.total_refunded_amount) + requested
        fully_refunded = new_total >= to_money(self.total_amount)

        with atomic_change(self):
            entry = RefundEntry(
                sequence=self._next_sequence(self.refund_history),
                refund_id=generate_refund_id(),
                amount=to_float(requested),
                date=now,
                reason=reason,
                actor_id=actor_id,
                status=RefundEntryStatus.SUCCEEDED.value,
            )
            self.add_refund_history(entry)
            self.total_refunded_amount = to_float(new_total)

            if fully_refunded:
                self.refund_status = RefundStatus.FULLY_REFUNDED.value
                self.payment_status = PaymentStatus.REFUNDED.value
                note = f"Order fully refunded - {format_money(requested)}: {reason}"
                self.add_status_history(
                    StatusChange(
                        sequence=self._next_sequence(self.status_history),
                        status=self.status,
                        timestamp=now,
                        actor_id=actor_id,
                        note=note[:NOTE_MAX_LENGTH],
                    )
                )
            else:
                self.refund_status = RefundStatus.PARTIAL_REFUNDED.value
            self.updated_at = now

        self.raise_(
            RefundIssued(
                order_id=str(self.id),
                refund_id=entry.refund_id,
                amount=entry.amount,
                reason=reason,
                actor_id=str(actor_id),
                total_refunded_amount=self.total_refunded_amount,
                refund_status=self.refund_status,
                issued_at=now,
            )
        )
        if fully_refunded:
            self.raise_(
                OrderFullyRefunded(
                    order_id=str(self.id),
                    total_amount=self.total_amount,
                    total_refunded_amount=self.total_refunded_amount,
                    refunded_at=now,
                )
            )

        return entry

    # -------------------------------------------------------------------
    # Snapshot
    # -------------------------------------------------------------------
    def to_snapshot(self) -> dict:
        """Plain dict view of the order with ordered history and ledger."""
        data = self.to_dict()
        data["status_history"] = [
            {
                "status": entry.status,
                "timestamp": entry.timestamp,
                "actor_id": entry.actor_id,
                "note": entry.note,
            }
            for entry in self.history()
        ]
        data["refund_history"] = [entry.to_snapshot() for entry in self.refunds()]
        data["status_display"] = self.status_display()
        data["max_refundable_amount"] = to_float(self.max_refundable_amount())
        data["is_refund_eligible"] = self.is_refund_eligible()
        return data
