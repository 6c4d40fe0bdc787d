"""Order status workflow: command, handler and the application entry point.

The handler is the atomic scope. It validates the transition, derives the
tracking link, restores stock for cancellations and appends the history entry;
the order and every restored product are written in the same unit of work.
Customer email goes out only after the commit, from ``change_order_status``.
"""

import structlog
from protean import handle
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from ordering.carrier import generate_tracking_url
from ordering.domain import ordering
from ordering.errors import EXPECTED_ERRORS, PersistenceFailure
from ordering.notification.dispatch import notify_status_changed
from ordering.order.order import NOTE_MAX_LENGTH, Order
from ordering.order.repository import load_order, process_with_retry, reload_committed_order
from ordering.order.transitions import OrderStatus
from ordering.product.product import Product
from ordering.product.stock import restore_stock

logger = structlog.get_logger(__name__)

STATUS_FAILURE = {"order": ["Server error while updating order status"]}


@ordering.command(part_of="Order")
class ChangeOrderStatus:
    order_id = Identifier(required=True)
    new_status = String(required=True, max_length=50)
    actor_id = Identifier(required=True)
    note = String(max_length=NOTE_MAX_LENGTH)
    tracking_number = String(max_length=100)
    tracking_url = String(max_length=500)
    carrier = String(max_length=100)


def _derive_tracking_url(carrier, tracking_number):
    try:
        return generate_tracking_url(carrier, tracking_number)
    except Exception:
        logger.exception("tracking_url_generation_failed", carrier=carrier, tracking_number=tracking_number)
        return None


@ordering.command_handler(part_of=Order)
class ChangeOrderStatusHandler:
    @handle(ChangeOrderStatus)
    def change_status(self, command):
        order = load_order(command.order_id)
        target = order.assert_can_transition(command.new_status)

        tracking_number = command.tracking_number
        carrier = command.carrier
        tracking_url = (command.tracking_url or "").strip() or None
        if target == OrderStatus.SHIPPED:
            tracking_number, carrier = Order.require_tracking(tracking_number, carrier)
            if tracking_url is None:
                tracking_url = _derive_tracking_url(carrier, tracking_number)

        restored = restore_stock(order.items) if target == OrderStatus.CANCELLED else []

        previous = order.status
        order.change_status(
            target,
            actor_id=command.actor_id,
            note=command.note,
            tracking_number=tracking_number,
            carrier=carrier,
            tracking_url=tracking_url,
        )

        current_domain.repository_for(Order).add(order)
        product_repo = current_domain.repository_for(Product)
        for product in restored:
            product_repo.add(product)

        logger.info(
            "order_status_changed",
            order_id=str(order.id),
            order_number=order.order_number,
            previous_status=previous,
            new_status=order.status,
            actor_id=str(command.actor_id),
            restored_products=len(restored),
        )
        return previous


def change_order_status(
    order_id,
    new_status,
    actor_id,
    tracking_number=None,
    tracking_url=None,
    carrier=None,
    note=None,
) -> dict:
    """Move an order to ``new_status`` and notify the customer.

    Returns the committed order snapshot. Business-rule failures propagate
    unchanged; unexpected storage failures surface as ``PersistenceFailure``.
    """

    def build_command():
        return ChangeOrderStatus(
            order_id=order_id,
            new_status=new_status.value if isinstance(new_status, OrderStatus) else new_status,
            actor_id=actor_id,
            note=note,
            tracking_number=tracking_number,
            tracking_url=tracking_url,
            carrier=carrier,
        )

    try:
        previous = process_with_retry(build_command, order_id, "change_order_status")
    except EXPECTED_ERRORS as exc:
        logger.warning(
            "order_status_change_rejected",
            order_id=str(order_id),
            requested_status=str(new_status),
            actor_id=str(actor_id),
            error=type(exc).__name__,
        )
        raise
    except Exception as exc:
        logger.exception("order_status_change_failed", order_id=str(order_id), requested_status=str(new_status))
        raise PersistenceFailure(STATUS_FAILURE) from exc

    order = reload_committed_order(order_id, "change_order_status", STATUS_FAILURE)
    notify_status_changed(order, previous, order.status)
    return order.to_snapshot()
