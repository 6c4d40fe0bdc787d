"""Order payment axis: command and handler.

Payment status moves independently of fulfillment status. Gateways (out of
scope here) report their outcome through ``RecordPaymentStatus``; only the
refund ledger ever marks a payment as refunded.
"""

import structlog
from protean import handle
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from ordering.domain import ordering
from ordering.order.order import Order, PaymentStatus
from ordering.order.repository import load_order

logger = structlog.get_logger(__name__)


@ordering.command(part_of="Order")
class RecordPaymentStatus:
    order_id = Identifier(required=True)
    payment_status = String(required=True, choices=PaymentStatus)


@ordering.command_handler(part_of=Order)
class RecordPaymentHandler:
    @handle(RecordPaymentStatus)
    def record_payment_status(self, command):
        order = load_order(command.order_id)
        previous = order.payment_status
        order.record_payment_status(command.payment_status)
        current_domain.repository_for(Order).add(order)

        logger.info(
            "payment_status_recorded",
            order_id=str(order.id),
            previous_status=previous,
            payment_status=order.payment_status,
        )
