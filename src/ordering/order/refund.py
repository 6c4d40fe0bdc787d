"""Refund ledger workflow: command, handler and the application entry point.

Refunds are appended to the order's ledger in one unit of work together
with the recalculated totals. The request is checked for shape before the
order is even loaded; payment state and the refundable balance are checked
against the freshly loaded order on every attempt.
"""

import structlog
from protean import handle
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from ordering.domain import ordering
from ordering.errors import EXPECTED_ERRORS, PersistenceFailure
from ordering.notification.dispatch import notify_refund_issued
from ordering.order.order import Order, validate_refund_request
from ordering.order.repository import load_order, process_with_retry, reload_committed_order

logger = structlog.get_logger(__name__)

REFUND_FAILURE = {"refund": ["Server error while processing refund"]}


@ordering.command(part_of="Order")
class IssueRefund:
    order_id = Identifier(required=True)
    amount = String(required=True)  # Decimal string, e.g. "40.00"
    reason = String(required=True, max_length=500)
    actor_id = Identifier(required=True)


@ordering.command_handler(part_of=Order)
class IssueRefundHandler:
    @handle(IssueRefund)
    def issue_refund(self, command):
        order = load_order(command.order_id)
        entry = order.issue_refund(
            amount=command.amount,
            reason=command.reason,
            actor_id=command.actor_id,
        )
        current_domain.repository_for(Order).add(order)

        logger.info(
            "refund_issued",
            order_id=str(order.id),
            order_number=order.order_number,
            refund_id=entry.refund_id,
            amount=entry.amount,
            total_refunded_amount=order.total_refunded_amount,
            refund_status=order.refund_status,
            actor_id=str(command.actor_id),
        )
        return entry.refund_id


def issue_refund(order_id, amount, reason, actor_id) -> dict:
    """Record a refund against a paid order and email the customer.

    Returns ``{"order": snapshot, "refund": entry}`` as committed.
    """
    requested, reason = validate_refund_request(amount, reason)

    def build_command():
        return IssueRefund(
            order_id=order_id,
            amount=str(requested),
            reason=reason,
            actor_id=actor_id,
        )

    try:
        refund_id = process_with_retry(build_command, order_id, "issue_refund")
    except EXPECTED_ERRORS as exc:
        logger.warning(
            "refund_rejected",
            order_id=str(order_id),
            amount=str(requested),
            actor_id=str(actor_id),
            error=type(exc).__name__,
        )
        raise
    except Exception as exc:
        logger.exception("refund_failed", order_id=str(order_id), amount=str(requested))
        raise PersistenceFailure(REFUND_FAILURE) from exc

    order = reload_committed_order(order_id, "issue_refund", REFUND_FAILURE)
    entry = next(refund for refund in order.refunds() if refund.refund_id == refund_id)
    notify_refund_issued(order, entry)
    return {"order": order.to_snapshot(), "refund": entry.to_snapshot()}
