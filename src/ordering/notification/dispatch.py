"""Best-effort customer emails for order status changes and refunds.

Both entry points run after the order has been committed. Failures are logged
and swallowed: the committed outcome is never affected by email delivery.
"""

import structlog

from ordering.notification import get_email_channel
from ordering.notification.templates import RefundConfirmationTemplate, template_for_status
from ordering.order.order import display_status
from ordering.shared.money import format_money

logger = structlog.get_logger(__name__)


def _deliver(kind: str, order, content: dict) -> bool:
    result = get_email_channel().send(
        to=order.customer_email,
        subject=content["subject"],
        body=content["body"],
    )
    if result.get("status") != "sent":
        logger.error(
            "notification_failed",
            kind=kind,
            order_id=str(order.id),
            order_number=order.order_number,
            error=result.get("error"),
        )
        return False

    logger.info(
        "notification_sent",
        kind=kind,
        order_id=str(order.id),
        order_number=order.order_number,
        message_id=result.get("message_id"),
    )
    return True


def notify_status_changed(order, previous_status: str, new_status: str) -> bool:
    """Email the customer about a status change. Returns True if an email went out."""
    template = template_for_status(new_status)
    if template is None:
        return False

    try:
        content = template.render(
            {
                "order_number": order.order_number,
                "previous_status_display": display_status(previous_status),
                "status_display": order.status_display(),
                "carrier": order.carrier,
                "tracking_number": order.tracking_number,
                "tracking_url": order.tracking_url,
            }
        )
        return _deliver(f"status_{new_status}", order, content)
    except Exception:
        logger.exception(
            "notification_failed",
            kind=f"status_{new_status}",
            order_id=str(order.id),
            previous_status=previous_status,
            new_status=new_status,
        )
        return False


def notify_refund_issued(order, refund) -> bool:
    """Email the customer a refund confirmation. Returns True if it went out."""
    try:
        content = RefundConfirmationTemplate.render(
            {
                "order_number": order.order_number,
                "amount": format_money(refund.amount),
                "refund_id": refund.refund_id,
                "reason": refund.reason,
            }
        )
        return _deliver("refund_confirmation", order, content)
    except Exception:
        logger.exception(
            "notification_failed",
            kind="refund_confirmation",
            order_id=str(order.id),
            refund_id=refund.refund_id,
        )
        return False
