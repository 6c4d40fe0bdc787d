"""Template registry: which email an order status change sends.

Statuses without an entry (pending, out_for_delivery) send nothing.
"""

from ordering.notification.templates.delivered import OrderDeliveredTemplate
from ordering.notification.templates.refund_confirmation import RefundConfirmationTemplate
from ordering.notification.templates.shipped import OrderShippedTemplate
from ordering.notification.templates.status_update import OrderStatusUpdateTemplate
from ordering.order.transitions import OrderStatus

STATUS_TEMPLATES: dict[str, type] = {
    OrderStatus.PROCESSING.value: OrderStatusUpdateTemplate,
    OrderStatus.AWAITING_SHIPMENT.value: OrderStatusUpdateTemplate,
    OrderStatus.SHIPPED.value: OrderShippedTemplate,
    OrderStatus.DELIVERED.value: OrderDeliveredTemplate,
    OrderStatus.CANCELLED.value: OrderStatusUpdateTemplate,
    OrderStatus.RETURNED.value: OrderStatusUpdateTemplate,
}


def template_for_status(status: str):
    """Template class for ``status``, or None when no email is sent."""
    return STATUS_TEMPLATES.get(status)


__all__ = ["RefundConfirmationTemplate", "STATUS_TEMPLATES", "template_for_status"]
