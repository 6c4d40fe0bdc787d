"""Order creation: command and handler."""

import json

import structlog
from protean import handle
from protean.fields import Float, Identifier, String, Text
from protean.utils.globals import current_domain

from ordering.domain import ordering
from ordering.order.order import Order

logger = structlog.get_logger(__name__)


@ordering.command(part_of="Order")
class CreateOrder:
    customer_id = Identifier(required=True)
    customer_email = String(required=True, max_length=255)
    items = Text(required=True)  # JSON: list of {product_id, product_name, quantity, unit_price}
    shipping_address = Text()  # JSON: address dict
    billing_address = Text()  # JSON: address dict, defaults to shipping
    tax = Float(default=0.0)
    shipping = Float(default=0.0)
    discount = Float(default=0.0)
    payment_method = String(max_length=50)
    actor_id = Identifier()


def _load_json(value):
    if value is None or not isinstance(value, str):
        return value
    return json.loads(value)


@ordering.command_handler(part_of=Order)
class CreateOrderHandler:
    @handle(CreateOrder)
    def create_order(self, command):
        order = Order.create(
            customer_id=command.customer_id,
            customer_email=command.customer_email,
            items_data=_load_json(command.items),
            shipping_address=_load_json(command.shipping_address),
            billing_address=_load_json(command.billing_address),
            tax=command.tax or 0.0,
            shipping=command.shipping or 0.0,
            discount=command.discount or 0.0,
            payment_method=command.payment_method,
            actor_id=command.actor_id,
        )
        current_domain.repository_for(Order).add(order)

        logger.info(
            "order_created",
            order_id=str(order.id),
            order_number=order.order_number,
            customer_id=str(order.customer_id),
            total_amount=order.total_amount,
        )
        return str(order.id)
