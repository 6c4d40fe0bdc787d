"""Product registration: command and handler."""

import structlog
from protean import handle
from protean.fields import Float, Integer, String
from protean.utils.globals import current_domain

from ordering.domain import ordering
from ordering.product.product import Product

logger = structlog.get_logger(__name__)


@ordering.command(part_of="Product")
class RegisterProduct:
    name = String(required=True, max_length=100)
    sku = String(required=True, max_length=50)
    price = Float(required=True, min_value=0.0)
    stock_quantity = Integer(default=0, min_value=0)


@ordering.command_handler(part_of=Product)
class RegisterProductHandler:
    @handle(RegisterProduct)
    def register_product(self, command):
        product = Product.register(
            name=command.name,
            sku=command.sku,
            price=command.price,
            stock_quantity=command.stock_quantity or 0,
        )
        current_domain.repository_for(Product).add(product)

        logger.info("product_registered", product_id=str(product.id), sku=product.sku)
        return str(product.id)
