"""Stock reconciliation for cancelled orders.

``restore_stock`` loads and mutates every referenced product in memory and
hands them back; persisting them is left to the caller's unit of work so
that the order and its products commit together or not at all.
"""

from collections import Counter

import structlog
from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from ordering.errors import ProductNotFound, StockReconciliationFailed
from ordering.product.product import Product

logger = structlog.get_logger(__name__)


def load_product(product_id) -> Product:
    """Fetch a product or raise ``ProductNotFound``."""
    try:
        return current_domain.repository_for(Product).get(product_id)
    except ObjectNotFoundError:
        raise ProductNotFound({"product_id": ["Product not found"]}) from None


def restore_stock(items) -> list[Product]:
    """Increment each referenced product's stock by the item quantities.

    Quantities of repeated products are summed so every product is loaded
    and written once. A missing product aborts the whole reconciliation.
    """
    quantities = Counter()
    for item in items:
        quantities[str(item.product_id)] += item.quantity

    repo = current_domain.repository_for(Product)
    products = []
    for product_id, quantity in quantities.items():
        try:
            product = repo.get(product_id)
        except ObjectNotFoundError:
            logger.error("stock_restore_product_missing", product_id=product_id, quantity=quantity)
            raise StockReconciliationFailed({"stock": ["Server error while updating order status"]}) from None

        product.increment_stock(quantity)
        products.append(product)

    logger.info(
        "stock_restored",
        products=len(products),
        units=sum(quantities.values()),
    )
    return products
