"""Product aggregate (CQRS): the stock counter orders draw from.

Only the part of a product the order lifecycle needs lives here: identity,
a price and the sellable ``stock_quantity``. Catalogue concerns (variants,
images, categories) belong elsewhere.
"""

from datetime import UTC, datetime

from protean.exceptions import ValidationError
from protean.fields import DateTime, Float, Integer, String

from ordering.domain import ordering
from ordering.product.events import ProductRegistered, StockRestored


@ordering.aggregate
class Product:
    name = String(required=True, max_length=100)
    sku = String(required=True, max_length=50, unique=True)
    price = Float(required=True, min_value=0.0)
    stock_quantity = Integer(default=0, min_value=0)
    created_at = DateTime()
    updated_at = DateTime()

    @classmethod
    def register(cls, name, sku, price, stock_quantity=0):
        now = datetime.now(UTC)
        product = cls(
            name=name,
            sku=sku,
            price=price,
            stock_quantity=stock_quantity,
            created_at=now,
            updated_at=now,
        )
        product.raise_(
            ProductRegistered(
                product_id=str(product.id),
                sku=sku,
                name=name,
                price=price,
                stock_quantity=stock_quantity,
                registered_at=now,
            )
        )
        return product

    def increment_stock(self, quantity):
        """Put ``quantity`` units back into sellable stock."""
        if quantity is None or quantity < 1:
            raise ValidationError({"quantity": ["Quantity to restore must be at least 1"]})

        previous = self.stock_quantity or 0
        now = datetime.now(UTC)
        self.stock_quantity = previous + quantity
        self.updated_at = now

        self.raise_(
            StockRestored(
                product_id=str(self.id),
                quantity=quantity,
                previous_quantity=previous,
                new_quantity=self.stock_quantity,
                restored_at=now,
            )
        )
