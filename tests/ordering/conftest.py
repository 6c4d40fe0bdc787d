import pytest
from protean.integrations.pytest import DomainFixture


@pytest.fixture(scope="session")
def ordering_bed():
    from ordering.domain import ordering

    bed = DomainFixture(ordering)
    bed.setup()
    yield bed
    bed.teardown()


@pytest.fixture(autouse=True)
def _ctx(ordering_bed):
    with ordering_bed.domain_context():
        yield


@pytest.fixture(autouse=True)
def _adapters():
    """Fresh carrier and email adapters for every test."""
    from ordering.carrier import reset_carrier
    from ordering.notification import reset_email_channel

    reset_carrier()
    reset_email_channel()
    yield
    reset_carrier()
    reset_email_channel()


@pytest.fixture()
def outbox():
    """The fake email adapter's record of sent messages."""
    from ordering.notification import get_email_channel

    return get_email_channel()


ADDRESS = {
    "first_name": "Ada",
    "last_name": "Lovelace",
    "address_line1": "12 Analytical Row",
    "city": "London",
    "state_province": "Greater London",
    "postal_code": "N1 9GU",
    "country": "GB",
}


@pytest.fixture()
def register_product():
    """Factory: register a product through its command and return its id."""
    from uuid import uuid4

    from ordering.product.registration import RegisterProduct
    from protean import current_domain

    def _register(name="Widget", price=25.0, stock_quantity=10, sku=None):
        command = RegisterProduct(
            name=name,
            sku=sku or f"SKU-{uuid4().hex[:8].upper()}",
            price=price,
            stock_quantity=stock_quantity,
        )
        return current_domain.process(command, asynchronous=False)

    return _register


@pytest.fixture()
def place_order(register_product):
    """Factory: place an order (optionally paid) and return its id.

    Without explicit items, one product with 8 units in stock is registered
    and the order takes 2 of them at 25.00 each.
    """
    import json

    from ordering.order.creation import CreateOrder
    from ordering.order.payment import RecordPaymentStatus
    from protean import current_domain

    def _place(items=None, tax=0.0, shipping=0.0, discount=0.0, paid=False):
        if items is None:
            product_id = register_product(stock_quantity=8)
            items = [{"product_id": product_id, "product_name": "Widget", "quantity": 2, "unit_price": 25.0}]
        order_id = current_domain.process(
            CreateOrder(
                customer_id="cust-001",
                customer_email="ada@example.com",
                items=json.dumps(items),
                shipping_address=json.dumps(ADDRESS),
                tax=tax,
                shipping=shipping,
                discount=discount,
                payment_method="card",
            ),
            asynchronous=False,
        )
        if paid:
            current_domain.process(
                RecordPaymentStatus(order_id=order_id, payment_status="completed"),
                asynchronous=False,
            )
        return order_id

    return _place
