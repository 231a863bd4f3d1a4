from datetime import UTC, datetime, timedelta

import pytest


@pytest.fixture(scope="session")
def _promotions_domain():
    """Initialize the promotions domain once per session."""
    from promotions.domain import promotions

    promotions.init()
    return promotions


@pytest.fixture(scope="session", autouse=True)
def setup_db(_promotions_domain):
    from promotions.utils.db import drop_db, setup_db

    setup_db(_promotions_domain)

    yield

    drop_db(_promotions_domain)


@pytest.fixture(autouse=True)
def run_around_tests(_promotions_domain):
    """Push domain context before each test, cleanup after."""
    ctx = _promotions_domain.domain_context()
    ctx.push()

    yield

    from protean import current_domain

    for _, provider in current_domain.providers.items():
        provider._data_reset()

    current_domain.event_store.store._data_reset()
    ctx.pop()


@pytest.fixture()
def now():
    return datetime.now(UTC)


@pytest.fixture()
def window(now):
    """A validity window that is open right now."""
    return now - timedelta(days=1), now + timedelta(days=30)


@pytest.fixture()
def make_product():
    """Persist a product and return it."""
    from promotions.product.product import Product
    from protean import current_domain

    def _make(name="Desk Lamp", sku="LAMP-001", price=100.0):
        product = Product.create(name=name, sku=sku, price=price)
        current_domain.repository_for(Product).add(product)
        return product

    return _make


@pytest.fixture()
def make_coupon(window):
    """Create a coupon through the registry and return the stored aggregate."""
    from promotions.coupon.coupon import Coupon
    from promotions.coupon.creation import CreateCoupon
    from protean import current_domain

    def _make(
        code="SAVE20",
        discount_type="percentage",
        discount_value=20.0,
        products=(),
        valid_from=None,
        valid_until=None,
        usage_limit=100,
    ):
        coupon_id = current_domain.process(
            CreateCoupon(
                code=code,
                discount_type=discount_type,
                discount_value=discount_value,
                product_ids=[str(product.id) for product in products],
                valid_from=valid_from or window[0],
                valid_until=valid_until or window[1],
                usage_limit=usage_limit,
            ),
            asynchronous=False,
        )
        return current_domain.repository_for(Coupon).get(coupon_id)

    return _make


@pytest.fixture()
def make_cart():
    """Persist a cart holding ``(product, quantity)`` lines and return it."""
    from promotions.cart.cart import ShoppingCart
    from protean import current_domain

    def _make(customer_id="cust-001", lines=()):
        cart = ShoppingCart.create(customer_id=customer_id)
        for product, quantity in lines:
            cart.add_item(product.id, product.price, quantity)
        current_domain.repository_for(ShoppingCart).add(cart)
        return cart

    return _make
