"""Shared BDD fixtures and step definitions for the Promotions domain."""

from datetime import UTC, datetime, timedelta

import pytest
from promotions.cart.cart import ShoppingCart
from promotions.coupon.creation import CreateCoupon
from promotions.product.product import Product
from protean import current_domain
from pytest_bdd import given, parsers


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------
@pytest.fixture()
def error():
    """Container for captured domain errors."""
    return {"exc": None}


@pytest.fixture()
def catalog():
    """Products created by the scenario, by name."""
    return {}


def _create_coupon(code, discount_type, value, product, valid_from, valid_until):
    current_domain.process(
        CreateCoupon(
            code=code,
            discount_type=discount_type,
            discount_value=value,
            product_ids=[str(product.id)],
            valid_from=valid_from,
            valid_until=valid_until,
            usage_limit=100,
        ),
        asynchronous=False,
    )


# ---------------------------------------------------------------------------
# Given steps
# ---------------------------------------------------------------------------
@given(parsers.cfparse('a product "{name}" priced at {price:f}'))
def product_priced_at(catalog, name, price):
    product = Product.create(name=name, sku=name.upper().replace(" ", "-"), price=price)
    current_domain.repository_for(Product).add(product)
    catalog[name] = product


@given(parsers.cfparse('a {discount_type} coupon "{code}" worth {value:f} for "{name}"'))
def coupon_for_product(catalog, discount_type, code, value, name):
    now = datetime.now(UTC)
    _create_coupon(code, discount_type, value, catalog[name], now - timedelta(days=1), now + timedelta(days=30))


@given(parsers.cfparse('an expired {discount_type} coupon "{code}" worth {value:f} for "{name}"'))
def expired_coupon_for_product(catalog, discount_type, code, value, name):
    now = datetime.now(UTC)
    _create_coupon(code, discount_type, value, catalog[name], now - timedelta(days=30), now - timedelta(days=1))


@given(parsers.cfparse('customer "{customer_id}" has {quantity:d} of "{name}" in the cart'))
def customer_has_items(catalog, customer_id, quantity, name):
    repo = current_domain.repository_for(ShoppingCart)
    cart = repo.get_for_customer(customer_id) or ShoppingCart.create(customer_id=customer_id)
    product = catalog[name]
    cart.add_item(product.id, product.price, quantity)
    repo.add(cart)
