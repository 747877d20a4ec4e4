"""Shared fixtures for the commerce test suite."""

import json

import pytest
from commerce.cart.items import AddToCart
from commerce.order.checkout import Checkout
from commerce.product.registration import RegisterProduct
from protean import current_domain


@pytest.fixture()
def shipping_address():
    return {
        "full_name": "Ayesha Khan",
        "phone": "+92-300-1234567",
        "street": "12 Mall Road",
        "city": "Lahore",
        "state": "Punjab",
        "zip_code": "54000",
    }


@pytest.fixture()
def make_product():
    """Register a product through the catalog intake command and return its id."""

    def _make(name="Test Product", price=100.0, stock=10, **overrides):
        return current_domain.process(
            RegisterProduct(name=name, price=price, stock=stock, **overrides),
            asynchronous=False,
        )

    return _make


@pytest.fixture()
def fill_cart():
    """Add (product_id, quantity) lines to a user's cart."""

    def _fill(user_id, *lines):
        cart = None
        for product_id, quantity in lines:
            cart = current_domain.process(
                AddToCart(user_id=user_id, product_id=product_id, quantity=quantity),
                asynchronous=False,
            )
        return cart

    return _fill


@pytest.fixture()
def checkout(shipping_address):
    """Check out a user's cart and return the created order."""

    def _checkout(user_id, **overrides):
        payload = {
            "user_id": user_id,
            "shipping_address": json.dumps(shipping_address),
        }
        payload.update(overrides)
        return current_domain.process(Checkout(**payload), asynchronous=False)

    return _checkout
