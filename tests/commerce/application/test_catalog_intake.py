"""Tests for the catalog intake commands."""

import json

from commerce.product.product import Product
from commerce.product.registration import ChangeProductPrice, DeactivateProduct, RegisterProduct
from protean import current_domain


def _process(command):
    return current_domain.process(command, asynchronous=False)


def test_register_product():
    product_id = _process(
        RegisterProduct(
            name="Kashmiri Shawl",
            price=4500.0,
            stock=12,
            low_stock_threshold=3,
            images=json.dumps([{"url": "https://cdn.example.com/shawl.jpg", "is_primary": True}]),
        )
    )
    product = current_domain.repository_for(Product).get(product_id)
    assert product.name == "Kashmiri Shawl"
    assert product.stock == 12
    assert product.sold_count == 0
    assert product.low_stock_threshold == 3
    assert product.primary_image_url() == "https://cdn.example.com/shawl.jpg"


def test_change_price(make_product):
    product_id = make_product(price=100.0)
    _process(ChangeProductPrice(product_id=product_id, new_price=90.0))
    assert current_domain.repository_for(Product).get(product_id).price == 90.0


def test_deactivate(make_product):
    product_id = make_product()
    _process(DeactivateProduct(product_id=product_id))
    assert current_domain.repository_for(Product).get(product_id).is_active is False
