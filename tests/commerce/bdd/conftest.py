"""Shared BDD fixtures and step definitions for the commerce scenarios."""

import pytest
from commerce.cart.cart import Cart
from commerce.inventory.ledger import InventoryLedger
from commerce.order.order import Order
from commerce.order.status import UpdateOrderStatus
from commerce.product.product import Product
from commerce.review.submission import SubmitReview
from protean import current_domain
from pytest_bdd import given, parsers, then


# ---------------------------------------------------------------------------
# Scalar fixtures
# ---------------------------------------------------------------------------
@pytest.fixture()
def customer_id():
    return "user-001"


@pytest.fixture()
def catalog():
    """Product ids by name, filled by the Given steps."""
    return {}


@pytest.fixture()
def error():
    """Container for the error a When step ran into."""
    return {"exc": None}


def _process(command):
    return current_domain.process(command, asynchronous=False)


# ---------------------------------------------------------------------------
# Given steps
# ---------------------------------------------------------------------------
@given(parsers.cfparse('a product "{name}" priced {price:d} with {stock:d} in stock'))
def _(catalog, make_product, name, price, stock):
    catalog[name] = make_product(name=name, price=float(price), stock=stock)


@given(parsers.cfparse('the customer has {quantity:d} of "{name}" in the cart'))
def _(catalog, fill_cart, customer_id, quantity, name):
    fill_cart(customer_id, (catalog[name], quantity))


@given(parsers.cfparse('another customer buys {quantity:d} of "{name}"'))
def _(catalog, quantity, name):
    InventoryLedger().reserve_and_commit(catalog[name], quantity)


@given(parsers.cfparse('the customer placed an order for {quantity:d} of "{name}"'), target_fixture="order")
def _(catalog, fill_cart, checkout, customer_id, quantity, name):
    fill_cart(customer_id, (catalog[name], quantity))
    return checkout(customer_id)


@given(parsers.cfparse('an administrator moved the order to "{status}"'), target_fixture="order")
def _(order, status):
    return _process(UpdateOrderStatus(order_id=order.id, status=status, actor_id="admin-001", actor_role="admin"))


@given(parsers.cfparse('"{user_id}" rated "{name}" {rating:d} stars'))
def _(catalog, user_id, name, rating):
    _process(SubmitReview(product_id=catalog[name], user_id=user_id, rating=rating, comment="Rated in store"))


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
@then(parsers.cfparse('the request is rejected with "{error_name}"'))
def _(error, error_name):
    assert error["exc"] is not None
    assert type(error["exc"]).__name__ == error_name


@then(parsers.cfparse('"{name}" has {stock:d} in stock and {sold:d} sold'))
def _(catalog, name, stock, sold):
    product = current_domain.repository_for(Product).get(catalog[name])
    assert product.stock == stock
    assert product.sold_count == sold


@then("the cart is empty")
def _(customer_id):
    assert current_domain.repository_for(Cart).for_user(customer_id).is_empty


@then("the customer has no orders")
def _(customer_id):
    assert current_domain.repository_for(Order).for_user(customer_id) == []
