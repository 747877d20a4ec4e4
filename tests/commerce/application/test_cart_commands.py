"""Tests for cart commands: add, set quantity, remove, clear, view and count."""

import pytest
from commerce.cart.cart import Cart
from commerce.cart.items import AddToCart, ClearCart, RemoveFromCart, SetCartItemQuantity
from commerce.cart.viewing import ViewCart, cart_count
from commerce.errors import InsufficientStock, NotFound, ProductUnavailable
from commerce.product.registration import ChangeProductPrice, DeactivateProduct
from protean import current_domain
from protean.exceptions import ValidationError

USER = "user-001"


def _process(command):
    return current_domain.process(command, asynchronous=False)


def _saved_cart(user_id=USER):
    return current_domain.repository_for(Cart).get(user_id)


class TestAddToCart:
    def test_scenario_two_units(self, make_product):
        product_id = make_product(price=100.0, stock=10)
        cart = _process(AddToCart(user_id=USER, product_id=product_id, quantity=2))
        assert cart.total_items == 2
        assert cart.total_amount == 200.0

    def test_cart_is_persisted(self, make_product):
        product_id = make_product(price=100.0, stock=10)
        _process(AddToCart(user_id=USER, product_id=product_id))
        cart = _saved_cart()
        assert cart.total_items == 1
        assert str(cart.items[0].product_id) == product_id

    def test_default_quantity_is_one(self, make_product):
        product_id = make_product()
        cart = _process(AddToCart(user_id=USER, product_id=product_id))
        assert cart.total_items == 1

    def test_price_snapshot_taken_from_product(self, make_product):
        product_id = make_product(price=750.0)
        cart = _process(AddToCart(user_id=USER, product_id=product_id))
        assert cart.items[0].price == 750.0

    def test_cumulative_quantity_limited_by_stock(self, make_product):
        product_id = make_product(stock=4)
        _process(AddToCart(user_id=USER, product_id=product_id, quantity=3))
        with pytest.raises(InsufficientStock):
            _process(AddToCart(user_id=USER, product_id=product_id, quantity=2))
        assert _saved_cart().total_items == 3

    def test_unknown_product(self):
        with pytest.raises(NotFound):
            _process(AddToCart(user_id=USER, product_id="prod-404"))

    def test_deactivated_product(self, make_product):
        product_id = make_product()
        _process(DeactivateProduct(product_id=product_id))
        with pytest.raises(ProductUnavailable):
            _process(AddToCart(user_id=USER, product_id=product_id))

    def test_zero_quantity_rejected_at_the_boundary(self, make_product):
        product_id = make_product()
        with pytest.raises(ValidationError):
            AddToCart(user_id=USER, product_id=product_id, quantity=0)

    def test_carts_are_per_user(self, make_product):
        product_id = make_product(stock=10)
        _process(AddToCart(user_id=USER, product_id=product_id, quantity=2))
        _process(AddToCart(user_id="user-002", product_id=product_id, quantity=5))
        assert cart_count(USER) == 2
        assert cart_count("user-002") == 5


class TestSetCartItemQuantity:
    def test_set_quantity(self, make_product):
        product_id = make_product(stock=10)
        _process(AddToCart(user_id=USER, product_id=product_id))
        cart = _process(SetCartItemQuantity(user_id=USER, product_id=product_id, quantity=6))
        assert cart.total_items == 6

    def test_set_quantity_zero_rejected(self, make_product):
        product_id = make_product(stock=10)
        _process(AddToCart(user_id=USER, product_id=product_id, quantity=2))
        with pytest.raises(ValidationError):
            _process(SetCartItemQuantity(user_id=USER, product_id=product_id, quantity=0))
        assert _saved_cart().total_items == 2

    def test_set_quantity_for_product_not_in_cart(self, make_product):
        product_id = make_product(stock=10)
        with pytest.raises(NotFound):
            _process(SetCartItemQuantity(user_id=USER, product_id=product_id, quantity=1))

    def test_set_quantity_above_stock(self, make_product):
        product_id = make_product(stock=3)
        _process(AddToCart(user_id=USER, product_id=product_id))
        with pytest.raises(InsufficientStock):
            _process(SetCartItemQuantity(user_id=USER, product_id=product_id, quantity=4))

    def test_set_quantity_refreshes_price(self, make_product):
        product_id = make_product(price=100.0, stock=10)
        _process(AddToCart(user_id=USER, product_id=product_id))
        _process(ChangeProductPrice(product_id=product_id, new_price=80.0))
        cart = _process(SetCartItemQuantity(user_id=USER, product_id=product_id, quantity=2))
        assert cart.total_amount == 160.0


class TestRemoveAndClear:
    def test_remove(self, make_product):
        product_id = make_product()
        _process(AddToCart(user_id=USER, product_id=product_id))
        cart = _process(RemoveFromCart(user_id=USER, product_id=product_id))
        assert cart.is_empty

    def test_remove_absent_product_is_a_no_op(self, make_product):
        product_id = make_product()
        _process(AddToCart(user_id=USER, product_id=product_id))
        cart = _process(RemoveFromCart(user_id=USER, product_id="prod-404"))
        assert cart.total_items == 1

    def test_clear(self, make_product):
        shawl = make_product(name="Shawl")
        scarf = make_product(name="Scarf")
        _process(AddToCart(user_id=USER, product_id=shawl))
        _process(AddToCart(user_id=USER, product_id=scarf))
        cart = _process(ClearCart(user_id=USER))
        assert cart.is_empty
        assert cart_count(USER) == 0

    def test_clear_without_cart(self):
        assert _process(ClearCart(user_id=USER)).is_empty


class TestViewCart:
    def test_view_empty_cart(self):
        cart = _process(ViewCart(user_id=USER))
        assert cart.is_empty
        assert cart.total_amount == 0

    def test_view_prunes_deactivated_products(self, make_product):
        shawl = make_product(name="Shawl", price=100.0)
        scarf = make_product(name="Scarf", price=50.0)
        _process(AddToCart(user_id=USER, product_id=shawl))
        _process(AddToCart(user_id=USER, product_id=scarf))
        _process(DeactivateProduct(product_id=scarf))

        cart = _process(ViewCart(user_id=USER))
        assert [str(i.product_id) for i in cart.items] == [shawl]
        assert cart.total_amount == 100.0
        assert _saved_cart().total_items == 1

    def test_count_does_not_prune(self, make_product):
        product_id = make_product()
        _process(AddToCart(user_id=USER, product_id=product_id, quantity=2))
        _process(DeactivateProduct(product_id=product_id))
        assert cart_count(USER) == 2
