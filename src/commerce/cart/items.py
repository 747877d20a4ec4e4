"""Cart item management: commands and handler."""

from protean.exceptions import ObjectNotFoundError
from protean.fields import Identifier, Integer
from protean.utils.globals import current_domain
from protean.utils.mixins import handle

from commerce.cart.cart import Cart
from commerce.domain import commerce
from commerce.errors import NotFound, ProductUnavailable
from commerce.product.product import Product


@commerce.command(part_of="Cart")
class AddToCart:
    user_id = Identifier(required=True)
    product_id = Identifier(required=True)
    quantity = Integer(default=1, min_value=1)


@commerce.command(part_of="Cart")
class SetCartItemQuantity:
    user_id = Identifier(required=True)
    product_id = Identifier(required=True)
    quantity = Integer(required=True)


@commerce.command(part_of="Cart")
class RemoveFromCart:
    user_id = Identifier(required=True)
    product_id = Identifier(required=True)


@commerce.command(part_of="Cart")
class ClearCart:
    user_id = Identifier(required=True)


def sellable_product(product_id) -> Product:
    """Load a product that can currently be put in a cart."""
    try:
        product = current_domain.repository_for(Product).get(product_id)
    except ObjectNotFoundError:
        raise NotFound("Product", product_id) from None
    if not product.is_active:
        raise ProductUnavailable(product.id, product.name)
    return product


@commerce.command_handler(part_of=Cart)
class ManageCartItemsHandler:
    @handle(AddToCart)
    def add_to_cart(self, command):
        product = sellable_product(command.product_id)

        repo = current_domain.repository_for(Cart)
        cart = repo.for_user(command.user_id)
        cart.add_item(
            product_id=str(product.id),
            quantity=command.quantity or 1,
            price=product.price,
            available=product.stock,
            product_name=product.name,
        )
        repo.add(cart)
        return cart

    @handle(SetCartItemQuantity)
    def set_cart_item_quantity(self, command):
        product = sellable_product(command.product_id)

        repo = current_domain.repository_for(Cart)
        cart = repo.for_user(command.user_id)
        cart.set_item_quantity(
            product_id=str(product.id),
            quantity=command.quantity,
            price=product.price,
            available=product.stock,
            product_name=product.name,
        )
        repo.add(cart)
        return cart

    @handle(RemoveFromCart)
    def remove_from_cart(self, command):
        repo = current_domain.repository_for(Cart)
        cart = repo.for_user(command.user_id)
        if cart.remove_item(command.product_id):
            repo.add(cart)
        return cart

    @handle(ClearCart)
    def clear_cart(self, command):
        repo = current_domain.repository_for(Cart)
        cart = repo.for_user(command.user_id)
        if not cart.is_empty:
            cart.clear()
            repo.add(cart)
        return cart
