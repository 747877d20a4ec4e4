"""Reading the cart.

Viewing is a command, not a plain query: lines whose product has been
deleted or deactivated since they were added are dropped, and the pruned cart
is saved.
"""

import structlog
from protean.exceptions import ObjectNotFoundError
from protean.fields import Identifier
from protean.utils.globals import current_domain
from protean.utils.mixins import handle

from commerce.cart.cart import Cart
from commerce.domain import commerce
from commerce.product.product import Product

logger = structlog.get_logger(__name__)


@commerce.command(part_of="Cart")
class ViewCart:
    user_id = Identifier(required=True)


def _sellable_ids(product_ids):
    product_repo = current_domain.repository_for(Product)
    sellable = set()
    for product_id in product_ids:
        try:
            product = product_repo.get(product_id)
        except ObjectNotFoundError:
            continue
        if product.is_active:
            sellable.add(str(product.id))
    return sellable


@commerce.command_handler(part_of=Cart)
class ViewCartHandler:
    @handle(ViewCart)
    def view_cart(self, command):
        repo = current_domain.repository_for(Cart)
        cart = repo.for_user(command.user_id)
        if cart.is_empty:
            return cart

        removed = cart.prune(_sellable_ids([item.product_id for item in cart.items]))
        if removed:
            repo.add(cart)
            logger.info("cart_pruned", user_id=str(command.user_id), removed_product_ids=removed)
        return cart


def cart_count(user_id) -> int:
    """Total units in the user's cart, without pruning."""
    return current_domain.repository_for(Cart).for_user(user_id).total_items
