"""Checkout: converts a user's cart into a pending order.

Steps, all inside the command handler's Unit of Work:

    1. Load the cart (EmptyCart if it has no lines)
    2. Re-verify every line against live product data, before any write
    3. Price the lines at current product prices, add shipping
    4. Create the order with a unique order number
    5. Commit stock for every line through the Inventory Ledger
    6. Clear the cart

A ledger failure on a later line releases the lines already committed and
re-raises, and the Unit of Work discards the order and the cart change.
"""

import json

import structlog
from protean.exceptions import ObjectNotFoundError
from protean.fields import Identifier, String, Text
from protean.utils.globals import current_domain
from protean.utils.mixins import handle

from commerce.cart.cart import Cart
from commerce.domain import commerce
from commerce.errors import EmptyCart, InsufficientStock, ProductUnavailable
from commerce.inventory.ledger import InventoryLedger
from commerce.order.numbering import generate_order_number
from commerce.order.order import Order, PaymentMethod
from commerce.product.product import Product
from commerce.settings import flat_shipping_fee, free_shipping_threshold

logger = structlog.get_logger(__name__)


@commerce.command(part_of="Order")
class Checkout:
    user_id = Identifier(required=True)
    shipping_address = Text(required=True)  # JSON: address dict
    billing_address = Text()  # JSON: address dict, defaults to shipping
    payment_method = String(choices=PaymentMethod, default=PaymentMethod.COD.value)
    notes = Text()


def shipping_cost_for(subtotal) -> float:
    """Free shipping strictly above the threshold, a flat fee otherwise."""
    return 0.0 if subtotal > free_shipping_threshold() else flat_shipping_fee()


def _parse(value):
    return json.loads(value) if isinstance(value, str) else value


def priced_lines(cart) -> list[dict]:
    """Verify every cart line against live products and price it.

    Raises ProductUnavailable or InsufficientStock for the first offending
    line. Nothing is written.
    """
    product_repo = current_domain.repository_for(Product)
    lines = []
    for item in cart.items:
        try:
            product = product_repo.get(item.product_id)
        except ObjectNotFoundError:
            raise ProductUnavailable(item.product_id) from None
        if not product.is_active:
            raise ProductUnavailable(product.id, product.name)
        if product.stock < item.quantity:
            raise InsufficientStock(
                product.id,
                available=product.stock,
                requested=item.quantity,
                product_name=product.name,
            )
        lines.append(
            {
                "product_id": str(product.id),
                "name": product.name,
                "price": product.price,
                "quantity": item.quantity,
                "image": product.primary_image_url(),
            }
        )
    return lines


@commerce.command_handler(part_of=Order)
class CheckoutHandler:
    @handle(Checkout)
    def checkout(self, command):
        cart_repo = current_domain.repository_for(Cart)
        cart = cart_repo.for_user(command.user_id)
        if cart.is_empty:
            raise EmptyCart(command.user_id)

        try:
            lines = priced_lines(cart)
        except (ProductUnavailable, InsufficientStock) as exc:
            logger.info(
                "checkout_rejected",
                user_id=str(command.user_id),
                reason=type(exc).__name__,
                product_id=exc.product_id,
            )
            raise

        subtotal = round(sum(line["price"] * line["quantity"] for line in lines), 2)
        order_repo = current_domain.repository_for(Order)
        order = Order.place(
            order_number=generate_order_number(order_repo),
            user_id=command.user_id,
            lines=lines,
            shipping_cost=shipping_cost_for(subtotal),
            shipping_address=_parse(command.shipping_address),
            billing_address=_parse(command.billing_address) if command.billing_address else None,
            payment_method=command.payment_method or PaymentMethod.COD.value,
            customer_note=command.notes,
        )

        InventoryLedger().commit_all(order.lines())
        order_repo.add(order)

        cart.clear()
        cart_repo.add(cart)

        logger.info(
            "order_placed",
            order_id=str(order.id),
            order_number=order.order_number,
            user_id=str(command.user_id),
            total_amount=order.total_amount,
            lines=len(lines),
        )
        return order
