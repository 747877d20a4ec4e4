"""Cart aggregate (CQRS): one cart per user, created on first use.

The cart holds a price snapshot per item, refreshed from the live product on
every add or quantity change. It never reserves stock: availability is
checked on each write and re-checked at checkout.

Totals are always derived from the items:

    total_items  = Σ quantity
    total_amount = Σ price × quantity
"""

import json
from datetime import UTC, datetime

from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.fields import DateTime, Float, HasMany, Identifier, Integer

from commerce.cart.events import (
    CartCleared,
    CartItemAdded,
    CartItemQuantitySet,
    CartItemRemoved,
    CartPruned,
)
from commerce.domain import commerce
from commerce.errors import InsufficientStock, NotFound


@commerce.entity(part_of="Cart")
class CartItem:
    product_id = Identifier(required=True)
    quantity = Integer(required=True, min_value=1)
    price = Float(required=True, min_value=0.0)
    added_at = DateTime()


@commerce.aggregate
class Cart:
    user_id = Identifier(identifier=True)
    items = HasMany(CartItem)
    created_at = DateTime()
    updated_at = DateTime()

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def open(cls, user_id):
        now = datetime.now(UTC)
        return cls(user_id=user_id, created_at=now, updated_at=now)

    # -------------------------------------------------------------------
    # Derived totals
    # -------------------------------------------------------------------
    @property
    def total_items(self) -> int:
        return sum(item.quantity for item in self.items)

    @property
    def total_amount(self) -> float:
        return round(sum(item.price * item.quantity for item in self.items), 2)

    @property
    def is_empty(self) -> bool:
        return not self.items

    def item_for(self, product_id):
        return next((i for i in self.items if str(i.product_id) == str(product_id)), None)

    # -------------------------------------------------------------------
    # Item management
    # -------------------------------------------------------------------
    def add_item(self, product_id, quantity, price, available, product_name=None):
        """Add `quantity` units, merging with an existing line for the product.

        `available` is the product's current stock; the cumulative quantity
        in the cart may not exceed it.
        """
        if quantity < 1:
            raise ValidationError({"quantity": ["Quantity must be at least 1"]})

        existing = self.item_for(product_id)
        new_quantity = (existing.quantity if existing else 0) + quantity
        if new_quantity > available:
            raise InsufficientStock(product_id, available=available, requested=new_quantity, product_name=product_name)

        now = datetime.now(UTC)
        if existing:
            existing.quantity = new_quantity
            existing.price = price
        else:
            self.add_items(CartItem(product_id=product_id, quantity=quantity, price=price, added_at=now))
        self.updated_at = now

        self.raise_(
            CartItemAdded(
                user_id=str(self.user_id),
                product_id=str(product_id),
                quantity_added=quantity,
                new_quantity=new_quantity,
                price=price,
            )
        )

    def set_item_quantity(self, product_id, quantity, price, available, product_name=None):
        """Replace the quantity of a product already in the cart."""
        if quantity is None or quantity < 1:
            raise ValidationError({"quantity": ["Quantity must be at least 1"]})

        item = self.item_for(product_id)
        if item is None:
            raise NotFound("CartItem", product_id)
        if quantity > available:
            raise InsufficientStock(product_id, available=available, requested=quantity, product_name=product_name)

        previous_quantity = item.quantity
        item.quantity = quantity
        item.price = price
        self.updated_at = datetime.now(UTC)

        self.raise_(
            CartItemQuantitySet(
                user_id=str(self.user_id),
                product_id=str(product_id),
                previous_quantity=previous_quantity,
                new_quantity=quantity,
                price=price,
            )
        )

    def remove_item(self, product_id) -> bool:
        """Drop the line for a product. Removing an absent product does nothing."""
        item = self.item_for(product_id)
        if item is None:
            return False

        self.remove_items(item)
        self.updated_at = datetime.now(UTC)

        self.raise_(CartItemRemoved(user_id=str(self.user_id), product_id=str(product_id)))
        return True

    def clear(self):
        count = len(self.items)
        if not count:
            return

        for item in list(self.items):
            self.remove_items(item)
        now = datetime.now(UTC)
        self.updated_at = now

        self.raise_(CartCleared(user_id=str(self.user_id), items_removed=count, cleared_at=now))

    def prune(self, sellable_product_ids) -> list[str]:
        """Drop every line whose product is not in `sellable_product_ids`.

        Returns the removed product ids.
        """
        sellable = {str(pid) for pid in sellable_product_ids}
        stale = [item for item in self.items if str(item.product_id) not in sellable]
        if not stale:
            return []

        for item in stale:
            self.remove_items(item)
        now = datetime.now(UTC)
        self.updated_at = now

        removed = [str(item.product_id) for item in stale]
        self.raise_(
            CartPruned(
                user_id=str(self.user_id),
                removed_product_ids=json.dumps(removed),
                pruned_at=now,
            )
        )
        return removed


@commerce.repository(part_of=Cart)
class CartRepository:
    """Carts are keyed by user and opened lazily."""

    def for_user(self, user_id) -> Cart:
        """The user's cart, or a new unsaved empty cart."""
        try:
            return self.get(user_id)
        except ObjectNotFoundError:
            return Cart.open(user_id)
