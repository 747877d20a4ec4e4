"""Domain events for the Cart aggregate."""

from protean.fields import DateTime, Float, Identifier, Integer, Text

from commerce.domain import commerce


@commerce.event(part_of="Cart")
class CartItemAdded:
    """A product was added to the cart (or its quantity was increased)."""

    __version__ = 1

    user_id = Identifier(required=True)
    product_id = Identifier(required=True)
    quantity_added = Integer(required=True)
    new_quantity = Integer(required=True)
    price = Float(required=True)


@commerce.event(part_of="Cart")
class CartItemQuantitySet:
    __version__ = 1

    user_id = Identifier(required=True)
    product_id = Identifier(required=True)
    previous_quantity = Integer(required=True)
    new_quantity = Integer(required=True)
    price = Float(required=True)


@commerce.event(part_of="Cart")
class CartItemRemoved:
    __version__ = 1

    user_id = Identifier(required=True)
    product_id = Identifier(required=True)


@commerce.event(part_of="Cart")
class CartCleared:
    __version__ = 1

    user_id = Identifier(required=True)
    items_removed = Integer(required=True)
    cleared_at = DateTime(required=True)


@commerce.event(part_of="Cart")
class CartPruned:
    """Items whose product disappeared or was deactivated were dropped on read."""

    __version__ = 1

    user_id = Identifier(required=True)
    removed_product_ids = Text(required=True)  # JSON array of product ids
    pruned_at = DateTime(required=True)
