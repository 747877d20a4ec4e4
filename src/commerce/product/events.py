"""Domain events for the Product aggregate.

Only the events this core is responsible for: registration by the catalog
collaborator, price and availability changes, and every stock or rating
adjustment made through the Inventory Ledger and the Rating Aggregator.
"""

from protean.fields import DateTime, Float, Identifier, Integer, String

from commerce.domain import commerce


@commerce.event(part_of="Product")
class ProductRegistered:
    """The catalog handed a new product over to the commerce core."""

    __version__ = 1

    product_id = Identifier(required=True)
    name = String(required=True)
    price = Float(required=True)
    stock = Integer(required=True)
    registered_at = DateTime(required=True)


@commerce.event(part_of="Product")
class ProductPriceChanged:
    __version__ = 1

    product_id = Identifier(required=True)
    previous_price = Float(required=True)
    new_price = Float(required=True)
    changed_at = DateTime(required=True)


@commerce.event(part_of="Product")
class ProductDeactivated:
    __version__ = 1

    product_id = Identifier(required=True)
    deactivated_at = DateTime(required=True)


@commerce.event(part_of="Product")
class StockCommitted:
    """Stock was taken off the shelf for an order (stock down, sold count up)."""

    __version__ = 1

    product_id = Identifier(required=True)
    quantity = Integer(required=True)
    previous_stock = Integer(required=True)
    new_stock = Integer(required=True)
    new_sold_count = Integer(required=True)
    committed_at = DateTime(required=True)


@commerce.event(part_of="Product")
class StockReleased:
    """Previously committed stock was put back (compensation for a cancelled order)."""

    __version__ = 1

    product_id = Identifier(required=True)
    quantity = Integer(required=True)
    previous_stock = Integer(required=True)
    new_stock = Integer(required=True)
    new_sold_count = Integer(required=True)
    released_at = DateTime(required=True)


@commerce.event(part_of="Product")
class LowStockDetected:
    __version__ = 1

    product_id = Identifier(required=True)
    name = String(required=True)
    current_stock = Integer(required=True)
    threshold = Integer(required=True)
    detected_at = DateTime(required=True)


@commerce.event(part_of="Product")
class ProductRatingRecalculated:
    """The denormalized rating summary was recomputed from the live review set."""

    __version__ = 1

    product_id = Identifier(required=True)
    average = Float(required=True)
    count = Integer(required=True)
    recalculated_at = DateTime(required=True)
