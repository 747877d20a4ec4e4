"""Domain events for the Order aggregate.

These are the outbound signals of the order lifecycle. The notification sink
(outside this core) consumes OrderPlaced and OrderStatusChanged; OrderCancelled
carries the released lines so stock movements can be audited per order.
"""

from protean.fields import Boolean, DateTime, Float, Identifier, String, Text

from commerce.domain import commerce


@commerce.event(part_of="Order")
class OrderPlaced:
    """A cart was checked out into a new pending order."""

    __version__ = 1

    order_id = Identifier(required=True)
    order_number = String(required=True)
    user_id = Identifier(required=True)
    items = Text(required=True)  # JSON: list of {product_id, name, price, quantity}
    subtotal = Float(required=True)
    shipping_cost = Float(required=True)
    total_amount = Float(required=True)
    payment_method = String(required=True)
    placed_at = DateTime(required=True)


@commerce.event(part_of="Order")
class OrderStatusChanged:
    """An administrator moved the order to a new status."""

    __version__ = 1

    order_id = Identifier(required=True)
    order_number = String(required=True)
    user_id = Identifier(required=True)
    previous_status = String(required=True)
    new_status = String(required=True)
    payment_status = String()
    note = String()
    changed_by = Identifier(required=True)
    override = Boolean(default=False)
    changed_at = DateTime(required=True)


@commerce.event(part_of="Order")
class OrderCancelled:
    __version__ = 1

    order_id = Identifier(required=True)
    order_number = String(required=True)
    user_id = Identifier(required=True)
    previous_status = String(required=True)
    cancelled_by = Identifier(required=True)
    note = String()
    items = Text(required=True)  # JSON: list of {product_id, quantity} returned to stock
    cancelled_at = DateTime(required=True)
