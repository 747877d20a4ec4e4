"""Order aggregate (CQRS): an immutable snapshot of a checked-out cart plus
its lifecycle state.

Items, prices and totals are fixed at checkout and never change afterwards:

    total_amount == subtotal + shipping_cost

State Machine:
    pending → confirmed → processing → shipped → delivered
    cancelled  (from pending, confirmed, processing)
    returned   (from shipped, delivered)

Customers may cancel only while the order is pending or confirmed.
Administrators follow the transition table, or force any move with an
explicit override. Every change appends to the status history, which is never
edited or truncated.
"""

import json
from datetime import UTC, datetime
from enum import Enum

import structlog
from protean import invariant
from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.fields import (
    DateTime,
    Float,
    HasMany,
    Identifier,
    Integer,
    String,
    Text,
    ValueObject,
)

from commerce.domain import commerce
from commerce.errors import InvalidTransition, NotFound
from commerce.order.events import OrderCancelled, OrderPlaced, OrderStatusChanged

logger = structlog.get_logger(__name__)


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------
class OrderStatus(Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    PROCESSING = "processing"
    SHIPPED = "shipped"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"
    RETURNED = "returned"


class PaymentMethod(Enum):
    COD = "cod"
    CARD = "card"
    BANK_TRANSFER = "bank_transfer"
    EASYPAISA = "easypaisa"
    JAZZCASH = "jazzcash"


class PaymentStatus(Enum):
    PENDING = "pending"
    PAID = "paid"
    FAILED = "failed"
    REFUNDED = "refunded"


# Administrative transition table
_VALID_TRANSITIONS = {
    OrderStatus.PENDING: {OrderStatus.CONFIRMED, OrderStatus.CANCELLED},
    OrderStatus.CONFIRMED: {OrderStatus.PROCESSING, OrderStatus.CANCELLED},
    OrderStatus.PROCESSING: {OrderStatus.SHIPPED, OrderStatus.CANCELLED},
    OrderStatus.SHIPPED: {OrderStatus.DELIVERED, OrderStatus.RETURNED},
    OrderStatus.DELIVERED: {OrderStatus.RETURNED},
    OrderStatus.CANCELLED: set(),  # Terminal
    OrderStatus.RETURNED: set(),  # Terminal
}

# States from which the customer may cancel
_CUSTOMER_CANCELLABLE_STATES = {OrderStatus.PENDING, OrderStatus.CONFIRMED}

# Orders in these states do not count towards revenue
_NON_REVENUE_STATES = {OrderStatus.CANCELLED, OrderStatus.RETURNED}


# ---------------------------------------------------------------------------
# Value Objects
# ---------------------------------------------------------------------------
@commerce.value_object(part_of="Order")
class Address:
    """Where the order ships to (or is billed to), as captured at checkout."""

    full_name = String(required=True, max_length=100)
    phone = String(required=True, max_length=30)
    street = String(required=True, max_length=255)
    city = String(required=True, max_length=100)
    state = String(max_length=100)
    zip_code = String(max_length=20)
    country = String(max_length=100, default="Pakistan")


# ---------------------------------------------------------------------------
# Entities
# ---------------------------------------------------------------------------
@commerce.entity(part_of="Order")
class OrderItem:
    """A product line copied from the cart: name, price and image are snapshots."""

    product_id = Identifier(required=True)
    name = String(required=True, max_length=100)
    price = Float(required=True, min_value=0.0)
    quantity = Integer(required=True, min_value=1)
    image = String(max_length=500)

    @property
    def line_total(self) -> float:
        return self.price * self.quantity


@commerce.entity(part_of="Order")
class StatusEntry:
    status = String(choices=OrderStatus, required=True)
    note = String(max_length=500)
    actor_id = Identifier()
    recorded_at = DateTime(required=True)


# ---------------------------------------------------------------------------
# Aggregate Root
# ---------------------------------------------------------------------------
@commerce.aggregate
class Order:
    order_number = String(required=True, max_length=30, unique=True)
    user_id = Identifier(required=True)
    items = HasMany(OrderItem)

    # Pricing (fixed at checkout)
    subtotal = Float(required=True, min_value=0.0)
    shipping_cost = Float(default=0.0, min_value=0.0)
    total_amount = Float(required=True, min_value=0.0)

    # Addresses
    shipping_address = ValueObject(Address, required=True)
    billing_address = ValueObject(Address)

    # Payment
    payment_method = String(choices=PaymentMethod, default=PaymentMethod.COD.value)
    payment_status = String(choices=PaymentStatus, default=PaymentStatus.PENDING.value)

    # Lifecycle
    status = String(choices=OrderStatus, default=OrderStatus.PENDING.value)
    status_history = HasMany(StatusEntry)
    customer_note = Text()
    cancelled_at = DateTime()
    delivered_at = DateTime()

    created_at = DateTime()
    updated_at = DateTime()

    # -------------------------------------------------------------------
    # Invariants
    # -------------------------------------------------------------------
    @invariant.post
    def totals_must_balance(self):
        if self.subtotal is None or self.total_amount is None:
            return
        if round(self.subtotal + (self.shipping_cost or 0.0), 2) != round(self.total_amount, 2):
            raise ValidationError({"total_amount": ["Total must equal subtotal plus shipping"]})

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def place(
        cls,
        order_number,
        user_id,
        lines,
        shipping_cost,
        shipping_address,
        billing_address=None,
        payment_method=PaymentMethod.COD.value,
        customer_note=None,
    ):
        """Create a pending order from priced cart lines.

        Args:
            lines: List of dicts with product_id, name, price, quantity, image.
            shipping_address: Dict with the Address fields.
            billing_address: Dict with the Address fields; defaults to the
                shipping address.
        """
        if not lines:
            raise ValidationError({"items": ["An order must contain at least one item"]})

        now = datetime.now(UTC)
        subtotal = round(sum(line["price"] * line["quantity"] for line in lines), 2)
        total_amount = round(subtotal + shipping_cost, 2)

        order = cls(
            order_number=order_number,
            user_id=user_id,
            items=[
                OrderItem(
                    product_id=line["product_id"],
                    name=line["name"],
                    price=line["price"],
                    quantity=line["quantity"],
                    image=line.get("image"),
                )
                for line in lines
            ],
            subtotal=subtotal,
            shipping_cost=shipping_cost,
            total_amount=total_amount,
            shipping_address=Address(**shipping_address),
            billing_address=Address(**(billing_address or shipping_address)),
            payment_method=payment_method or PaymentMethod.COD.value,
            payment_status=PaymentStatus.PENDING.value,
            status=OrderStatus.PENDING.value,
            status_history=[
                StatusEntry(
                    status=OrderStatus.PENDING.value,
                    note="Order placed",
                    actor_id=user_id,
                    recorded_at=now,
                )
            ],
            customer_note=customer_note,
            created_at=now,
            updated_at=now,
        )

        order.raise_(
            OrderPlaced(
                order_id=str(order.id),
                order_number=order_number,
                user_id=str(user_id),
                items=json.dumps(
                    [
                        {
                            "product_id": str(item.product_id),
                            "name": item.name,
                            "price": item.price,
                            "quantity": item.quantity,
                        }
                        for item in order.items
                    ]
                ),
                subtotal=subtotal,
                shipping_cost=shipping_cost,
                total_amount=total_amount,
                payment_method=order.payment_method,
                placed_at=now,
            )
        )
        return order

    # -------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------
    def is_owned_by(self, user_id) -> bool:
        return str(self.user_id) == str(user_id)

    def lines(self) -> list[tuple[str, int]]:
        """(product_id, quantity) pairs for every order line."""
        return [(str(item.product_id), item.quantity) for item in self.items]

    @property
    def counts_towards_revenue(self) -> bool:
        return OrderStatus(self.status) not in _NON_REVENUE_STATES

    # -------------------------------------------------------------------
    # Lifecycle transitions
    # -------------------------------------------------------------------
    def _record(self, status, note, actor_id, at):
        self.add_status_history(StatusEntry(status=status.value, note=note, actor_id=actor_id, recorded_at=at))

    def cancel(self, actor_id, note="Cancelled by customer"):
        """Customer cancellation, allowed only while pending or confirmed."""
        current = OrderStatus(self.status)
        if current not in _CUSTOMER_CANCELLABLE_STATES:
            raise InvalidTransition(current.value)

        now = datetime.now(UTC)
        self.status = OrderStatus.CANCELLED.value
        self.cancelled_at = now
        self.updated_at = now
        self._record(OrderStatus.CANCELLED, note, actor_id, now)

        self.raise_(
            OrderCancelled(
                order_id=str(self.id),
                order_number=self.order_number,
                user_id=str(self.user_id),
                previous_status=current.value,
                cancelled_by=str(actor_id),
                note=note,
                items=json.dumps([{"product_id": pid, "quantity": qty} for pid, qty in self.lines()]),
                cancelled_at=now,
            )
        )

    def change_status(self, new_status, actor_id, note=None, override=False):
        """Administrative status change.

        Returns the previous status so the caller can apply inventory
        side effects (release on entering cancelled, re-commit on leaving it).
        """
        try:
            target = OrderStatus(new_status)
        except ValueError:
            raise ValidationError({"status": [f"Unknown order status: {new_status}"]}) from None

        current = OrderStatus(self.status)
        if not override and target not in _VALID_TRANSITIONS.get(current, set()):
            raise InvalidTransition(current.value, target.value)

        now = datetime.now(UTC)
        note = note or f"Status updated to {target.value}"

        self.status = target.value
        self.updated_at = now
        if target == OrderStatus.CANCELLED:
            self.cancelled_at = now
        elif current == OrderStatus.CANCELLED:
            self.cancelled_at = None
        if target == OrderStatus.DELIVERED:
            self.delivered_at = now
            if PaymentMethod(self.payment_method) == PaymentMethod.COD:
                self.payment_status = PaymentStatus.PAID.value
        self._record(target, note, actor_id, now)

        if override:
            logger.warning(
                "order_status_override",
                order_id=str(self.id),
                order_number=self.order_number,
                previous_status=current.value,
                new_status=target.value,
                actor_id=str(actor_id),
            )

        self.raise_(
            OrderStatusChanged(
                order_id=str(self.id),
                order_number=self.order_number,
                user_id=str(self.user_id),
                previous_status=current.value,
                new_status=target.value,
                payment_status=self.payment_status,
                note=note,
                changed_by=str(actor_id),
                override=override,
                changed_at=now,
            )
        )
        if target == OrderStatus.CANCELLED and current != OrderStatus.CANCELLED:
            self.raise_(
                OrderCancelled(
                    order_id=str(self.id),
                    order_number=self.order_number,
                    user_id=str(self.user_id),
                    previous_status=current.value,
                    cancelled_by=str(actor_id),
                    note=note,
                    items=json.dumps([{"product_id": pid, "quantity": qty} for pid, qty in self.lines()]),
                    cancelled_at=now,
                )
            )
        return current


@commerce.repository(part_of=Order)
class OrderRepository:
    def find_by_number(self, order_number) -> Order | None:
        results = self._dao.query.filter(order_number=order_number).all().items
        return results[0] if results else None

    def number_taken(self, order_number) -> bool:
        return self.find_by_number(order_number) is not None

    def for_user(self, user_id, status=None) -> list[Order]:
        """A user's orders, newest first, optionally narrowed to one status."""
        filters = {"user_id": str(user_id)}
        if status:
            filters["status"] = OrderStatus(status).value
        orders = self._dao.query.filter(**filters).all().items
        return sorted(orders, key=lambda o: o.created_at, reverse=True)

    def everything(self) -> list[Order]:
        return self._dao.query.all().items

    def fetch(self, order_id) -> Order:
        try:
            return self.get(order_id)
        except ObjectNotFoundError:
            raise NotFound("Order", order_id) from None
