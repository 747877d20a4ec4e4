"""Pydantic request/response schemas for the Commerce API.

These are external contracts (anti-corruption layer), separate from
internal Protean commands. Range checks that carry business meaning
(quantity ≥ 1 on set, rating 1–5) are left to the domain so that every
caller gets the same 400 error.
"""

from datetime import datetime

from pydantic import BaseModel, Field


# ---------------------------------------------------------------------------
# Shared sub-models
# ---------------------------------------------------------------------------
class AddressSchema(BaseModel):
    full_name: str
    phone: str
    street: str
    city: str
    state: str | None = None
    zip_code: str | None = None
    country: str = "Pakistan"


class StatusResponse(BaseModel):
    status: str = "ok"


# ---------------------------------------------------------------------------
# Cart
# ---------------------------------------------------------------------------
class AddToCartRequest(BaseModel):
    product_id: str
    quantity: int = Field(ge=1, default=1)

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "product_id": "6f1c2a0e-0000-4000-8000-000000000001",
                    "quantity": 2,
                }
            ]
        }
    }


class SetCartQuantityRequest(BaseModel):
    quantity: int


class CartItemResponse(BaseModel):
    product_id: str
    quantity: int
    price: float
    line_total: float


class CartResponse(BaseModel):
    user_id: str
    items: list[CartItemResponse]
    total_items: int
    total_amount: float

    @classmethod
    def from_cart(cls, cart) -> "CartResponse":
        return cls(
            user_id=str(cart.user_id),
            items=[
                CartItemResponse(
                    product_id=str(item.product_id),
                    quantity=item.quantity,
                    price=item.price,
                    line_total=round(item.price * item.quantity, 2),
                )
                for item in cart.items
            ],
            total_items=cart.total_items,
            total_amount=cart.total_amount,
        )


class CartCountResponse(BaseModel):
    count: int


# ---------------------------------------------------------------------------
# Orders
# ---------------------------------------------------------------------------
class CheckoutRequest(BaseModel):
    shipping_address: AddressSchema
    billing_address: AddressSchema | None = None
    payment_method: str = "cod"
    notes: str | None = None


class CancelOrderRequest(BaseModel):
    note: str | None = None


class UpdateOrderStatusRequest(BaseModel):
    status: str
    note: str | None = None
    override: bool = False


class OrderItemResponse(BaseModel):
    product_id: str
    name: str
    price: float
    quantity: int
    image: str | None = None


class StatusEntryResponse(BaseModel):
    status: str
    note: str | None = None
    actor_id: str | None = None
    recorded_at: datetime


def _address(value) -> AddressSchema | None:
    if value is None:
        return None
    return AddressSchema(
        full_name=value.full_name,
        phone=value.phone,
        street=value.street,
        city=value.city,
        state=value.state,
        zip_code=value.zip_code,
        country=value.country or "Pakistan",
    )


class OrderResponse(BaseModel):
    id: str
    order_number: str
    user_id: str
    items: list[OrderItemResponse]
    subtotal: float
    shipping_cost: float
    total_amount: float
    shipping_address: AddressSchema
    billing_address: AddressSchema | None = None
    payment_method: str
    payment_status: str
    status: str
    status_history: list[StatusEntryResponse]
    customer_note: str | None = None
    created_at: datetime | None = None
    cancelled_at: datetime | None = None
    delivered_at: datetime | None = None

    @classmethod
    def from_order(cls, order) -> "OrderResponse":
        return cls(
            id=str(order.id),
            order_number=order.order_number,
            user_id=str(order.user_id),
            items=[
                OrderItemResponse(
                    product_id=str(item.product_id),
                    name=item.name,
                    price=item.price,
                    quantity=item.quantity,
                    image=item.image,
                )
                for item in order.items
            ],
            subtotal=order.subtotal,
            shipping_cost=order.shipping_cost,
            total_amount=order.total_amount,
            shipping_address=_address(order.shipping_address),
            billing_address=_address(order.billing_address),
            payment_method=order.payment_method,
            payment_status=order.payment_status,
            status=order.status,
            status_history=sorted(
                (
                    StatusEntryResponse(
                        status=entry.status,
                        note=entry.note,
                        actor_id=str(entry.actor_id) if entry.actor_id else None,
                        recorded_at=entry.recorded_at,
                    )
                    for entry in order.status_history
                ),
                key=lambda entry: entry.recorded_at,
            ),
            customer_note=order.customer_note,
            created_at=order.created_at,
            cancelled_at=order.cancelled_at,
            delivered_at=order.delivered_at,
        )


class OrderStatsResponse(BaseModel):
    total_orders: int
    pending_orders: int
    today_orders: int
    monthly_orders: int
    total_revenue: float
    monthly_revenue: float


# ---------------------------------------------------------------------------
# Reviews
# ---------------------------------------------------------------------------
class SubmitReviewRequest(BaseModel):
    product_id: str
    rating: int
    comment: str | None = None


class EditReviewRequest(BaseModel):
    rating: int | None = None
    comment: str | None = None


class ReplyToReviewRequest(BaseModel):
    comment: str


class AdminReplyResponse(BaseModel):
    comment: str
    replied_by: str
    replied_at: datetime


class ReviewResponse(BaseModel):
    id: str
    product_id: str
    user_id: str
    rating: int
    comment: str | None = None
    status: str
    admin_reply: AdminReplyResponse | None = None
    created_at: datetime | None = None

    @classmethod
    def from_review(cls, review) -> "ReviewResponse":
        reply = review.admin_reply[0] if review.admin_reply else None
        return cls(
            id=str(review.id),
            product_id=str(review.product_id),
            user_id=str(review.user_id),
            rating=review.rating.score,
            comment=review.comment,
            status=review.status,
            admin_reply=(
                AdminReplyResponse(
                    comment=reply.comment,
                    replied_by=str(reply.replied_by),
                    replied_at=reply.replied_at,
                )
                if reply
                else None
            ),
            created_at=review.created_at,
        )


class RatingSummaryResponse(BaseModel):
    average: float
    count: int


class ProductReviewsResponse(BaseModel):
    product_id: str
    rating: RatingSummaryResponse
    reviews: list[ReviewResponse]
