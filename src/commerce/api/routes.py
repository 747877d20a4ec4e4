"""FastAPI routes for the Commerce domain: cart, orders, admin and reviews.

Routes only translate requests into commands and aggregates into responses.
"""

import json

from fastapi import APIRouter, Depends
from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from commerce.api.principal import Principal, admin_principal, current_principal
from commerce.api.schemas import (
    AddToCartRequest,
    CancelOrderRequest,
    CartCountResponse,
    CartResponse,
    CheckoutRequest,
    EditReviewRequest,
    OrderResponse,
    OrderStatsResponse,
    ProductReviewsResponse,
    RatingSummaryResponse,
    ReplyToReviewRequest,
    ReviewResponse,
    SetCartQuantityRequest,
    StatusResponse,
    SubmitReviewRequest,
    UpdateOrderStatusRequest,
)
from commerce.cart.items import AddToCart, ClearCart, RemoveFromCart, SetCartItemQuantity
from commerce.cart.viewing import ViewCart, cart_count
from commerce.errors import NotFound
from commerce.order.cancellation import CancelOrder
from commerce.order.checkout import Checkout
from commerce.order.queries import fetch_order, order_stats, orders_for_user
from commerce.order.status import UpdateOrderStatus
from commerce.product.product import Product
from commerce.review.editing import EditReview
from commerce.review.removal import RemoveReview
from commerce.review.reply import ReplyToReview
from commerce.review.review import Review
from commerce.review.submission import SubmitReview


def _process(command):
    return current_domain.process(command, asynchronous=False)


# ---------------------------------------------------------------------------
# Cart Router
# ---------------------------------------------------------------------------
cart_router = APIRouter(prefix="/cart", tags=["cart"])


@cart_router.get("", response_model=CartResponse)
async def view_cart(principal: Principal = Depends(current_principal)) -> CartResponse:
    cart = _process(ViewCart(user_id=principal.user_id))
    return CartResponse.from_cart(cart)


@cart_router.get("/count", response_model=CartCountResponse)
async def count_cart(principal: Principal = Depends(current_principal)) -> CartCountResponse:
    return CartCountResponse(count=cart_count(principal.user_id))


@cart_router.post("", response_model=CartResponse)
async def add_to_cart(body: AddToCartRequest, principal: Principal = Depends(current_principal)) -> CartResponse:
    cart = _process(
        AddToCart(
            user_id=principal.user_id,
            product_id=body.product_id,
            quantity=body.quantity,
        )
    )
    return CartResponse.from_cart(cart)


@cart_router.put("/{product_id}", response_model=CartResponse)
async def set_cart_quantity(
    product_id: str,
    body: SetCartQuantityRequest,
    principal: Principal = Depends(current_principal),
) -> CartResponse:
    cart = _process(
        SetCartItemQuantity(
            user_id=principal.user_id,
            product_id=product_id,
            quantity=body.quantity,
        )
    )
    return CartResponse.from_cart(cart)


@cart_router.delete("/{product_id}", response_model=CartResponse)
async def remove_from_cart(product_id: str, principal: Principal = Depends(current_principal)) -> CartResponse:
    cart = _process(RemoveFromCart(user_id=principal.user_id, product_id=product_id))
    return CartResponse.from_cart(cart)


@cart_router.delete("", response_model=CartResponse)
async def clear_cart(principal: Principal = Depends(current_principal)) -> CartResponse:
    cart = _process(ClearCart(user_id=principal.user_id))
    return CartResponse.from_cart(cart)


# ---------------------------------------------------------------------------
# Order Router
# ---------------------------------------------------------------------------
order_router = APIRouter(prefix="/orders", tags=["orders"])


@order_router.post("", status_code=201, response_model=OrderResponse)
async def checkout(body: CheckoutRequest, principal: Principal = Depends(current_principal)) -> OrderResponse:
    order = _process(
        Checkout(
            user_id=principal.user_id,
            shipping_address=json.dumps(body.shipping_address.model_dump()),
            billing_address=json.dumps(body.billing_address.model_dump()) if body.billing_address else None,
            payment_method=body.payment_method,
            notes=body.notes,
        )
    )
    return OrderResponse.from_order(order)


@order_router.get("", response_model=list[OrderResponse])
async def my_orders(status: str | None = None, principal: Principal = Depends(current_principal)):
    return [OrderResponse.from_order(order) for order in orders_for_user(principal.user_id, status=status)]


@order_router.get("/{order_id}", response_model=OrderResponse)
async def get_order(order_id: str, principal: Principal = Depends(current_principal)) -> OrderResponse:
    return OrderResponse.from_order(fetch_order(order_id, principal.user_id, principal.role))


@order_router.post("/{order_id}/cancel", response_model=OrderResponse)
async def cancel_order(
    order_id: str,
    body: CancelOrderRequest | None = None,
    principal: Principal = Depends(current_principal),
) -> OrderResponse:
    order = _process(
        CancelOrder(
            order_id=order_id,
            user_id=principal.user_id,
            note=body.note if body else None,
        )
    )
    return OrderResponse.from_order(order)


# ---------------------------------------------------------------------------
# Admin Router
# ---------------------------------------------------------------------------
admin_router = APIRouter(prefix="/admin", tags=["admin"])


@admin_router.patch("/orders/{order_id}/status", response_model=OrderResponse)
async def update_order_status(
    order_id: str,
    body: UpdateOrderStatusRequest,
    principal: Principal = Depends(admin_principal),
) -> OrderResponse:
    order = _process(
        UpdateOrderStatus(
            order_id=order_id,
            status=body.status,
            actor_id=principal.user_id,
            actor_role=principal.role,
            note=body.note,
            override=body.override,
        )
    )
    return OrderResponse.from_order(order)


@admin_router.get("/orders/stats", response_model=OrderStatsResponse)
async def get_order_stats(principal: Principal = Depends(admin_principal)) -> OrderStatsResponse:  # noqa: ARG001
    return OrderStatsResponse(**order_stats())


# ---------------------------------------------------------------------------
# Review Router
# ---------------------------------------------------------------------------
review_router = APIRouter(prefix="/reviews", tags=["reviews"])


@review_router.post("", status_code=201, response_model=ReviewResponse)
async def submit_review(body: SubmitReviewRequest, principal: Principal = Depends(current_principal)):
    review = _process(
        SubmitReview(
            product_id=body.product_id,
            user_id=principal.user_id,
            rating=body.rating,
            comment=body.comment,
        )
    )
    return ReviewResponse.from_review(review)


@review_router.put("/{review_id}", response_model=ReviewResponse)
async def edit_review(review_id: str, body: EditReviewRequest, principal: Principal = Depends(current_principal)):
    review = _process(
        EditReview(
            review_id=review_id,
            user_id=principal.user_id,
            rating=body.rating,
            comment=body.comment,
        )
    )
    return ReviewResponse.from_review(review)


@review_router.delete("/{review_id}", response_model=StatusResponse)
async def remove_review(review_id: str, principal: Principal = Depends(current_principal)) -> StatusResponse:
    _process(RemoveReview(review_id=review_id, user_id=principal.user_id))
    return StatusResponse()


@review_router.post("/{review_id}/reply", response_model=ReviewResponse)
async def reply_to_review(
    review_id: str,
    body: ReplyToReviewRequest,
    principal: Principal = Depends(admin_principal),
):
    review = _process(
        ReplyToReview(
            review_id=review_id,
            admin_id=principal.user_id,
            admin_role=principal.role,
            comment=body.comment,
        )
    )
    return ReviewResponse.from_review(review)


@review_router.get("/product/{product_id}", response_model=ProductReviewsResponse)
async def product_reviews(product_id: str) -> ProductReviewsResponse:
    try:
        product = current_domain.repository_for(Product).get(product_id)
    except ObjectNotFoundError:
        raise NotFound("Product", product_id) from None

    reviews = current_domain.repository_for(Review).live_for_product(product_id)
    return ProductReviewsResponse(
        product_id=str(product.id),
        rating=RatingSummaryResponse(
            average=product.rating.average if product.rating else 0.0,
            count=product.rating.count if product.rating else 0,
        ),
        reviews=[ReviewResponse.from_review(review) for review in reviews],
    )
