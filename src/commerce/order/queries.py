"""Read-side helpers for orders: ownership-checked lookup, listing, stats."""

from datetime import UTC, datetime

from protean.utils.globals import current_domain

from commerce.errors import Unauthorized
from commerce.order.order import Order, OrderStatus
from commerce.roles import is_admin


def fetch_order(order_id, user_id, role=None) -> Order:
    """An order visible to the principal: its owner or an administrator."""
    order = current_domain.repository_for(Order).fetch(order_id)
    if not order.is_owned_by(user_id) and not is_admin(role):
        raise Unauthorized("Not authorized to view this order", user_id=user_id)
    return order


def orders_for_user(user_id, status=None) -> list[Order]:
    return current_domain.repository_for(Order).for_user(user_id, status=status)


def _as_utc(moment):
    return moment.replace(tzinfo=UTC) if moment.tzinfo is None else moment


def order_stats(now=None) -> dict:
    """Counts and revenue across all orders.

    Revenue excludes cancelled and returned orders.
    """
    now = now or datetime.now(UTC)
    start_of_day = now.replace(hour=0, minute=0, second=0, microsecond=0)
    start_of_month = start_of_day.replace(day=1)

    orders = current_domain.repository_for(Order).everything()
    created = [(order, _as_utc(order.created_at)) for order in orders if order.created_at]

    return {
        "total_orders": len(orders),
        "pending_orders": sum(1 for o in orders if o.status == OrderStatus.PENDING.value),
        "today_orders": sum(1 for _, at in created if at >= start_of_day),
        "monthly_orders": sum(1 for _, at in created if at >= start_of_month),
        "total_revenue": round(sum(o.total_amount for o in orders if o.counts_towards_revenue), 2),
        "monthly_revenue": round(
            sum(o.total_amount for o, at in created if at >= start_of_month and o.counts_towards_revenue), 2
        ),
    }
