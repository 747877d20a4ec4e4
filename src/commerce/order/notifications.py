"""Order notifications: turns order events into notification payloads.

Delivery is outside the commerce core; the payload is logged for the
notification sink to pick up.
"""

import structlog
from protean.utils.mixins import handle

from commerce.domain import commerce
from commerce.order.events import OrderPlaced, OrderStatusChanged
from commerce.order.order import Order

logger = structlog.get_logger(__name__)


def placed_notification(event: OrderPlaced) -> dict:
    return {
        "user_id": str(event.user_id),
        "type": "order",
        "title": "Order Placed",
        "message": f"Your order #{event.order_number} has been placed",
        "order_id": str(event.order_id),
    }


def status_notification(event: OrderStatusChanged) -> dict:
    return {
        "user_id": str(event.user_id),
        "type": "order",
        "title": "Order Status Updated",
        "message": f"Your order #{event.order_number} is now {event.new_status}",
        "order_id": str(event.order_id),
    }


@commerce.event_handler(part_of=Order)
class OrderNotificationHandler:
    @handle(OrderPlaced)
    def on_order_placed(self, event: OrderPlaced) -> None:
        logger.info("notification_requested", **placed_notification(event))

    @handle(OrderStatusChanged)
    def on_order_status_changed(self, event: OrderStatusChanged) -> None:
        logger.info("notification_requested", **status_notification(event))
