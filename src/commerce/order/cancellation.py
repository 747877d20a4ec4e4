"""Customer cancellation: command and handler.

Cancelling puts every line of the order back into stock through the
Inventory Ledger, in the same Unit of Work as the status change.
"""

import structlog
from protean.fields import Identifier, String
from protean.utils.globals import current_domain
from protean.utils.mixins import handle

from commerce.domain import commerce
from commerce.errors import Unauthorized
from commerce.inventory.ledger import InventoryLedger
from commerce.order.order import Order

logger = structlog.get_logger(__name__)


@commerce.command(part_of="Order")
class CancelOrder:
    order_id = Identifier(required=True)
    user_id = Identifier(required=True)
    note = String(max_length=500)


@commerce.command_handler(part_of=Order)
class CancelOrderHandler:
    @handle(CancelOrder)
    def cancel_order(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.fetch(command.order_id)
        if not order.is_owned_by(command.user_id):
            raise Unauthorized("Not authorized to cancel this order", user_id=command.user_id)

        order.cancel(actor_id=command.user_id, note=command.note or "Cancelled by customer")
        InventoryLedger().release_all(order.lines())
        repo.add(order)

        logger.info(
            "order_cancelled",
            order_id=str(order.id),
            order_number=order.order_number,
            user_id=str(command.user_id),
        )
        return order
