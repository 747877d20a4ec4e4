"""Administrative status updates: command and handler.

Inventory follows the status:

    entering cancelled          release every line
    leaving cancelled (override) commit every line again

Only admin and superadmin principals may update a status.
"""

import structlog
from protean.fields import Boolean, Identifier, String
from protean.utils.globals import current_domain
from protean.utils.mixins import handle

from commerce.domain import commerce
from commerce.errors import Unauthorized
from commerce.inventory.ledger import InventoryLedger
from commerce.order.order import Order, OrderStatus
from commerce.roles import is_admin

logger = structlog.get_logger(__name__)


@commerce.command(part_of="Order")
class UpdateOrderStatus:
    order_id = Identifier(required=True)
    status = String(required=True, max_length=20)
    actor_id = Identifier(required=True)
    actor_role = String(required=True, max_length=20)
    note = String(max_length=500)
    override = Boolean(default=False)


@commerce.command_handler(part_of=Order)
class UpdateOrderStatusHandler:
    @handle(UpdateOrderStatus)
    def update_order_status(self, command):
        if not is_admin(command.actor_role):
            raise Unauthorized("Only administrators can update order status", user_id=command.actor_id)

        repo = current_domain.repository_for(Order)
        order = repo.fetch(command.order_id)

        previous = order.change_status(
            command.status,
            actor_id=command.actor_id,
            note=command.note,
            override=bool(command.override),
        )
        current = OrderStatus(order.status)

        ledger = InventoryLedger()
        if current == OrderStatus.CANCELLED and previous != OrderStatus.CANCELLED:
            ledger.release_all(order.lines())
        elif previous == OrderStatus.CANCELLED and current != OrderStatus.CANCELLED:
            ledger.commit_all(order.lines())

        repo.add(order)

        logger.info(
            "order_status_changed",
            order_id=str(order.id),
            order_number=order.order_number,
            previous_status=previous.value,
            new_status=current.value,
            actor_id=str(command.actor_id),
            override=bool(command.override),
        )
        return order
