"""BDD tests for order cancellation."""

from commerce.order.cancellation import CancelOrder
from commerce.order.order import Order
from commerce.order.status import UpdateOrderStatus
from protean import current_domain
from protean.exceptions import ValidationError
from pytest_bdd import parsers, scenarios, then, when

scenarios("features/order_cancellation.feature")


# ---------------------------------------------------------------------------
# When steps
# ---------------------------------------------------------------------------
@when("the customer cancels the order")
def _(order, customer_id, error):
    try:
        current_domain.process(CancelOrder(order_id=order.id, user_id=customer_id), asynchronous=False)
    except ValidationError as exc:
        error["exc"] = exc


@when(parsers.cfparse('an administrator moves the order to "{status}"'))
def _(order, status):
    current_domain.process(
        UpdateOrderStatus(order_id=order.id, status=status, actor_id="admin-001", actor_role="admin"),
        asynchronous=False,
    )


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
@then(parsers.cfparse('the order status is "{status}"'))
def _(order, status):
    assert current_domain.repository_for(Order).get(order.id).status == status


@then("the order records when it was cancelled")
def _(order):
    assert current_domain.repository_for(Order).get(order.id).cancelled_at is not None
