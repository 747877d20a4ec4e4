"""Typed errors raised by the commerce core.

Every error extends a Protean exception so the FastAPI exception handlers
render it without extra wiring, and carries the context a caller needs to
show an actionable message (offending product, available quantity, current
status). All of them are recoverable by the caller.
"""

from protean.exceptions import InvalidOperationError, ObjectNotFoundError, ValidationError


class _WithMessages:
    """Mixin that stores Protean-style `{field: [message]}` messages on the error."""

    def _init_messages(self, field, message):
        messages = {field: [message]}
        super().__init__(messages)
        self.messages = messages


class InsufficientStock(_WithMessages, ValidationError):
    def __init__(self, product_id, available, requested, product_name=None):
        self.product_id = str(product_id)
        self.product_name = product_name
        self.available = available
        self.requested = requested

        label = f'"{product_name}"' if product_name else f"product {product_id}"
        self._init_messages("stock", f"Only {available} units of {label} available, {requested} requested")


class ProductUnavailable(_WithMessages, ValidationError):
    def __init__(self, product_id, product_name=None):
        self.product_id = str(product_id)
        self.product_name = product_name

        label = f'Product "{product_name}"' if product_name else f"Product {product_id}"
        self._init_messages("product", f"{label} is no longer available")


class EmptyCart(_WithMessages, ValidationError):
    def __init__(self, user_id):
        self.user_id = str(user_id)
        self._init_messages("cart", "Cart is empty")


class DuplicateReview(_WithMessages, ValidationError):
    def __init__(self, user_id, product_id):
        self.user_id = str(user_id)
        self.product_id = str(product_id)
        self._init_messages("review", "You have already reviewed this product")


class InvalidTransition(_WithMessages, ValidationError):
    def __init__(self, current_status, target_status=None):
        self.current_status = current_status
        self.target_status = target_status

        if target_status:
            message = f"Cannot move order from {current_status} to {target_status}"
        else:
            message = f"Cannot cancel order with status: {current_status}"
        self._init_messages("status", message)


class NotFound(_WithMessages, ObjectNotFoundError):
    def __init__(self, kind, identifier):
        self.kind = kind
        self.identifier = str(identifier)
        self._init_messages(kind.lower(), f"{kind} {identifier} not found")


class Unauthorized(_WithMessages, InvalidOperationError):
    def __init__(self, message="Not authorized", user_id=None):
        self.user_id = str(user_id) if user_id is not None else None
        self._init_messages("authorization", message)
