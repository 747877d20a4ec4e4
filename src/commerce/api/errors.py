"""Map commerce errors to HTTP responses.

Protean's own handlers are registered first. The handlers added here replace
them for ValidationError and ObjectNotFoundError and cover every commerce
error type, adding the error's context (offending product, available
quantity, order status) to the response body.

    ValidationError and its subclasses  400
    ObjectNotFoundError, NotFound        404
    Unauthorized                         403
"""

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.integrations.fastapi import register_exception_handlers

from commerce.errors import (
    DuplicateReview,
    EmptyCart,
    InsufficientStock,
    InvalidTransition,
    NotFound,
    ProductUnavailable,
    Unauthorized,
)

_CONTEXT_FIELDS = (
    "product_id",
    "product_name",
    "available",
    "requested",
    "current_status",
    "target_status",
)

_STATUS_CODES = {
    InsufficientStock: 400,
    ProductUnavailable: 400,
    EmptyCart: 400,
    DuplicateReview: 400,
    InvalidTransition: 400,
    NotFound: 404,
    Unauthorized: 403,
    ValidationError: 400,
    ObjectNotFoundError: 404,
}


def error_body(exc) -> dict:
    body = {"code": type(exc).__name__, "error": getattr(exc, "messages", None) or str(exc)}
    context = {name: getattr(exc, name) for name in _CONTEXT_FIELDS if getattr(exc, name, None) is not None}
    if context:
        body["context"] = context
    return body


def register_error_handlers(app: FastAPI) -> None:
    register_exception_handlers(app)

    for error_class, status_code in _STATUS_CODES.items():

        async def handler(request: Request, exc, status_code=status_code):
            return JSONResponse(status_code=status_code, content=error_body(exc))

        app.add_exception_handler(error_class, handler)
