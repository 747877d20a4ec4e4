"""Storefront commerce FastAPI application.

Processes cart, checkout, order and review commands synchronously via HTTP.
Each request runs inside the commerce domain context.

Usage:
    uvicorn app:app --app-dir src --host 0.0.0.0 --port 8000 --reload
"""

import uuid

# ---------------------------------------------------------------------------
# Domain initialization
# ---------------------------------------------------------------------------
# The domain is initialized at module level so uvicorn workers share it.
# PROTEAN_ENV controls which config overlay is applied:
#   - unset / "test" → event_processing = "sync"  (handlers fire in the request)
#   - "production"   → event_processing = "async" (handlers fire via Engine)
from commerce.domain import commerce  # noqa: E402
from commerce.utils.logging import add_context, clear_context, get_logger
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

commerce.init()

logger = get_logger(__name__)

# ---------------------------------------------------------------------------
# FastAPI app
# ---------------------------------------------------------------------------
app = FastAPI(
    title="Storefront Commerce API",
    description="Cart, checkout, order lifecycle and ratings",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def domain_context_middleware(request: Request, call_next):
    """Push the commerce domain context and bind request log context."""
    clear_context()
    add_context(
        request_id=request.headers.get("x-request-id") or str(uuid.uuid4()),
        user_id=request.headers.get("x-user-id"),
        path=request.url.path,
    )
    with commerce.domain_context():
        response = await call_next(request)
    logger.debug("request_completed", method=request.method, status_code=response.status_code)
    return response


# ---------------------------------------------------------------------------
# Routers
# ---------------------------------------------------------------------------
from commerce.api import (  # noqa: E402
    admin_router,
    cart_router,
    order_router,
    register_error_handlers,
    review_router,
)

app.include_router(cart_router)
app.include_router(order_router)
app.include_router(admin_router)
app.include_router(review_router)
register_error_handlers(app)


# ---------------------------------------------------------------------------
# Health / root
# ---------------------------------------------------------------------------
@app.get("/health")
async def health():
    return JSONResponse(content={"status": "ok", "domain": {"name": commerce.name}})
