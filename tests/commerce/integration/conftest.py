"""Fixtures for the commerce HTTP API tests."""

import pytest
from commerce.api import admin_router, cart_router, order_router, register_error_handlers, review_router
from fastapi import FastAPI
from fastapi.testclient import TestClient


@pytest.fixture()
def client():
    app = FastAPI()
    app.include_router(cart_router)
    app.include_router(order_router)
    app.include_router(admin_router)
    app.include_router(review_router)
    register_error_handlers(app)
    return TestClient(app)


@pytest.fixture()
def customer():
    return {"X-User-Id": "user-001", "X-User-Role": "customer"}


@pytest.fixture()
def other_customer():
    return {"X-User-Id": "user-002", "X-User-Role": "customer"}


@pytest.fixture()
def admin():
    return {"X-User-Id": "admin-001", "X-User-Role": "admin"}
