"""Roles carried by the principal context."""

from enum import Enum


class Role(Enum):
    CUSTOMER = "customer"
    ADMIN = "admin"
    SUPERADMIN = "superadmin"


ADMIN_ROLES = {Role.ADMIN.value, Role.SUPERADMIN.value}


def is_admin(role) -> bool:
    return (role or "").lower() in ADMIN_ROLES
