"""The acting principal, as asserted by the upstream auth gateway.

The gateway authenticates the caller and forwards `X-User-Id` and
`X-User-Role`; this service trusts those headers and never issues tokens.
"""

from dataclasses import dataclass

from fastapi import Header, HTTPException

from commerce.roles import Role, is_admin


@dataclass(frozen=True)
class Principal:
    user_id: str
    role: str = Role.CUSTOMER.value

    @property
    def is_admin(self) -> bool:
        return is_admin(self.role)


def current_principal(
    x_user_id: str = Header(default=""),
    x_user_role: str = Header(default=Role.CUSTOMER.value),
) -> Principal:
    if not x_user_id:
        raise HTTPException(status_code=401, detail="Missing X-User-Id header")
    return Principal(user_id=x_user_id, role=(x_user_role or Role.CUSTOMER.value).lower())


def admin_principal(
    x_user_id: str = Header(default=""),
    x_user_role: str = Header(default=Role.CUSTOMER.value),
) -> Principal:
    principal = current_principal(x_user_id, x_user_role)
    if not principal.is_admin:
        raise HTTPException(status_code=403, detail="Administrator role required")
    return principal
