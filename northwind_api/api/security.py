"""Bearer token authentication and the named authorization policies.

Routes declare the policy they need with ``Depends(require_policy(...))``;
``evaluate_policy`` is the single place that decides whether a principal
satisfies it.
"""

from dataclasses import dataclass, field
from typing import Callable, Optional

from fastapi import Depends, HTTPException, Request

from northwind_api.auth_local import decode_access_token
from northwind_api.core.logging_config import set_request_context

BEARER_PREFIX = "Bearer "
ADMIN_ROLE = "Admin"


class AuthScopes:
    READ_CUSTOMERS = "read:customers"
    WRITE_CUSTOMERS = "write:customers"
    READ_ORDERS = "read:orders"
    WRITE_ORDERS = "write:orders"
    READ_PRODUCTS = "read:products"
    WRITE_PRODUCTS = "write:products"
    READ_ORDER_ITEMS = "read:orderItems"
    WRITE_ORDER_ITEMS = "write:orderItems"

    ALL = (
        READ_CUSTOMERS, WRITE_CUSTOMERS,
        READ_ORDERS, WRITE_ORDERS,
        READ_PRODUCTS, WRITE_PRODUCTS,
        READ_ORDER_ITEMS, WRITE_ORDER_ITEMS,
    )


def _claim_values(value) -> list:
    """A space-separated string or a list of strings; anything else is a malformed token."""
    if not value:
        return []
    if isinstance(value, str):
        return value.split()
    if isinstance(value, (list, tuple)) and all(isinstance(v, str) for v in value):
        return list(value)
    raise ValueError(f"Unsupported claim value: {value!r}")


@dataclass(frozen=True)
class Principal:
    subject: str
    scopes: frozenset = field(default_factory=frozenset)
    roles: frozenset = field(default_factory=frozenset)

    @classmethod
    def from_claims(cls, claims: dict) -> "Principal":
        return cls(
            subject=str(claims.get("sub")),
            scopes=frozenset(_claim_values(claims.get("scope"))),
            roles=frozenset(_claim_values(claims.get("roles"))),
        )

    def has_scope(self, scope: str) -> bool:
        return scope in self.scopes

    def has_role(self, role: str) -> bool:
        return role in self.roles


@dataclass(frozen=True)
class Policy:
    name: str
    scopes: tuple = ()
    roles: tuple = ()

    def is_satisfied_by(self, principal: Principal) -> bool:
        """Any listed scope or any listed role is enough."""
        return any(principal.has_scope(s) for s in self.scopes) or any(principal.has_role(r) for r in self.roles)


PRODUCTS_WRITE_OR_ADMIN = "ProductsWriteOrAdmin"
ADMIN_ONLY = "AdminOnly"

POLICIES = {
    AuthScopes.READ_CUSTOMERS: Policy(AuthScopes.READ_CUSTOMERS, scopes=(AuthScopes.READ_CUSTOMERS,)),
    AuthScopes.WRITE_CUSTOMERS: Policy(AuthScopes.WRITE_CUSTOMERS, scopes=(AuthScopes.WRITE_CUSTOMERS,)),
    AuthScopes.READ_ORDERS: Policy(AuthScopes.READ_ORDERS, scopes=(AuthScopes.READ_ORDERS,)),
    AuthScopes.WRITE_ORDERS: Policy(AuthScopes.WRITE_ORDERS, scopes=(AuthScopes.WRITE_ORDERS,)),
    AuthScopes.READ_ORDER_ITEMS: Policy(AuthScopes.READ_ORDER_ITEMS, scopes=(AuthScopes.READ_ORDER_ITEMS,)),
    AuthScopes.WRITE_ORDER_ITEMS: Policy(AuthScopes.WRITE_ORDER_ITEMS, scopes=(AuthScopes.WRITE_ORDER_ITEMS,)),
    AuthScopes.READ_PRODUCTS: Policy(AuthScopes.READ_PRODUCTS, scopes=(AuthScopes.READ_PRODUCTS,)),
    PRODUCTS_WRITE_OR_ADMIN: Policy(PRODUCTS_WRITE_OR_ADMIN, scopes=(AuthScopes.WRITE_PRODUCTS,), roles=(ADMIN_ROLE,)),
    ADMIN_ONLY: Policy(ADMIN_ONLY, roles=(ADMIN_ROLE,)),
}


def evaluate_policy(principal: Optional[Principal], policy_name: str) -> bool:
    policy = POLICIES.get(policy_name)
    if policy is None:
        raise KeyError(f"Unknown authorization policy: {policy_name}")
    if principal is None:
        return False
    return policy.is_satisfied_by(principal)


async def get_principal(request: Request) -> Principal:
    auth_header = request.headers.get("Authorization")
    if not auth_header or not auth_header.startswith(BEARER_PREFIX):
        raise HTTPException(status_code=401, detail="Missing token", headers={"WWW-Authenticate": "Bearer"})
    claims = decode_access_token(auth_header[len(BEARER_PREFIX):].strip())
    if not claims or not claims.get("sub"):
        raise HTTPException(status_code=401, detail="Invalid token", headers={"WWW-Authenticate": "Bearer"})

    try:
        principal = Principal.from_claims(claims)
    except ValueError:
        raise HTTPException(status_code=401, detail="Invalid token", headers={"WWW-Authenticate": "Bearer"}) from None
    set_request_context(user_id=principal.subject)
    return principal


def require_policy(policy_name: str) -> Callable[..., Principal]:
    if policy_name not in POLICIES:
        raise KeyError(f"Unknown authorization policy: {policy_name}")

    def dependency(principal: Principal = Depends(get_principal)) -> Principal:
        if not evaluate_policy(principal, policy_name):
            raise HTTPException(status_code=403, detail=f"Policy '{policy_name}' is not satisfied.")
        return principal

    return dependency
