"""
Access policy gate.

A single declarative table maps every guarded operation to the set of roles
allowed to call it. An empty set means "any authenticated principal".
Routes never compare roles themselves, they go through ``check_access``
(wired into FastAPI by ``utils.tokenJWT.policy_required``).
"""
from __future__ import annotations

import enum
import logging
from dataclasses import dataclass
from typing import Callable, Dict, FrozenSet, Iterable, Optional

from sqlalchemy.orm import Session

from models.personnel import Personnel
from utils.errors import RoleNotFound

logger = logging.getLogger(__name__)


class Role(str, enum.Enum):
    ADMIN = "admin"
    MANAGER = "manager"
    STAFF = "staff"


DEFAULT_ROLE = Role.STAFF

ANY_AUTHENTICATED: FrozenSet[Role] = frozenset()

OPERATION_POLICY: Dict[str, FrozenSet[Role]] = {
    # Order ledger
    "orders.create": ANY_AUTHENTICATED,
    "orders.read": ANY_AUTHENTICATED,
    "orders.update": ANY_AUTHENTICATED,
    "orders.delete": ANY_AUTHENTICATED,
    # Stock ledger
    "stocks.create": ANY_AUTHENTICATED,
    "stocks.read": ANY_AUTHENTICATED,
    "stocks.update": ANY_AUTHENTICATED,
    "stocks.exit": ANY_AUTHENTICATED,
    "stocks.delete": ANY_AUTHENTICATED,
    # Reporting
    "reports.stock_summary": ANY_AUTHENTICATED,
    "reports.low_stock_alerts": ANY_AUTHENTICATED,
    "reports.stock_movement": frozenset({Role.ADMIN, Role.MANAGER}),
    # Master data
    "companies.manage": ANY_AUTHENTICATED,
    "suppliers.manage": ANY_AUTHENTICATED,
    "personnel.manage": ANY_AUTHENTICATED,
    "personnel.change_role": frozenset({Role.ADMIN}),
    # Audit trail
    "logs.read": frozenset({Role.ADMIN}),
}


@dataclass(frozen=True)
class Principal:
    """Authenticated caller as proven by the bearer token."""
    email: str
    personnel_id: Optional[int] = None


@dataclass(frozen=True)
class AccessDecision:
    allowed: bool
    reason: Optional[str] = None


ALLOW = AccessDecision(allowed=True)

RoleLookup = Callable[[Principal], str]


def required_roles_for(operation: str) -> FrozenSet[Role]:
    try:
        return OPERATION_POLICY[operation]
    except KeyError:
        raise KeyError(f"No access policy declared for operation '{operation}'")


def check_access(
    principal: Principal,
    required_roles: Iterable[Role],
    role_of: RoleLookup,
) -> AccessDecision:
    required = {Role(r) for r in required_roles}
    if not required:
        return ALLOW

    try:
        role = role_of(principal)
    except RoleNotFound:
        logger.info("Role lookup failed for %s", principal.email)
        return AccessDecision(allowed=False, reason="role unverifiable")

    if role not in {r.value for r in required}:
        return AccessDecision(allowed=False, reason="insufficient permissions")
    return ALLOW


def personnel_role_lookup(db: Session) -> RoleLookup:
    """Role lookup backed by the personnel table (matched by e-mail)."""

    def _role_of(principal: Principal) -> str:
        person = (
            db.query(Personnel)
            .filter(Personnel.email == principal.email.strip().lower())
            .first()
        )
        if person is None:
            raise RoleNotFound()
        return (person.role or DEFAULT_ROLE.value).lower()

    return _role_of
