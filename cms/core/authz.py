"""Authorization decisions for employee and customer operations.

``authorize`` is pure: it never touches the database. Operations on a single
customer need the target's owner, so the caller looks the record up first and
passes ``owner_id``.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Optional

from cms.core.security import Identity
from cms.models.employee import Role


class Action(str, enum.Enum):
    STAFF_LIST = "staff:list"
    STAFF_READ = "staff:read"
    STAFF_CREATE = "staff:create"
    STAFF_UPDATE = "staff:update"
    STAFF_SET_PASSWORD = "staff:set_password"
    STAFF_DELETE = "staff:delete"

    CUSTOMER_LIST = "customer:list"
    CUSTOMER_READ = "customer:read"
    CUSTOMER_CREATE = "customer:create"
    CUSTOMER_UPDATE = "customer:update"
    CUSTOMER_DELETE = "customer:delete"


STAFF_ACTIONS = frozenset(
    {
        Action.STAFF_LIST,
        Action.STAFF_READ,
        Action.STAFF_CREATE,
        Action.STAFF_UPDATE,
        Action.STAFF_SET_PASSWORD,
        Action.STAFF_DELETE,
    }
)
OWNED_CUSTOMER_ACTIONS = frozenset({Action.CUSTOMER_READ, Action.CUSTOMER_UPDATE, Action.CUSTOMER_DELETE})


@dataclass(frozen=True)
class Decision:
    allowed: bool
    # For customer listing: only rows owned by this employee id may be returned.
    owner_scope: Optional[int] = None


ALLOW = Decision(allowed=True)
DENY = Decision(allowed=False)


def authorize(identity: Optional[Identity], action: Action, *, owner_id: Optional[int] = None) -> Decision:
    if identity is None:
        return DENY

    if identity.role is Role.ADMIN:
        return ALLOW

    if identity.role is Role.USER:
        if action in STAFF_ACTIONS:
            return DENY
        if action is Action.CUSTOMER_LIST:
            return Decision(allowed=True, owner_scope=identity.id)
        if action is Action.CUSTOMER_CREATE:
            return ALLOW
        if action in OWNED_CUSTOMER_ACTIONS:
            return ALLOW if owner_id is not None and owner_id == identity.id else DENY
        raise ValueError(f"Unhandled action: {action!r}")

    raise ValueError(f"Unhandled role: {identity.role!r}")
