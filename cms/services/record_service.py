"""Employee and customer operations on behalf of an authenticated caller.

Every entry point resolves the caller's permission through ``authorize``
before touching the stores, and returns output schemas that never carry the
password hash.
"""

from __future__ import annotations

import logging
from functools import wraps
from typing import Any, Callable, Mapping, TypeVar

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from cms.core.authz import Action, Decision, authorize
from cms.core.errors import AuthenticationError, AuthorizationError, NotFoundError, StorageError
from cms.core.security import Identity
from cms.models.employee import Role
from cms.schemas.customer import CustomerOut
from cms.schemas.employee import EmployeeOut
from cms.services import customer_service, employee_service
from cms.services.fields import PERSONAL_FIELDS, partial_updates, require_fields

logger = logging.getLogger("cms.records")

F = TypeVar("F", bound=Callable[..., Any])


def _storage_errors(func: F) -> F:
    """Surface database failures as StorageError. They are not retried."""

    @wraps(func)
    def wrapper(db: Session, *args: Any, **kwargs: Any) -> Any:
        try:
            return func(db, *args, **kwargs)
        except SQLAlchemyError as exc:
            db.rollback()
            logger.error("Storage failure in %s: %s", func.__name__, exc.__class__.__name__)
            raise StorageError() from exc

    return wrapper  # type: ignore[return-value]


def _require(identity: Identity | None, action: Action, *, owner_id: int | None = None) -> Decision:
    if identity is None:
        raise AuthenticationError()
    decision = authorize(identity, action, owner_id=owner_id)
    if not decision.allowed:
        logger.info("Denied %s for %s", action.value, identity.code)
        raise AuthorizationError()
    return decision


# Employees


@_storage_errors
def list_employees(db: Session, identity: Identity | None, *, role: Role | None = None) -> list[EmployeeOut]:
    _require(identity, Action.STAFF_LIST)
    return [EmployeeOut.model_validate(e) for e in employee_service.list_employees(db, role=role)]


@_storage_errors
def get_employee(db: Session, identity: Identity | None, employee_id: int) -> EmployeeOut:
    _require(identity, Action.STAFF_READ)
    employee = employee_service.get_employee(db, employee_id)
    if employee is None:
        raise NotFoundError("Employee not found")
    return EmployeeOut.model_validate(employee)


@_storage_errors
def create_employee(db: Session, identity: Identity | None, data: Mapping[str, Any]) -> EmployeeOut:
    if identity is None:
        raise AuthenticationError()
    fields = require_fields(data)
    password = employee_service.check_password(data.get("password"))
    role = employee_service.parse_role(data.get("role"))
    _require(identity, Action.STAFF_CREATE)

    employee = employee_service.create_employee(db, fields, password=password, role=role)
    return EmployeeOut.model_validate(employee)


@_storage_errors
def update_employee(db: Session, identity: Identity | None, employee_id: int, data: Mapping[str, Any]) -> EmployeeOut:
    _require(identity, Action.STAFF_UPDATE)
    employee = employee_service.update_employee(db, employee_id, data)
    if employee is None:
        raise NotFoundError("Employee not found")
    return EmployeeOut.model_validate(employee)


@_storage_errors
def set_employee_password(db: Session, identity: Identity | None, employee_id: int, password: str) -> None:
    _require(identity, Action.STAFF_SET_PASSWORD)
    if not employee_service.set_employee_password(db, employee_id, password):
        raise NotFoundError("Employee not found")


@_storage_errors
def delete_employee(db: Session, identity: Identity | None, employee_id: int) -> None:
    _require(identity, Action.STAFF_DELETE)
    if not employee_service.delete_employee(db, employee_id):
        raise NotFoundError("Employee not found")


# Customers


@_storage_errors
def list_customers(db: Session, identity: Identity | None) -> list[CustomerOut]:
    decision = _require(identity, Action.CUSTOMER_LIST)
    customers = customer_service.list_customers(db, owner_id=decision.owner_scope)
    return [CustomerOut.model_validate(c) for c in customers]


def _owned_customer(db: Session, identity: Identity | None, customer_id: int, action: Action):
    if identity is None:
        raise AuthenticationError()
    customer = customer_service.get_customer(db, customer_id)
    if customer is None and identity.is_admin:
        raise NotFoundError("Customer not found")
    # A standard caller gets the same answer for a missing record as for someone else's.
    _require(identity, action, owner_id=customer.created_by if customer is not None else None)
    return customer


@_storage_errors
def get_customer(db: Session, identity: Identity | None, customer_id: int) -> CustomerOut:
    customer = _owned_customer(db, identity, customer_id, Action.CUSTOMER_READ)
    return CustomerOut.model_validate(customer)


@_storage_errors
def create_customer(db: Session, identity: Identity | None, data: Mapping[str, Any]) -> CustomerOut:
    if identity is None:
        raise AuthenticationError()
    fields = require_fields(data)
    _require(identity, Action.CUSTOMER_CREATE)
    # The token outlives a deleted account; the owner must still exist.
    if employee_service.get_employee(db, identity.id) is None:
        raise AuthenticationError("Account no longer exists")

    customer = customer_service.create_customer(db, fields, owner_id=identity.id)
    return CustomerOut.model_validate(customer)


@_storage_errors
def update_customer(db: Session, identity: Identity | None, customer_id: int, data: Mapping[str, Any]) -> CustomerOut:
    if identity is None:
        raise AuthenticationError()
    # Reject empty or owner-changing updates before looking anything up.
    partial_updates(data, PERSONAL_FIELDS)
    _owned_customer(db, identity, customer_id, Action.CUSTOMER_UPDATE)

    customer = customer_service.update_customer(db, customer_id, data)
    if customer is None:
        raise NotFoundError("Customer not found")
    return CustomerOut.model_validate(customer)


@_storage_errors
def delete_customer(db: Session, identity: Identity | None, customer_id: int) -> None:
    _owned_customer(db, identity, customer_id, Action.CUSTOMER_DELETE)
    if not customer_service.delete_customer(db, customer_id):
        raise NotFoundError("Customer not found")
