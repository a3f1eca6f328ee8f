from __future__ import annotations

import logging
from typing import Any, Mapping

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from cms.core.errors import ConflictError
from cms.models.customer import Customer
from cms.services.code_service import insert_with_code
from cms.services.fields import PERSONAL_FIELDS, partial_updates, require_fields

logger = logging.getLogger("cms.records")


def get_customer(db: Session, customer_id: int) -> Customer | None:
    return db.get(Customer, customer_id)


def get_customer_by_code(db: Session, customer_code: str) -> Customer | None:
    return db.execute(select(Customer).where(Customer.customer_code == customer_code)).scalar_one_or_none()


def list_customers(db: Session, owner_id: int | None = None) -> list[Customer]:
    """All customers, or only those created by ``owner_id`` when given."""
    q = select(Customer).order_by(Customer.id.desc())
    if owner_id is not None:
        q = q.where(Customer.created_by == owner_id)
    return list(db.execute(q).scalars().all())


def create_customer(db: Session, fields: Mapping[str, Any], *, owner_id: int | None = None) -> Customer:
    data = require_fields(fields)
    customer = insert_with_code(
        db,
        "customer",
        lambda code: Customer(customer_code=code, created_by=owner_id, **data),
        email=data["email"],
    )
    logger.info("Created customer %s (id=%s, owner=%s)", customer.customer_code, customer.id, owner_id)
    return customer


def update_customer(db: Session, customer_id: int, fields: Mapping[str, Any]) -> Customer | None:
    """Apply a partial update to personal fields. Returns None when the customer does not exist."""
    updates = partial_updates(fields, PERSONAL_FIELDS)

    customer = db.get(Customer, customer_id)
    if customer is None:
        return None

    if "email" in updates:
        dup = db.execute(select(Customer.id).where(Customer.email == updates["email"], Customer.id != customer.id)).first()
        if dup:
            raise ConflictError("Email already exists")

    for key, value in updates.items():
        setattr(customer, key, value)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise ConflictError("Email already exists") from None
    db.refresh(customer)
    logger.info("Updated customer %s fields=%s", customer.customer_code, sorted(updates))
    return customer


def delete_customer(db: Session, customer_id: int) -> bool:
    customer = db.get(Customer, customer_id)
    if customer is None:
        return False
    code = customer.customer_code
    db.delete(customer)
    db.commit()
    logger.info("Deleted customer %s (id=%s)", code, customer_id)
    return True
