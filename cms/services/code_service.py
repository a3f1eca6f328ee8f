"""Human-readable record codes (EMP001, CUST001, ...).

Each collection has a row in ``code_counters``. Advancing it is a single
``UPDATE ... SET last_value = last_value + 1`` inside the creating
transaction, so the row write lock serializes concurrent creators until the
new record is committed. Counters only move forward, so a deleted record's
code is never handed out again.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, TypeVar

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import InstrumentedAttribute, Session

from cms.core.config import get_settings
from cms.core.errors import ConflictError
from cms.models.code_counter import CodeCounter
from cms.models.customer import Customer
from cms.models.employee import Employee

logger = logging.getLogger("cms.codes")

T = TypeVar("T")


@dataclass(frozen=True)
class Collection:
    name: str
    prefix: str
    code_column: InstrumentedAttribute
    email_column: InstrumentedAttribute


EMPLOYEES = Collection("employee", "EMP", Employee.employee_code, Employee.email)
CUSTOMERS = Collection("customer", "CUST", Customer.customer_code, Customer.email)

COLLECTIONS = {c.name: c for c in (EMPLOYEES, CUSTOMERS)}


def format_code(prefix: str, value: int) -> str:
    # At least three digits; wider numbers are kept as-is.
    return f"{prefix}{value:03d}"


def _advance_counter(db: Session, collection: str) -> int:
    stmt = (
        update(CodeCounter)
        .where(CodeCounter.collection == collection)
        .values(last_value=CodeCounter.last_value + 1)
        .execution_options(synchronize_session=False)
    )
    result = db.execute(stmt)
    if result.rowcount == 0:
        # First code for this collection. A concurrent first insert fails on the
        # primary key and is retried by insert_with_code.
        db.add(CodeCounter(collection=collection, last_value=1))
        db.flush()
        return 1
    return db.execute(select(CodeCounter.last_value).where(CodeCounter.collection == collection)).scalar_one()


def next_code(db: Session, collection: str) -> str:
    """Allocate the next unused code for ``collection`` in the current transaction."""
    c = COLLECTIONS[collection]
    while True:
        code = format_code(c.prefix, _advance_counter(db, c.name))
        taken = db.execute(select(c.code_column).where(c.code_column == code)).first()
        if taken is None:
            return code
        logger.warning("Code %s is already in use, skipping", code)


def ensure_counters(db: Session) -> None:
    for name in COLLECTIONS:
        if db.get(CodeCounter, name) is None:
            db.add(CodeCounter(collection=name, last_value=0))
    db.commit()


def _email_taken(db: Session, c: Collection, email: str) -> bool:
    return db.execute(select(c.email_column).where(c.email_column == email)).first() is not None


def insert_with_code(db: Session, collection: str, build: Callable[[str], T], *, email: str) -> T:
    """Allocate a code, build the row with it and commit.

    A unique-constraint failure on the code or counter is retried with a fresh
    code up to ``code_retry_attempts`` times; a duplicate email is a conflict.
    """
    c = COLLECTIONS[collection]
    if _email_taken(db, c, email):
        raise ConflictError("Email already exists")

    attempts = get_settings().code_retry_attempts
    for attempt in range(1, attempts + 1):
        try:
            code = next_code(db, c.name)
            obj: Any = build(code)
            db.add(obj)
            db.commit()
        except IntegrityError:
            db.rollback()
            if _email_taken(db, c, email):
                raise ConflictError("Email already exists")
            logger.warning("Code collision in %s (attempt %d/%d)", c.name, attempt, attempts)
            continue
        db.refresh(obj)
        return obj

    raise ConflictError(f"Could not allocate a unique {c.name} code")
