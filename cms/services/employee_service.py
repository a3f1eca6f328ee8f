from __future__ import annotations

import logging
from typing import Any, Mapping

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from cms.core.config import get_settings
from cms.core.errors import ConflictError, ValidationError
from cms.core.security import hash_password
from cms.models.employee import Employee, Role
from cms.services.code_service import insert_with_code
from cms.services.fields import PERSONAL_FIELDS, partial_updates, require_fields

logger = logging.getLogger("cms.records")

EMPLOYEE_MUTABLE_FIELDS = PERSONAL_FIELDS + ("role",)


def parse_role(value: Any) -> Role:
    if value is None:
        return Role.USER
    try:
        return Role(value)
    except ValueError:
        raise ValidationError(f"Unknown role: {value!r}") from None


def check_password(password: str | None) -> str:
    min_length = get_settings().min_password_length
    if not password:
        raise ValidationError("Password is required")
    if len(password) < min_length:
        raise ValidationError(f"Password must be at least {min_length} characters")
    return password


def get_employee(db: Session, employee_id: int) -> Employee | None:
    return db.get(Employee, employee_id)


def get_employee_by_code(db: Session, employee_code: str) -> Employee | None:
    return db.execute(select(Employee).where(Employee.employee_code == employee_code)).scalar_one_or_none()


def list_employees(db: Session, role: Role | None = None) -> list[Employee]:
    q = select(Employee).order_by(Employee.id.desc())
    if role is not None:
        q = q.where(Employee.role == role)
    return list(db.execute(q).scalars().all())


def create_employee(db: Session, fields: Mapping[str, Any], *, password: str, role: Role | str | None = None) -> Employee:
    data = require_fields(fields)
    hashed = hash_password(check_password(password))
    role = parse_role(role)

    employee = insert_with_code(
        db,
        "employee",
        lambda code: Employee(employee_code=code, hashed_password=hashed, role=role, **data),
        email=data["email"],
    )
    logger.info("Created employee %s (id=%s, role=%s)", employee.employee_code, employee.id, employee.role.value)
    return employee


def update_employee(db: Session, employee_id: int, fields: Mapping[str, Any]) -> Employee | None:
    """Apply a partial update. Returns None when the employee does not exist."""
    updates = partial_updates(fields, EMPLOYEE_MUTABLE_FIELDS)
    if "role" in updates:
        updates["role"] = parse_role(updates["role"])

    employee = db.get(Employee, employee_id)
    if employee is None:
        return None

    if "email" in updates:
        dup = db.execute(select(Employee.id).where(Employee.email == updates["email"], Employee.id != employee.id)).first()
        if dup:
            raise ConflictError("Email already exists")

    for key, value in updates.items():
        setattr(employee, key, value)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise ConflictError("Email already exists") from None
    db.refresh(employee)
    logger.info("Updated employee %s fields=%s", employee.employee_code, sorted(updates))
    return employee


def set_employee_password(db: Session, employee_id: int, password: str) -> bool:
    hashed = hash_password(check_password(password))
    employee = db.get(Employee, employee_id)
    if employee is None:
        return False
    employee.hashed_password = hashed
    db.commit()
    logger.info("Password changed for employee %s", employee.employee_code)
    return True


def delete_employee(db: Session, employee_id: int) -> bool:
    employee = db.get(Employee, employee_id)
    if employee is None:
        return False
    code = employee.employee_code
    db.delete(employee)
    db.commit()
    logger.info("Deleted employee %s (id=%s)", code, employee_id)
    return True
