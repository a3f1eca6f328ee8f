from __future__ import annotations

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from cms.core.deps import get_db, get_optional_identity
from cms.core.security import Identity
from cms.models.employee import Role
from cms.schemas.employee import EmployeeCreate, EmployeeOut, EmployeeUpdate, PasswordUpdate
from cms.services import record_service

router = APIRouter()


@router.get("", response_model=list[EmployeeOut])
def list_employees(role: Role | None = None, db: Session = Depends(get_db), identity: Identity | None = Depends(get_optional_identity)):
    return record_service.list_employees(db, identity, role=role)


@router.post("", response_model=EmployeeOut, status_code=status.HTTP_201_CREATED)
def create_employee(payload: EmployeeCreate, db: Session = Depends(get_db), identity: Identity | None = Depends(get_optional_identity)):
    return record_service.create_employee(db, identity, payload.model_dump())


@router.get("/{employee_id}", response_model=EmployeeOut)
def get_employee(employee_id: int, db: Session = Depends(get_db), identity: Identity | None = Depends(get_optional_identity)):
    return record_service.get_employee(db, identity, employee_id)


@router.patch("/{employee_id}", response_model=EmployeeOut)
def update_employee(employee_id: int, payload: EmployeeUpdate, db: Session = Depends(get_db), identity: Identity | None = Depends(get_optional_identity)):
    return record_service.update_employee(db, identity, employee_id, payload.model_dump(exclude_unset=True))


@router.put("/{employee_id}/password")
def set_employee_password(employee_id: int, payload: PasswordUpdate, db: Session = Depends(get_db), identity: Identity | None = Depends(get_optional_identity)):
    record_service.set_employee_password(db, identity, employee_id, payload.password)
    return {"ok": True}


@router.delete("/{employee_id}")
def delete_employee(employee_id: int, db: Session = Depends(get_db), identity: Identity | None = Depends(get_optional_identity)):
    record_service.delete_employee(db, identity, employee_id)
    return {"ok": True}
