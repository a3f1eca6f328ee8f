from __future__ import annotations

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from cms.core.deps import get_db, get_optional_identity
from cms.core.security import Identity
from cms.schemas.customer import CustomerCreate, CustomerOut, CustomerUpdate
from cms.services import record_service

router = APIRouter()


@router.get("", response_model=list[CustomerOut])
def list_customers(db: Session = Depends(get_db), identity: Identity | None = Depends(get_optional_identity)):
    return record_service.list_customers(db, identity)


@router.post("", response_model=CustomerOut, status_code=status.HTTP_201_CREATED)
def create_customer(payload: CustomerCreate, db: Session = Depends(get_db), identity: Identity | None = Depends(get_optional_identity)):
    return record_service.create_customer(db, identity, payload.model_dump())


@router.get("/{customer_id}", response_model=CustomerOut)
def get_customer(customer_id: int, db: Session = Depends(get_db), identity: Identity | None = Depends(get_optional_identity)):
    return record_service.get_customer(db, identity, customer_id)


@router.patch("/{customer_id}", response_model=CustomerOut)
def update_customer(customer_id: int, payload: CustomerUpdate, db: Session = Depends(get_db), identity: Identity | None = Depends(get_optional_identity)):
    return record_service.update_customer(db, identity, customer_id, payload.model_dump(exclude_unset=True))


@router.delete("/{customer_id}")
def delete_customer(customer_id: int, db: Session = Depends(get_db), identity: Identity | None = Depends(get_optional_identity)):
    record_service.delete_customer(db, identity, customer_id)
    return {"ok": True}
