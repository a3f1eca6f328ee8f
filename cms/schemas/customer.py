from __future__ import annotations

from datetime import date, datetime

from pydantic import BaseModel, EmailStr, Field


class CustomerBase(BaseModel):
    firstname: str = Field(min_length=1, max_length=100)
    lastname: str = Field(min_length=1, max_length=100)
    mobile: str = Field(min_length=1, max_length=32)
    date_of_birth: date
    email: EmailStr


class CustomerCreate(CustomerBase):
    pass


class CustomerUpdate(BaseModel):
    # No owner field: the owner is fixed when the record is created.
    firstname: str | None = Field(default=None, min_length=1, max_length=100)
    lastname: str | None = Field(default=None, min_length=1, max_length=100)
    mobile: str | None = Field(default=None, min_length=1, max_length=32)
    date_of_birth: date | None = None
    email: EmailStr | None = None


class CustomerOut(CustomerBase):
    id: int
    customer_code: str
    created_by: int | None
    created_at: datetime | None = None

    class Config:
        from_attributes = True
