from __future__ import annotations

from datetime import date, datetime

from pydantic import BaseModel, EmailStr, Field

from cms.models.employee import Role


class EmployeeBase(BaseModel):
    firstname: str = Field(min_length=1, max_length=100)
    lastname: str = Field(min_length=1, max_length=100)
    mobile: str = Field(min_length=1, max_length=32)
    date_of_birth: date
    email: EmailStr


class EmployeeCreate(EmployeeBase):
    # Minimum length is enforced by the service from settings.
    password: str = Field(min_length=1, max_length=128)
    role: Role = Role.USER


class EmployeeUpdate(BaseModel):
    firstname: str | None = Field(default=None, min_length=1, max_length=100)
    lastname: str | None = Field(default=None, min_length=1, max_length=100)
    mobile: str | None = Field(default=None, min_length=1, max_length=32)
    date_of_birth: date | None = None
    email: EmailStr | None = None
    role: Role | None = None


class PasswordUpdate(BaseModel):
    password: str = Field(min_length=1, max_length=128)


class EmployeeOut(EmployeeBase):
    id: int
    employee_code: str
    role: Role
    created_at: datetime | None = None

    class Config:
        from_attributes = True
