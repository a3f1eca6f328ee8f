from __future__ import annotations

from pydantic import BaseModel, Field

from cms.models.employee import Role


class LoginRequest(BaseModel):
    employee_code: str = Field(min_length=1, max_length=32)
    password: str = Field(min_length=1, max_length=128)


class IdentityOut(BaseModel):
    id: int
    employee_code: str
    role: Role


class LoginResponse(BaseModel):
    ok: bool = True
    message: str = "Login successful"
    user: IdentityOut


class MeResponse(BaseModel):
    user: IdentityOut
