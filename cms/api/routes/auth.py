from __future__ import annotations

from fastapi import APIRouter, Depends, Response
from sqlalchemy.orm import Session

from cms.core.config import get_settings
from cms.core.deps import get_current_identity, get_db
from cms.core.errors import AuthenticationError
from cms.core.security import Identity
from cms.schemas.auth import IdentityOut, LoginRequest, LoginResponse, MeResponse
from cms.services.auth_service import login as login_employee

router = APIRouter()


def _identity_out(identity: Identity) -> IdentityOut:
    return IdentityOut(id=identity.id, employee_code=identity.code, role=identity.role)


@router.post("/login", response_model=LoginResponse)
def login(payload: LoginRequest, response: Response, db: Session = Depends(get_db)):
    result = login_employee(db, employee_code=payload.employee_code, password=payload.password)
    if not result.ok or result.identity is None or result.token is None:
        raise AuthenticationError(result.message)

    settings = get_settings()
    response.set_cookie(
        key=settings.session_cookie_name,
        value=result.token,
        max_age=settings.access_token_exp_minutes * 60,
        path="/",
        httponly=True,
        secure=settings.cookie_secure,
        samesite="strict",
    )
    return LoginResponse(message=result.message, user=_identity_out(result.identity))


@router.post("/logout")
def logout(response: Response):
    settings = get_settings()
    response.delete_cookie(key=settings.session_cookie_name, path="/", httponly=True, secure=settings.cookie_secure, samesite="strict")
    return {"ok": True}


@router.get("/me", response_model=MeResponse)
def me(identity: Identity = Depends(get_current_identity)):
    return MeResponse(user=_identity_out(identity))
