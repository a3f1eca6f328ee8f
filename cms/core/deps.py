from __future__ import annotations

from fastapi import Depends
from fastapi.security import APIKeyCookie, OAuth2PasswordBearer
from sqlalchemy.orm import Session

from cms.core.config import get_settings
from cms.core.errors import AuthenticationError
from cms.core.security import Identity, verify_session_token
from cms.db.session import SessionLocal

session_cookie = APIKeyCookie(name=get_settings().session_cookie_name, auto_error=False)
# API clients may send the same token as a bearer header instead of the cookie.
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/auth/login", auto_error=False)


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_session_token(cookie_token: str | None = Depends(session_cookie), bearer_token: str | None = Depends(oauth2_scheme)) -> str | None:
    return cookie_token or bearer_token


def get_optional_identity(token: str | None = Depends(get_session_token)) -> Identity | None:
    if not token:
        return None
    return verify_session_token(token)


def get_current_identity(identity: Identity | None = Depends(get_optional_identity)) -> Identity:
    if identity is None:
        raise AuthenticationError("Invalid or expired session")
    return identity
