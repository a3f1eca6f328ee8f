from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

from jose import JWTError, jwt
from passlib.context import CryptContext

from cms.core.config import get_settings
from cms.models.employee import Role

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=get_settings().bcrypt_rounds)


@dataclass(frozen=True)
class Identity:
    """Who is calling: the employee id, their code and their role. Never carries the secret."""

    id: int
    code: str
    role: Role

    @property
    def is_admin(self) -> bool:
        return self.role is Role.ADMIN


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)


def issue_session_token(identity: Identity, *, now: Optional[datetime] = None, secret_key: Optional[str] = None) -> str:
    """Create a signed session token (JWT) for ``identity``.

    The token is valid for ``access_token_exp_minutes`` from ``now``.
    """
    settings = get_settings()
    now = now or datetime.now(timezone.utc)
    expire = now + timedelta(minutes=settings.access_token_exp_minutes)

    payload: Dict[str, Any] = {
        "sub": str(identity.id),
        "code": identity.code,
        "role": identity.role.value,
        "iat": int(now.timestamp()),
        "exp": int(expire.timestamp()),
    }
    return jwt.encode(payload, secret_key or settings.secret_key, algorithm=settings.jwt_algorithm)


def verify_session_token(token: str, *, now: Optional[datetime] = None, secret_key: Optional[str] = None) -> Optional[Identity]:
    """Recover the identity from a session token.

    Returns None when the signature does not match, the token is malformed
    or ``now`` is at or past its expiry.
    """
    settings = get_settings()
    try:
        # Expiry is checked below against the caller's clock.
        claims = jwt.decode(
            token,
            secret_key or settings.secret_key,
            algorithms=[settings.jwt_algorithm],
            options={"verify_exp": False},
        )
    except JWTError:
        return None

    now = now or datetime.now(timezone.utc)
    exp = claims.get("exp")
    if not isinstance(exp, int) or now.timestamp() >= exp:
        return None

    try:
        return Identity(id=int(claims["sub"]), code=str(claims["code"]), role=Role(claims["role"]))
    except (KeyError, TypeError, ValueError):
        return None
