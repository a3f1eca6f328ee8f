from __future__ import annotations

import logging
from dataclasses import dataclass

from sqlalchemy.orm import Session

from cms.core.security import Identity, issue_session_token, pwd_context, verify_password, verify_session_token
from cms.services.employee_service import get_employee_by_code

logger = logging.getLogger("cms.auth")

INVALID_CREDENTIALS = "Invalid employee code or password"


@dataclass(frozen=True)
class LoginResult:
    ok: bool
    message: str = INVALID_CREDENTIALS
    identity: Identity | None = None
    token: str | None = None


def authenticate(db: Session, *, employee_code: str, password: str) -> LoginResult:
    """Check an employee code and password.

    Unknown codes and wrong passwords fail the same way.
    """
    employee = get_employee_by_code(db, employee_code.strip())

    if employee is None:
        # Spend the same hashing time as a real check.
        pwd_context.dummy_verify()
        logger.info("Login failed for code %r", employee_code)
        return LoginResult(ok=False)

    if not verify_password(password, employee.hashed_password):
        logger.info("Login failed for code %r", employee_code)
        return LoginResult(ok=False)

    identity = Identity(id=employee.id, code=employee.employee_code, role=employee.role)
    return LoginResult(ok=True, message="Login successful", identity=identity)


def login(db: Session, *, employee_code: str, password: str) -> LoginResult:
    result = authenticate(db, employee_code=employee_code, password=password)
    if not result.ok or result.identity is None:
        return result

    token = issue_session_token(result.identity)
    logger.info("Login succeeded for %s (role=%s)", result.identity.code, result.identity.role.value)
    return LoginResult(ok=True, message=result.message, identity=result.identity, token=token)


def current_identity(token: str | None) -> Identity | None:
    if not token:
        return None
    return verify_session_token(token)
