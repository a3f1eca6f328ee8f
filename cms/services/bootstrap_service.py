from __future__ import annotations

import logging
from datetime import date

from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session

from cms.core.config import get_settings
from cms.core.security import hash_password
from cms.db.base import Base
from cms.models.employee import Employee, Role
from cms.services.code_service import ensure_counters
from cms.services.employee_service import get_employee_by_code
from cms.services.fields import normalize_email

# Import models so that SQLAlchemy registers them for metadata.create_all
import cms.models  # noqa: F401

logger = logging.getLogger("cms.bootstrap")


def ensure_bootstrap_admin(db: Session) -> bool:
    """Create the reserved admin account unless its code already exists.

    Returns True when the account was created.
    """
    settings = get_settings()
    if get_employee_by_code(db, settings.bootstrap_employee_code) is not None:
        return False

    db.add(
        Employee(
            employee_code=settings.bootstrap_employee_code,
            firstname=settings.bootstrap_firstname,
            lastname=settings.bootstrap_lastname,
            mobile=settings.bootstrap_mobile,
            date_of_birth=date.fromisoformat(settings.bootstrap_date_of_birth),
            email=normalize_email(settings.bootstrap_email),
            hashed_password=hash_password(settings.bootstrap_password),
            role=Role.ADMIN,
        )
    )
    db.commit()
    logger.warning("Created bootstrap admin %s; change its password", settings.bootstrap_employee_code)
    return True


def init_database(engine: Engine, db: Session) -> None:
    Base.metadata.create_all(bind=engine)
    ensure_counters(db)
    ensure_bootstrap_admin(db)
