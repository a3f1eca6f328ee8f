from __future__ import annotations

import os

# Must be set before cms is imported: settings and the password context are built at import.
os.environ.setdefault("CMS_BCRYPT_ROUNDS", "4")
os.environ.setdefault("CMS_AUTO_INIT_DB", "false")
os.environ.setdefault("CMS_DATABASE_URL", "sqlite://")
os.environ.setdefault("CMS_SECRET_KEY", "test-secret")

from datetime import date  # noqa: E402

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from cms.core.config import get_settings  # noqa: E402
from cms.core.deps import get_db  # noqa: E402
from cms.core.security import Identity  # noqa: E402
from cms.db.session import make_engine, make_session_factory  # noqa: E402
from cms.main import app  # noqa: E402
from cms.models.employee import Role  # noqa: E402
from cms.services.bootstrap_service import init_database  # noqa: E402
from cms.services.employee_service import create_employee  # noqa: E402

ADMIN_CODE = get_settings().bootstrap_employee_code
ADMIN_PASSWORD = get_settings().bootstrap_password


def person(n: int, prefix: str = "person") -> dict:
    return {
        "firstname": f"First{n}",
        "lastname": f"Last{n}",
        "mobile": f"0900000{n:04d}",
        "date_of_birth": date(1990, 1, 1 + n % 28),
        "email": f"{prefix}{n}@example.com",
    }


@pytest.fixture()
def engine(tmp_path):
    engine = make_engine(f"sqlite:///{tmp_path / 'cms.db'}")
    yield engine
    engine.dispose()


@pytest.fixture()
def session_factory(engine):
    factory = make_session_factory(engine)
    db = factory()
    try:
        init_database(engine, db)
    finally:
        db.close()
    return factory


@pytest.fixture()
def db(session_factory):
    db = session_factory()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture()
def admin_identity(db) -> Identity:
    from cms.services.employee_service import get_employee_by_code

    admin = get_employee_by_code(db, ADMIN_CODE)
    return Identity(id=admin.id, code=admin.employee_code, role=admin.role)


@pytest.fixture()
def make_staff(db):
    counter = {"n": 0}

    def _make(role: Role = Role.USER, password: str = "secret123") -> Identity:
        counter["n"] += 1
        e = create_employee(db, person(counter["n"], prefix="staff"), password=password, role=role)
        return Identity(id=e.id, code=e.employee_code, role=e.role)

    return _make


@pytest.fixture()
def client(session_factory):
    def _get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = _get_db
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


def login(client: TestClient, code: str, password: str):
    return client.post("/api/auth/login", json={"employee_code": code, "password": password})
