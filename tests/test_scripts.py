from __future__ import annotations

import pytest

from cms.models.employee import Role
from cms.scripts import create_admin
from cms.services.auth_service import authenticate
from cms.services.employee_service import create_employee, get_employee

from tests.conftest import person


def _run(monkeypatch, session_factory, *extra: str) -> int:
    args = ["create_admin", "--firstname", "Ada", "--lastname", "Admin", "--mobile", "555", "--date-of-birth", "1990-01-01", *extra]
    monkeypatch.setattr(create_admin, "SessionLocal", session_factory)
    monkeypatch.setattr("sys.argv", args)
    return create_admin.main()


def test_create_admin_creates_privileged_employee(monkeypatch, session_factory, db):
    assert _run(monkeypatch, session_factory, "--email", "Ada@Example.com", "--password", "secret123") == 0

    result = authenticate(db, employee_code="EMP001", password="secret123")
    assert result.ok
    assert result.identity.role is Role.ADMIN


def test_create_admin_promotes_existing_employee(monkeypatch, session_factory, db):
    e = create_employee(db, person(1), password="secret123")

    assert _run(monkeypatch, session_factory, "--email", e.email, "--password", "rotated99") == 0

    db.expire_all()
    promoted = get_employee(db, e.id)
    assert promoted.role is Role.ADMIN
    assert authenticate(db, employee_code=e.employee_code, password="rotated99").ok


@pytest.mark.parametrize(
    "extra",
    [
        ("--email", "person1@example.com", "--password", "123"),
        ("--email", "not-an-email", "--password", "secret123"),
    ],
)
def test_create_admin_rejects_bad_input_without_writing(monkeypatch, session_factory, db, extra):
    e = create_employee(db, person(1), password="secret123")

    with pytest.raises(SystemExit):
        _run(monkeypatch, session_factory, *extra)

    db.expire_all()
    unchanged = get_employee(db, e.id)
    assert unchanged.role is Role.USER
    assert authenticate(db, employee_code=e.employee_code, password="secret123").ok
