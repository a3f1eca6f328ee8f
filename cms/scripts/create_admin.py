from __future__ import annotations

import argparse

from sqlalchemy import select

from cms.core.errors import CMSError, ValidationError
from cms.db.session import SessionLocal
from cms.models.employee import Employee, Role
from cms.services.employee_service import check_password, create_employee, set_employee_password
from cms.services.fields import validate_email


def main() -> int:
    parser = argparse.ArgumentParser(description="Create an admin employee, or promote and reset an existing one by email.")
    parser.add_argument("--email", required=True)
    parser.add_argument("--firstname", required=True)
    parser.add_argument("--lastname", required=True)
    parser.add_argument("--mobile", required=True)
    parser.add_argument("--date-of-birth", required=True, help="YYYY-MM-DD")
    parser.add_argument("--password", required=True)

    args = parser.parse_args()

    try:
        email = validate_email(args.email)
        check_password(args.password)
    except ValidationError as exc:
        parser.error(str(exc.detail))

    db = SessionLocal()
    try:
        e = db.execute(select(Employee).where(Employee.email == email)).scalar_one_or_none()
        if e is None:
            fields = {
                "firstname": args.firstname,
                "lastname": args.lastname,
                "mobile": args.mobile,
                "date_of_birth": args.date_of_birth,
                "email": email,
            }
            try:
                e = create_employee(db, fields, password=args.password, role=Role.ADMIN)
            except CMSError as exc:
                parser.error(str(exc.detail))
            print(f"Created admin: {e.employee_code} <{e.email}>")
            return 0

        set_employee_password(db, e.id, args.password)
        e.role = Role.ADMIN
        db.commit()
        print(f"Updated admin: {e.employee_code} <{e.email}>")
        return 0
    finally:
        db.close()


if __name__ == "__main__":
    raise SystemExit(main())
