from __future__ import annotations

from cms.db.session import SessionLocal, engine
from cms.services.bootstrap_service import init_database


def main() -> int:
    db = SessionLocal()
    try:
        init_database(engine, db)
    finally:
        db.close()

    print("DB initialized")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
