from __future__ import annotations

from admitdesk.config import get_settings
from admitdesk.db.base import Base
from admitdesk.db.session import SessionLocal, engine
from admitdesk.db import models  # noqa: F401
from admitdesk.db.seed import seed_school_deadlines


def ensure_data_directories() -> None:
    settings = get_settings()
    settings.data_dir.mkdir(parents=True, exist_ok=True)


def init_database() -> dict[str, int]:
    settings = get_settings()
    ensure_data_directories()
    Base.metadata.create_all(bind=engine)

    inserted = 0
    if settings.seed_deadlines:
        with SessionLocal() as session:
            inserted = seed_school_deadlines(session)
    return {"seeded_deadlines": inserted}
