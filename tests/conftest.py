from __future__ import annotations

import os
import tempfile
from pathlib import Path

os.environ.setdefault("DATABASE_URL", f"sqlite:///{Path(tempfile.gettempdir()) / 'admitdesk-tests.db'}")
os.environ.setdefault("APP_ENV", "test")

import pytest  # noqa: E402

from admitdesk.db.base import Base  # noqa: E402
from admitdesk.db.seed import seed_school_deadlines  # noqa: E402
from admitdesk.db.session import SessionLocal, engine  # noqa: E402


@pytest.fixture(autouse=True)
def reset_db() -> None:
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    with SessionLocal() as session:
        seed_school_deadlines(session)
    yield
