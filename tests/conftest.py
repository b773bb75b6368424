"""Shared fixtures: a throwaway SQLite database and directory helpers."""

from __future__ import annotations

import itertools
import os
import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

TEST_DB_PATH = Path(__file__).parent / "test.db"
os.environ["DATABASE_URL"] = f"sqlite:///{TEST_DB_PATH}"
os.environ["SECRET_KEY"] = "test-secret-key"
os.environ["APP_TIMEZONE"] = "Asia/Kolkata"

from campus_notify.domain.entities import DirectoryUser  # noqa: E402
from campus_notify.infrastructure import database  # noqa: E402
from campus_notify.infrastructure import models  # noqa: E402,F401
from campus_notify.infrastructure.repositories import UserRepository  # noqa: E402
from campus_notify.infrastructure.security import create_access_token  # noqa: E402


@pytest.fixture(scope="session", autouse=True)
def remove_test_database():
    yield
    database.engine.dispose()
    if TEST_DB_PATH.exists():
        TEST_DB_PATH.unlink()


@pytest.fixture(autouse=True)
def fresh_database():
    """Recreate every table before each test."""

    database.Base.metadata.drop_all(bind=database.engine)
    database.Base.metadata.create_all(bind=database.engine)
    yield
    database.engine.dispose()


@pytest.fixture()
def session():
    db = database.SessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture()
def make_user(session):
    """Return a factory that stores a directory user and returns it."""

    counter = itertools.count(1)

    def _make(
        *,
        branch_id: str | None = "CSE",
        semester: int | None = 3,
        year: int | None = 2,
        is_admin: bool = False,
        is_active: bool = True,
    ) -> DirectoryUser:
        number = next(counter)
        return UserRepository(session).create(
            DirectoryUser(
                id=None,
                name=f"User {number}",
                email=f"user{number}@campus.test",
                branch_id=branch_id,
                semester=semester,
                year=year,
                is_admin=is_admin,
                is_active=is_active,
            )
        )

    return _make


def auth_headers(user: DirectoryUser) -> dict[str, str]:
    token = create_access_token({"sub": str(user.id)})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture(name="auth_headers")
def auth_headers_fixture():
    return auth_headers
