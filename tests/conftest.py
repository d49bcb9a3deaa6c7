import os

os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("NOTIFIER", "log")

import pytest
from datetime import date, timedelta
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from songbird.api.deps import get_db
from songbird.core.security import create_access_token, get_password_hash
from songbird.db.database import Base
from songbird.db.models import Shifts, ShiftType, Users, UserRole, OPEN_SHIFT_USERNAME
from songbird.services.hours import ShiftRecord

TEST_PASSWORD = "password123"
# hashed once, bcrypt is slow
TEST_PASSWORD_HASH = get_password_hash(TEST_PASSWORD)


def get_test_sunday() -> date:
    # fixed pay-period start for deterministic tests (Sun 15 Feb 2026)
    return date(2026, 2, 15)


def day(offset: int) -> date:
    """Date `offset` days after the test Sunday (6 = Saturday)."""
    return get_test_sunday() + timedelta(days=offset)


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    yield engine
    Base.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture
def db(engine):
    TestingSession = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    session = TestingSession()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def make_user(db):
    counter = {"n": 0}

    def _make(
        full_name: str = None,
        role: UserRole = UserRole.STAFF,
        job_title: str = "Caregiver",
        telegram_id: str = None,
        is_active: bool = True,
        username: str = None,
    ) -> Users:
        counter["n"] += 1
        user = Users(
            username=username or f"user{counter['n']}",
            full_name=full_name or f"Staff {counter['n']}",
            password_hash=TEST_PASSWORD_HASH,
            role=role,
            job_title=job_title,
            telegram_id=telegram_id,
            is_active=is_active,
        )
        db.add(user)
        db.commit()
        db.refresh(user)
        return user

    return _make


@pytest.fixture
def make_shift(db):
    """Insert a shift directly, bypassing cap checks (test setup only)."""

    def _make(shift_date: date, shift_type, assigned_to: int = None, is_open: bool = False) -> Shifts:
        shift = Shifts(
            date=shift_date,
            shift_type=ShiftType(shift_type),
            assigned_to=assigned_to,
            is_open=is_open,
        )
        db.add(shift)
        db.commit()
        db.refresh(shift)
        return shift

    return _make


@pytest.fixture
def admin(make_user) -> Users:
    return make_user(full_name="Admin User", role=UserRole.ADMIN, username="admin", telegram_id="9000")


@pytest.fixture
def open_user(make_user) -> Users:
    return make_user(full_name="Open Shift", role=UserRole.SYSTEM, username=OPEN_SHIFT_USERNAME, is_active=False)


@pytest.fixture
def client(engine):
    from songbird.main import app

    TestingSession = sessionmaker(autocommit=False, autoflush=False, bind=engine)

    def override_get_db():
        session = TestingSession()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def auth_headers():
    def _headers(user: Users) -> dict:
        token = create_access_token(data={"sub": user.id, "username": user.username})
        return {"Authorization": f"Bearer {token}"}

    return _headers


@pytest.fixture
def record():
    """Build a ShiftRecord; ids auto-increment per test."""
    counter = {"n": 0}

    def _make(shift_date: date, shift_type, assigned_to: int = None, shift_id: int = None) -> ShiftRecord:
        counter["n"] += 1
        return ShiftRecord(
            id=shift_id if shift_id is not None else counter["n"],
            date=shift_date,
            shift_type=ShiftType(shift_type),
            assigned_to=assigned_to,
        )

    return _make
