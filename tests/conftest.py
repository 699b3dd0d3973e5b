from datetime import datetime

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.core.exceptions import NotFoundError
from app.db.base import Base, enable_sqlite_foreign_keys, get_db
from app.db.init_db import init_db
from app.db.models.item import Item
from app.db.models.user import User
from app.main import app
from app.repositories.memory import InMemoryBookingRepository
from app.services.bookings import BookingService

NOW = datetime(2030, 1, 15, 12, 0, 0)


class FixedClock:
    """Clock a test can move by hand."""

    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now


class FakeUsers:
    def __init__(self, *users: User):
        self.rows = {u.id: u for u in users}

    def get_user_by_id(self, user_id: int) -> User:
        if user_id not in self.rows:
            raise NotFoundError(f"User with id {user_id} not found")
        return self.rows[user_id]


class FakeItems:
    def __init__(self, *items: Item):
        self.rows = {i.id: i for i in items}

    def get_item_by_id(self, item_id: int) -> Item:
        if item_id not in self.rows:
            raise NotFoundError(f"Item with id {item_id} not found")
        return self.rows[item_id]


# --- in-memory engine fixtures ---

@pytest.fixture
def clock():
    return FixedClock(NOW)


@pytest.fixture
def renter():
    return User(id=1, name="Anna", email="anna@example.com")


@pytest.fixture
def owner():
    return User(id=2, name="Boris", email="boris@example.com")


@pytest.fixture
def stranger():
    return User(id=3, name="Vera", email="vera@example.com")


@pytest.fixture
def drill(owner):
    return Item(id=10, name="Drill", description="Cordless drill", available=True, owner_id=owner.id, owner=owner)


@pytest.fixture
def memory_repo():
    return InMemoryBookingRepository()


@pytest.fixture
def booking_service(memory_repo, renter, owner, stranger, drill, clock):
    return BookingService(
        bookings=memory_repo,
        users=FakeUsers(renter, owner, stranger),
        items=FakeItems(drill),
        clock=clock,
    )


# --- database fixtures ---

@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    enable_sqlite_foreign_keys(engine)
    init_db(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, autocommit=False, autoflush=False, expire_on_commit=False)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client(session_factory):
    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()
