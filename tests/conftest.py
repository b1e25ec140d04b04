# tests/conftest.py
"""
Shared fixtures: a fresh in-memory database per test, a TestClient wired to
it, and small factories for users, spots and bookings.
"""
import os

# Settings are read at import time, so these must be set before any app import
os.environ["DATABASE_URL"] = "sqlite://"
os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key")
os.environ.setdefault("LOG_LEVEL", "WARNING")

from datetime import date
from itertools import count

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app import auth, models
from app.database import Base, build_engine, get_db
from app.main import app


@pytest.fixture(scope="session")
def password_hash():
    # bcrypt is slow; hash once for the whole run
    return auth.get_password_hash("password123")


@pytest.fixture
def engine():
    test_engine = build_engine("sqlite://", poolclass=StaticPool)
    Base.metadata.create_all(bind=test_engine)
    yield test_engine
    Base.metadata.drop_all(bind=test_engine)
    test_engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


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
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def make_user(db, password_hash):
    sequence = count(1)

    def _make_user(first_name="Guest", last_name="User", **overrides):
        n = next(sequence)
        user = models.User(
            first_name=first_name,
            last_name=last_name,
            username=overrides.pop("username", f"user{n}"),
            email=overrides.pop("email", f"user{n}@spots.io"),
            password=password_hash,
            **overrides,
        )
        db.add(user)
        db.commit()
        db.refresh(user)
        return user

    return _make_user


@pytest.fixture
def make_spot(db):
    def _make_spot(owner, **overrides):
        fields = {
            "address": "123 Disney Lane",
            "city": "San Francisco",
            "state": "California",
            "country": "United States of America",
            "lat": 37.7645358,
            "lng": -122.4730327,
            "name": "App Academy",
            "description": "Place where web developers are created",
            "price": 123.0,
        }
        fields.update(overrides)
        spot = models.Spot(owner_id=owner.id, **fields)
        db.add(spot)
        db.commit()
        db.refresh(spot)
        return spot

    return _make_spot


@pytest.fixture
def make_booking(db):
    def _make_booking(spot, guest, start_date, end_date):
        booking = models.Booking(
            spot_id=spot.id,
            user_id=guest.id,
            start_date=start_date,
            end_date=end_date,
        )
        db.add(booking)
        db.commit()
        db.refresh(booking)
        return booking

    return _make_booking


@pytest.fixture
def auth_headers():
    def _auth_headers(user):
        token = auth.create_access_token({"sub": str(user.id)})
        return {"Authorization": f"Bearer {token}"}

    return _auth_headers


@pytest.fixture
def owner(make_user):
    return make_user("Demo", "Owner")


@pytest.fixture
def guest(make_user):
    return make_user("Fake", "Guest")


@pytest.fixture
def spot(make_spot, owner):
    return make_spot(owner)


@pytest.fixture
def june_booking(make_booking, spot, guest):
    return make_booking(spot, guest, date(2024, 6, 1), date(2024, 6, 5))
