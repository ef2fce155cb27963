"""
Shared pytest configuration
"""
import os

# Must be set before the application modules read their configuration
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("BCRYPT_ROUNDS", "4")

from datetime import timedelta
from decimal import Decimal

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from fishing_booking.database import Base, get_db
from fishing_booking.models import Boat, Reservation, Trip, TripStatus, User, UserRole
from fishing_booking.services.auth import issue_token
from fishing_booking.services.notifications import get_dispatcher
from fishing_booking.utils.time_utils import utcnow


# In-memory database for tests
SQLALCHEMY_DATABASE_URL = "sqlite:///:memory:"

engine = create_engine(
    SQLALCHEMY_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


class RecordingDispatcher:
    """Stands in for the notification dispatcher and keeps what was published"""

    def __init__(self):
        self.events = []

    def publish(self, event):
        self.events.append(event)

    def of_type(self, event_type):
        return [e for e in self.events if isinstance(e, event_type)]


@pytest.fixture
def db():
    """Create the test database and drop it afterwards"""
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def dispatcher():
    return RecordingDispatcher()


def _make_user(db, full_name, email, role):
    user = User(
        full_name=full_name,
        email=email,
        hashed_password="hashed",
        role=role,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


@pytest.fixture
def captain(db):
    return _make_user(db, "Captain Nadim", "nadim@example.com", UserRole.CAPTAIN)


@pytest.fixture
def other_captain(db):
    return _make_user(db, "Captain Sami", "sami@example.com", UserRole.CAPTAIN)


@pytest.fixture
def guest(db):
    return _make_user(db, "Lina Khoury", "lina@example.com", UserRole.GUEST)


@pytest.fixture
def other_guest(db):
    return _make_user(db, "Omar Saleh", "omar@example.com", UserRole.GUEST)


@pytest.fixture
def boat(db, captain):
    boat = Boat(name="Sea Breeze", capacity=12, captain_id=captain.id)
    db.add(boat)
    db.commit()
    db.refresh(boat)
    return boat


@pytest.fixture
def make_trip(db, captain):
    """Factory for trips owned by the captain fixture unless told otherwise"""

    def _make_trip(
        capacity=4,
        days_ahead=7,
        status=TripStatus.ACTIVE,
        location="Batroun",
        captain_id=None,
        boat_id=None,
    ):
        trip = Trip(
            location=location,
            date=utcnow() + timedelta(days=days_ahead),
            price=Decimal("75.00"),
            capacity=capacity,
            status=status,
            captain_id=captain_id or captain.id,
            boat_id=boat_id,
        )
        db.add(trip)
        db.commit()
        db.refresh(trip)
        return trip

    return _make_trip


@pytest.fixture
def trip(make_trip):
    """Active trip with 4 seats, one week ahead"""
    return make_trip()


@pytest.fixture
def make_reservation(db):
    """Insert a reservation directly, bypassing admission"""

    def _make_reservation(trip, seats, user=None, guest_name=None, guest_email=None):
        reservation = Reservation(
            trip_id=trip.id,
            number_of_seats=seats,
            reservation_date=utcnow(),
            user_id=user.id if user else None,
            guest_name=None if user else (guest_name or "Walk-in Guest"),
            guest_email=None if user else (guest_email or "walkin@example.com"),
        )
        db.add(reservation)
        db.commit()
        db.refresh(reservation)
        return reservation

    return _make_reservation


@pytest.fixture
def client(db, dispatcher):
    """API client bound to the test session and the recording dispatcher"""
    from fishing_booking.main import app

    def _get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = _get_db
    app.dependency_overrides[get_dispatcher] = lambda: dispatcher
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def auth_headers():
    """Bearer headers for a user, without going through login"""

    def _auth_headers(user):
        return {"Authorization": f"Bearer {issue_token(user)}"}

    return _auth_headers
