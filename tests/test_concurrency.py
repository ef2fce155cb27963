"""
Concurrent admissions against one trip.

These run on a file-backed SQLite database so every worker gets its own
connection and the per-trip lock is exercised for real.
"""
from concurrent.futures import ThreadPoolExecutor
from datetime import timedelta
from decimal import Decimal
import threading

import pytest
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import NullPool

from fishing_booking.crud import trip as trip_crud
from fishing_booking.database import Base, build_engine
from fishing_booking.exceptions import InsufficientCapacity
from fishing_booking.models import Reservation, Trip, TripStatus, User, UserRole
from fishing_booking.schemas.booker import AnonymousBooker
from fishing_booking.services.admission import admit_reservation, cancel_reservation
from fishing_booking.utils.time_utils import utcnow

WORKERS = 20


@pytest.fixture
def file_session_factory(tmp_path):
    engine = build_engine(f"sqlite:///{tmp_path / 'bookings.db'}", poolclass=NullPool)
    Base.metadata.create_all(bind=engine)
    try:
        yield sessionmaker(autocommit=False, autoflush=False, bind=engine)
    finally:
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


def _seed_trip(factory, capacity):
    with factory() as session:
        captain = User(
            full_name="Captain Nadim",
            email="nadim@example.com",
            hashed_password="hashed",
            role=UserRole.CAPTAIN,
        )
        session.add(captain)
        session.flush()
        trip = Trip(
            location="Jounieh",
            date=utcnow() + timedelta(days=3),
            price=Decimal("60.00"),
            capacity=capacity,
            status=TripStatus.ACTIVE,
            captain_id=captain.id,
        )
        session.add(trip)
        session.commit()
        return trip.id, captain.id


def _run_together(func, count):
    barrier = threading.Barrier(count)

    def worker(i):
        barrier.wait()
        return func(i)

    with ThreadPoolExecutor(max_workers=count) as executor:
        return list(executor.map(worker, range(count)))


def test_twenty_single_seat_requests_on_ten_seats(file_session_factory):
    """
    Test: 20 simultaneous 1-seat requests on a 10-seat trip admit exactly 10
    """
    trip_id, _ = _seed_trip(file_session_factory, capacity=10)

    def book(i):
        with file_session_factory() as session:
            try:
                admit_reservation(
                    session,
                    trip_id,
                    1,
                    AnonymousBooker(name=f"Guest {i}", email=f"guest{i}@example.com"),
                )
                return "admitted"
            except InsufficientCapacity as e:
                return e.remaining

    results = _run_together(book, WORKERS)

    assert results.count("admitted") == 10
    assert sorted(r for r in results if r != "admitted") == [0] * 10

    with file_session_factory() as session:
        assert trip_crud.reserved_seats(session, trip_id) == 10
        assert session.query(Reservation).filter(Reservation.trip_id == trip_id).count() == 10


def test_mixed_sizes_never_oversell(file_session_factory):
    trip_id, _ = _seed_trip(file_session_factory, capacity=7)
    sizes = [3, 2, 1, 4, 2, 3, 1, 2]

    def book(i):
        with file_session_factory() as session:
            try:
                admit_reservation(
                    session,
                    trip_id,
                    sizes[i],
                    AnonymousBooker(name=f"Guest {i}", email=f"guest{i}@example.com"),
                )
                return sizes[i]
            except InsufficientCapacity as e:
                # Reported remaining is what was left under the lock
                assert 0 <= e.remaining < sizes[i]
                return 0

    admitted = _run_together(book, len(sizes))

    with file_session_factory() as session:
        reserved = trip_crud.reserved_seats(session, trip_id)
    assert reserved == sum(admitted)
    assert reserved <= 7


def test_cancellations_and_admissions_interleave(file_session_factory):
    """
    Test: seats freed by concurrent cancellations are never double counted
    """
    trip_id, captain_id = _seed_trip(file_session_factory, capacity=6)

    reservation_ids = []
    with file_session_factory() as session:
        for i in range(6):
            result = admit_reservation(
                session,
                trip_id,
                1,
                AnonymousBooker(name=f"Early {i}", email=f"early{i}@example.com"),
            )
            reservation_ids.append(result.id)

    def act(i):
        with file_session_factory() as session:
            if i < 3:
                captain = session.get(User, captain_id)
                cancel_reservation(session, reservation_ids[i], captain)
                return -1
            try:
                admit_reservation(
                    session,
                    trip_id,
                    1,
                    AnonymousBooker(name=f"Late {i}", email=f"late{i}@example.com"),
                )
                return 1
            except InsufficientCapacity:
                return 0

    outcomes = _run_together(act, 9)

    with file_session_factory() as session:
        reserved = trip_crud.reserved_seats(session, trip_id)
    assert reserved == 6 - 3 + outcomes.count(1)
    assert reserved <= 6
