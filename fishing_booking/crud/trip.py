from sqlalchemy import func, update
from sqlalchemy.orm import Session, joinedload, selectinload
from datetime import date, datetime, time, timedelta
from typing import List, Optional
import logging

from fishing_booking.crud import boat as boat_crud
from fishing_booking.database import store_transaction
from fishing_booking.exceptions import (
    AlreadyCancelled,
    InvalidRequest,
    NotFound,
    Unauthorized,
)
from fishing_booking.models.reservation import Reservation
from fishing_booking.models.trip import Trip, TripStatus
from fishing_booking.schemas.trip import TripCreate, TripUpdate
from fishing_booking.utils.time_utils import utcnow

logger = logging.getLogger(__name__)


def get_trip(db: Session, trip_id: int) -> Optional[Trip]:
    return (
        db.query(Trip)
        .options(joinedload(Trip.captain), joinedload(Trip.boat))
        .filter(Trip.id == trip_id)
        .first()
    )


def lock_trip(db: Session, trip_id: int) -> Optional[Trip]:
    """
    Take the per-trip lock and return the trip as it stands under the lock.

    The version bump is the first write of the transaction: on PostgreSQL it
    holds the row lock until commit, on SQLite it takes the database write
    lock. The follow-up SELECT ... FOR UPDATE reloads the row so no stale
    identity-map state leaks into the capacity check.
    """
    result = db.execute(
        update(Trip)
        .where(Trip.id == trip_id)
        .values(version=Trip.version + 1)
        .execution_options(synchronize_session=False)
    )
    if result.rowcount == 0:
        return None

    return (
        db.query(Trip)
        .filter(Trip.id == trip_id)
        .with_for_update()
        .populate_existing()
        .first()
    )


def reserved_seats(db: Session, trip_id: int) -> int:
    total = (
        db.query(func.coalesce(func.sum(Reservation.number_of_seats), 0))
        .filter(Reservation.trip_id == trip_id)
        .scalar()
    )
    return int(total)


def get_public_trips(
    db: Session,
    location: Optional[str] = None,
    on_date: Optional[date] = None,
) -> List[Trip]:
    """Active, upcoming trips nobody has reserved yet."""
    query = (
        db.query(Trip)
        .options(joinedload(Trip.captain), joinedload(Trip.boat))
        .filter(Trip.status == TripStatus.ACTIVE)
        .filter(~Trip.reservations.any())
        .filter(Trip.date >= utcnow())
    )

    if location and location.strip():
        query = query.filter(Trip.location.ilike(f"%{location.strip()}%"))
    if on_date:
        day_start = datetime.combine(on_date, time.min)
        query = query.filter(Trip.date >= day_start, Trip.date < day_start + timedelta(days=1))

    return query.order_by(Trip.date).all()


def get_captain_trips(db: Session, captain_id: int) -> List[Trip]:
    return (
        db.query(Trip)
        .options(
            joinedload(Trip.captain),
            joinedload(Trip.boat),
            selectinload(Trip.reservations).joinedload(Reservation.user),
        )
        .filter(Trip.captain_id == captain_id)
        .filter(Trip.status != TripStatus.CANCELLED)
        .order_by(Trip.date.desc())
        .all()
    )


def _check_boat(db: Session, boat_id: Optional[int], captain_id: int) -> None:
    if boat_id is not None:
        boat_crud.get_owned_boat(db, boat_id, captain_id)


def create_trip(db: Session, trip: TripCreate, captain_id: int) -> Trip:
    _check_boat(db, trip.boat_id, captain_id)

    db_trip = Trip(
        location=trip.location,
        date=trip.date,
        price=trip.price,
        capacity=trip.capacity,
        boat_id=trip.boat_id,
        captain_id=captain_id,
        status=TripStatus.ACTIVE,
    )
    db.add(db_trip)
    db.commit()
    db.refresh(db_trip)
    logger.info(f"Trip {db_trip.id} created by captain {captain_id}")
    return db_trip


def update_trip(db: Session, trip_id: int, captain_id: int, trip: TripUpdate) -> Trip:
    """
    Replace a trip's editable fields.

    Runs under the trip lock so a capacity change cannot race an admission.
    """
    with store_transaction(db):
        db_trip = lock_trip(db, trip_id)
        if db_trip is None:
            raise NotFound("Trip", trip_id)
        if db_trip.captain_id != captain_id:
            raise Unauthorized("You are not authorized to update this trip.")
        if db_trip.is_cancelled:
            raise AlreadyCancelled("A cancelled trip can no longer be changed.")

        reserved = reserved_seats(db, trip_id)
        if trip.capacity < reserved:
            raise InvalidRequest(
                f"Capacity cannot be lower than the {reserved} seats already reserved.",
                field="capacity",
            )
        _check_boat(db, trip.boat_id, captain_id)

        db_trip.location = trip.location
        db_trip.date = trip.date
        db_trip.price = trip.price
        db_trip.capacity = trip.capacity
        db_trip.boat_id = trip.boat_id

    db.refresh(db_trip)
    return db_trip
