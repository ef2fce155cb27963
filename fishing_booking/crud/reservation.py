from sqlalchemy.orm import Session, joinedload
from typing import List, Optional

from fishing_booking.models.reservation import Reservation
from fishing_booking.models.trip import Trip
from fishing_booking.schemas.booker import AnonymousBooker, Booker, RegisteredBooker
from fishing_booking.utils.time_utils import utcnow


def get_reservation(db: Session, reservation_id: int) -> Optional[Reservation]:
    return db.query(Reservation).filter(Reservation.id == reservation_id).first()


def get_user_reservations(db: Session, user_id: int) -> List[Reservation]:
    return (
        db.query(Reservation)
        .options(joinedload(Reservation.trip).joinedload(Trip.captain))
        .filter(Reservation.user_id == user_id)
        .order_by(Reservation.reservation_date.desc())
        .all()
    )


def get_user_reservation(
    db: Session, reservation_id: int, user_id: int
) -> Optional[Reservation]:
    return (
        db.query(Reservation)
        .options(joinedload(Reservation.trip).joinedload(Trip.captain))
        .filter(Reservation.id == reservation_id, Reservation.user_id == user_id)
        .first()
    )


def create_reservation(
    db: Session, trip_id: int, number_of_seats: int, booker: Booker
) -> Reservation:
    """Stage the row inside the caller's transaction; the caller commits."""
    db_reservation = Reservation(
        trip_id=trip_id,
        number_of_seats=number_of_seats,
        reservation_date=utcnow(),
    )
    if isinstance(booker, RegisteredBooker):
        db_reservation.user_id = booker.user_id
    elif isinstance(booker, AnonymousBooker):
        db_reservation.guest_name = booker.name
        db_reservation.guest_email = booker.email
        db_reservation.guest_phone = booker.phone
    else:
        raise TypeError(f"Unsupported booker: {booker!r}")

    db.add(db_reservation)
    db.flush()
    return db_reservation


def delete_reservation(db: Session, reservation: Reservation) -> None:
    db.delete(reservation)
    db.flush()


def get_trip_reservations(db: Session, trip_id: int) -> List[Reservation]:
    return (
        db.query(Reservation)
        .options(joinedload(Reservation.user))
        .filter(Reservation.trip_id == trip_id)
        .order_by(Reservation.id)
        .all()
    )
