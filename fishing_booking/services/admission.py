"""
Reservation admission.

Every reservation is created here and every seat is given back here. The
capacity check and the insert run in one transaction that first takes the
trip lock (see ``trip_crud.lock_trip``), so two requests for the same trip
are serialized and can never both take the last seats. Trips never contend
with each other.

Events go to the notification dispatcher only after the transaction has
committed.
"""

from typing import List
import logging
import os

from dotenv import load_dotenv
from sqlalchemy.orm import Session

from fishing_booking.crud import reservation as reservation_crud
from fishing_booking.crud import trip as trip_crud
from fishing_booking.database import store_transaction
from fishing_booking.exceptions import (
    AlreadyCancelled,
    InsufficientCapacity,
    InvalidRequest,
    NotFound,
    TripExpired,
    TripNotBookable,
    Unauthorized,
)
from fishing_booking.models.trip import TripStatus
from fishing_booking.models.user import User, UserRole
from fishing_booking.schemas.booker import Booker, RegisteredBooker
from fishing_booking.schemas.events import (
    BookingEvent,
    ReservationCancelled,
    ReservationCreated,
    TripCancelled,
)
from fishing_booking.schemas.reservation import ReservationResponse
from fishing_booking.utils.response_utils import build_reservation_response
from fishing_booking.utils.time_utils import utcnow

load_dotenv()

logger = logging.getLogger(__name__)

MAX_SEATS_PER_BOOKING = int(os.getenv("MAX_SEATS_PER_BOOKING", "50"))
CANCEL_REASON_MIN_LENGTH = 10
CANCEL_REASON_MAX_LENGTH = 500


def _publish(dispatcher, events: List[BookingEvent]) -> None:
    if dispatcher is None:
        return
    for event in events:
        try:
            dispatcher.publish(event)
        except Exception:
            # Already committed
            logger.exception(f"Could not publish {type(event).__name__}")


def admit_reservation(
    db: Session,
    trip_id: int,
    number_of_seats: int,
    booker: Booker,
    dispatcher=None,
) -> ReservationResponse:
    """
    Accept or reject a reservation request.

    Checks run in this order and the first failure wins:
    trip exists, trip is active, trip is in the future, seat count is within
    the per-booking bound, enough seats remain.

    Returns:
        ReservationResponse: the new reservation with a snapshot of its trip,
        read under the same lock that guarded the capacity check

    Raises:
        NotFound, TripNotBookable, TripExpired, InvalidRequest,
        InsufficientCapacity, Unavailable
    """
    with store_transaction(db):
        trip = trip_crud.lock_trip(db, trip_id)
        if trip is None:
            raise NotFound("Trip", trip_id)
        if trip.status != TripStatus.ACTIVE:
            raise TripNotBookable()
        if trip.date <= utcnow():
            raise TripExpired()
        if not 1 <= number_of_seats <= MAX_SEATS_PER_BOOKING:
            raise InvalidRequest(
                f"Number of seats must be between 1 and {MAX_SEATS_PER_BOOKING}.",
                field="numberOfSeats",
            )

        remaining = trip.capacity - trip_crud.reserved_seats(db, trip.id)
        if number_of_seats > remaining:
            logger.info(
                f"Reservation rejected for trip {trip.id}: "
                f"requested {number_of_seats}, remaining {remaining}"
            )
            raise InsufficientCapacity(remaining=remaining, requested=number_of_seats)

        reservation = reservation_crud.create_reservation(
            db, trip.id, number_of_seats, booker
        )
        snapshot = build_reservation_response(
            reservation, trip, remaining - number_of_seats
        )
        event = ReservationCreated(
            reservation_id=reservation.id,
            trip_id=trip.id,
            number_of_seats=number_of_seats,
            booker_name=reservation.contact_name,
            booker_email=reservation.contact_email or None,
            booker_phone=reservation.guest_phone,
            trip_location=trip.location,
            trip_date=trip.date,
            captain_name=trip.captain_name,
            captain_email=trip.captain.email if trip.captain else None,
        )

    logger.info(
        f"Reservation {snapshot.id} admitted for trip {trip_id}: "
        f"{number_of_seats} seats, {snapshot.trip.seats_remaining} left"
    )
    _publish(dispatcher, [event])
    return snapshot


def cancel_reservation(
    db: Session,
    reservation_id: int,
    requester: User,
    dispatcher=None,
) -> None:
    """
    Delete a reservation, freeing its seats at once.

    Allowed for the registered guest who made it and for the captain of its
    trip. Anonymous reservations can only be cancelled by the captain.
    """
    with store_transaction(db):
        reservation = reservation_crud.get_reservation(db, reservation_id)
        if reservation is None:
            raise NotFound("Reservation", reservation_id)

        trip = trip_crud.lock_trip(db, reservation.trip_id)
        # Re-read under the lock; a concurrent cancel may have won
        reservation = reservation_crud.get_reservation(db, reservation_id)
        if trip is None or reservation is None:
            raise NotFound("Reservation", reservation_id)

        booker = reservation.booker
        if (
            requester.role == UserRole.GUEST
            and isinstance(booker, RegisteredBooker)
            and booker.user_id == requester.id
        ):
            cancelled_by = "guest"
        elif requester.role == UserRole.CAPTAIN and trip.captain_id == requester.id:
            cancelled_by = "captain"
        elif requester.role == UserRole.CAPTAIN:
            raise Unauthorized("You can only cancel reservations for your own trips.")
        else:
            raise Unauthorized("You are not authorized to cancel this reservation.")

        event = ReservationCancelled(
            reservation_id=reservation.id,
            trip_id=trip.id,
            booker_name=reservation.contact_name,
            booker_email=reservation.contact_email or None,
            trip_location=trip.location,
            trip_date=trip.date,
            captain_name=trip.captain_name,
            cancelled_by=cancelled_by,
        )
        seats = reservation.number_of_seats
        reservation_crud.delete_reservation(db, reservation)

    logger.info(
        f"Reservation {reservation_id} cancelled by {cancelled_by} {requester.id}, "
        f"{seats} seats released on trip {event.trip_id}"
    )
    _publish(dispatcher, [event])


def cancel_trip(
    db: Session,
    trip_id: int,
    captain: User,
    reason: str,
    dispatcher=None,
) -> None:
    """
    Cancel a trip for good.

    Reservations are kept as history; every one of them gets a TripCancelled
    event carrying the captain's reason.
    """
    with store_transaction(db):
        trip = trip_crud.lock_trip(db, trip_id)
        if trip is None:
            raise NotFound("Trip", trip_id)
        if trip.captain_id != captain.id:
            raise Unauthorized("You are not authorized to cancel this trip.")
        if trip.status == TripStatus.CANCELLED:
            raise AlreadyCancelled()

        reason = (reason or "").strip()
        if not CANCEL_REASON_MIN_LENGTH <= len(reason) <= CANCEL_REASON_MAX_LENGTH:
            raise InvalidRequest(
                "The reason must be between 10 and 500 characters.", field="reason"
            )

        trip.status = TripStatus.CANCELLED
        trip.cancellation_reason = reason
        events = [
            TripCancelled(
                trip_id=trip.id,
                reservation_id=r.id,
                booker_name=r.contact_name,
                booker_email=r.contact_email or None,
                trip_location=trip.location,
                trip_date=trip.date,
                reason=reason,
            )
            for r in reservation_crud.get_trip_reservations(db, trip.id)
        ]

    logger.info(
        f"Trip {trip_id} cancelled by captain {captain.id}, "
        f"{len(events)} reservations to notify"
    )
    _publish(dispatcher, events)

