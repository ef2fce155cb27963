"""
Tests for reservation cancellation and trip cancellation
"""
import pytest

from fishing_booking.crud import trip as trip_crud
from fishing_booking.exceptions import (
    AlreadyCancelled,
    InvalidRequest,
    NotFound,
    TripNotBookable,
    Unauthorized,
)
from fishing_booking.models.reservation import Reservation
from fishing_booking.models.trip import Trip, TripStatus
from fishing_booking.schemas.booker import AnonymousBooker, RegisteredBooker
from fishing_booking.schemas.events import ReservationCancelled, TripCancelled
from fishing_booking.services.admission import (
    admit_reservation,
    cancel_reservation,
    cancel_trip,
)

REASON = "Storm warning issued for the whole coast."


def test_guest_cancellation_frees_seats(db, guest, other_guest, trip, make_reservation):
    """
    Test: a guest cancels 2 seats on a full trip and a new 2-seat request fits
    """
    make_reservation(trip, 2)
    own_id = make_reservation(trip, 2, user=guest).id

    cancel_reservation(db, own_id, guest)

    assert db.query(Reservation).filter(Reservation.id == own_id).first() is None
    result = admit_reservation(db, trip.id, 2, RegisteredBooker(user_id=other_guest.id))
    assert result.trip.seats_remaining == 0


def test_captain_cancels_anonymous_reservation(db, captain, trip, make_reservation, dispatcher):
    reservation = make_reservation(trip, 1, guest_name="Walk-in", guest_email="walk@example.com")

    cancel_reservation(db, reservation.id, captain, dispatcher)

    assert trip_crud.reserved_seats(db, trip.id) == 0
    events = dispatcher.of_type(ReservationCancelled)
    assert len(events) == 1
    assert events[0].cancelled_by == "captain"
    assert events[0].booker_email == "walk@example.com"
    assert events[0].trip_id == trip.id


def test_guest_cancellation_event(db, guest, trip, make_reservation, dispatcher):
    reservation_id = make_reservation(trip, 1, user=guest).id

    cancel_reservation(db, reservation_id, guest, dispatcher)

    event = dispatcher.of_type(ReservationCancelled)[0]
    assert event.cancelled_by == "guest"
    assert event.booker_name == guest.full_name
    assert event.reservation_id == reservation_id


def test_other_guest_cannot_cancel(db, guest, other_guest, trip, make_reservation, dispatcher):
    reservation = make_reservation(trip, 2, user=guest)

    with pytest.raises(Unauthorized):
        cancel_reservation(db, reservation.id, other_guest, dispatcher)

    assert trip_crud.reserved_seats(db, trip.id) == 2
    assert dispatcher.events == []


def test_guest_cannot_cancel_anonymous_reservation(db, guest, trip, make_reservation):
    reservation = make_reservation(trip, 1)

    with pytest.raises(Unauthorized):
        cancel_reservation(db, reservation.id, guest)


def test_other_captain_cannot_cancel(db, other_captain, trip, make_reservation):
    reservation = make_reservation(trip, 1)

    with pytest.raises(Unauthorized) as exc_info:
        cancel_reservation(db, reservation.id, other_captain)

    assert "your own trips" in exc_info.value.message


def test_cancel_unknown_reservation(db, guest):
    with pytest.raises(NotFound):
        cancel_reservation(db, 4242, guest)


def test_cancel_reservation_twice(db, guest, trip, make_reservation):
    reservation_id = make_reservation(trip, 1, user=guest).id
    cancel_reservation(db, reservation_id, guest)

    with pytest.raises(NotFound):
        cancel_reservation(db, reservation_id, guest)


def test_trip_cancellation_keeps_reservations(db, captain, guest, trip, make_reservation, dispatcher):
    """
    Test: cancelling a trip with 3 reservations keeps them and notifies each booker
    """
    first = make_reservation(trip, 1, user=guest)
    second = make_reservation(trip, 1, guest_name="Maya", guest_email="maya@example.com")
    third = make_reservation(trip, 2, guest_name="Karim", guest_email="karim@example.com")

    cancel_trip(db, trip.id, captain, REASON, dispatcher)

    stored = db.query(Trip).filter(Trip.id == trip.id).one()
    assert stored.status == TripStatus.CANCELLED
    assert stored.cancellation_reason == REASON

    kept = db.query(Reservation).filter(Reservation.trip_id == trip.id).all()
    assert sorted(r.id for r in kept) == sorted([first.id, second.id, third.id])

    events = dispatcher.of_type(TripCancelled)
    assert len(events) == 3
    assert {e.reservation_id for e in events} == {first.id, second.id, third.id}
    assert {e.booker_email for e in events} == {
        guest.email,
        "maya@example.com",
        "karim@example.com",
    }
    assert all(e.reason == REASON for e in events)


def test_cancelled_trip_refuses_new_bookings(db, captain, guest, trip):
    cancel_trip(db, trip.id, captain, REASON)

    with pytest.raises(TripNotBookable):
        admit_reservation(db, trip.id, 1, AnonymousBooker(name="Late", email="late@example.com"))


def test_trip_cancelled_twice(db, captain, trip, dispatcher):
    cancel_trip(db, trip.id, captain, REASON)

    with pytest.raises(AlreadyCancelled):
        cancel_trip(db, trip.id, captain, REASON, dispatcher)

    assert dispatcher.events == []


def test_only_owner_cancels_trip(db, other_captain, trip):
    with pytest.raises(Unauthorized):
        cancel_trip(db, trip.id, other_captain, REASON)

    assert db.query(Trip).filter(Trip.id == trip.id).one().status == TripStatus.ACTIVE


def test_cancel_unknown_trip(db, captain):
    with pytest.raises(NotFound):
        cancel_trip(db, 777, captain, REASON)


@pytest.mark.parametrize("reason", ["", "too short", "   padded   ", "x" * 501])
def test_cancellation_reason_length(db, captain, trip, reason):
    with pytest.raises(InvalidRequest) as exc_info:
        cancel_trip(db, trip.id, captain, reason)

    assert exc_info.value.details == {"field": "reason"}
    assert db.query(Trip).filter(Trip.id == trip.id).one().status == TripStatus.ACTIVE


def test_trip_cancellation_keeps_seats_reserved(db, captain, trip, make_reservation):
    """
    Test: trip cancellation does not release seats, the history stays as booked
    """
    make_reservation(trip, 3)

    cancel_trip(db, trip.id, captain, REASON)

    assert trip_crud.reserved_seats(db, trip.id) == 3


def test_reservation_booker_variant(db, guest, trip, make_reservation):
    registered = make_reservation(trip, 1, user=guest)
    anonymous = make_reservation(trip, 1, guest_name="Maya", guest_email="maya@example.com")

    assert registered.booker == RegisteredBooker(user_id=guest.id)
    assert anonymous.booker == AnonymousBooker(name="Maya", email="maya@example.com")


def test_anonymous_booking_under_guest_email_not_cancellable_by_guest(db, guest, trip, make_reservation):
    """
    Test: only a registered booking grants the guest cancellation rights
    """
    reservation = make_reservation(trip, 1, guest_name="Maya", guest_email=guest.email)

    with pytest.raises(Unauthorized):
        cancel_reservation(db, reservation.id, guest)

    assert trip_crud.reserved_seats(db, trip.id) == 1
