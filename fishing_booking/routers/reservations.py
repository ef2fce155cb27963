from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session
from typing import List

from fishing_booking.crud import reservation as crud
from fishing_booking.database import get_db
from fishing_booking.exceptions import NotFound
from fishing_booking.models.user import User
from fishing_booking.schemas.booker import AnonymousBooker, RegisteredBooker
from fishing_booking.schemas.reservation import (
    GuestReservationCreate,
    ReservationCreate,
    ReservationResponse,
)
from fishing_booking.services import admission
from fishing_booking.services.auth import get_current_user, require_guest
from fishing_booking.services.notifications import NotificationDispatcher, get_dispatcher
from fishing_booking.utils.response_utils import (
    build_reservation_response,
    seats_remaining,
)

router = APIRouter()


@router.post(
    "/trip/{trip_id}",
    response_model=ReservationResponse,
    status_code=status.HTTP_201_CREATED,
)
def create_reservation(
    trip_id: int,
    payload: ReservationCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_guest),
    dispatcher: NotificationDispatcher = Depends(get_dispatcher),
):
    return admission.admit_reservation(
        db,
        trip_id,
        payload.number_of_seats,
        RegisteredBooker(user_id=current_user.id),
        dispatcher,
    )


@router.post(
    "/guest/trip/{trip_id}",
    response_model=ReservationResponse,
    status_code=status.HTTP_201_CREATED,
)
def create_guest_reservation(
    trip_id: int,
    payload: GuestReservationCreate,
    db: Session = Depends(get_db),
    dispatcher: NotificationDispatcher = Depends(get_dispatcher),
):
    """Book without an account; the contact details stand in for the guest."""
    booker = AnonymousBooker(
        name=payload.guest_name,
        email=payload.guest_email,
        phone=payload.guest_phone,
    )
    return admission.admit_reservation(
        db, trip_id, payload.number_of_seats, booker, dispatcher
    )


@router.get("/my-reservations", response_model=List[ReservationResponse])
def read_my_reservations(
    db: Session = Depends(get_db), current_user: User = Depends(require_guest)
):
    reservations = crud.get_user_reservations(db, current_user.id)
    return [
        build_reservation_response(r, r.trip, seats_remaining(r.trip))
        for r in reservations
    ]


@router.get("/{reservation_id}", response_model=ReservationResponse)
def read_my_reservation(
    reservation_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_guest),
):
    reservation = crud.get_user_reservation(db, reservation_id, current_user.id)
    if reservation is None:
        raise NotFound("Reservation", reservation_id)
    return build_reservation_response(
        reservation, reservation.trip, seats_remaining(reservation.trip)
    )


@router.delete("/{reservation_id}", status_code=status.HTTP_204_NO_CONTENT)
def cancel_reservation(
    reservation_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
    dispatcher: NotificationDispatcher = Depends(get_dispatcher),
):
    admission.cancel_reservation(db, reservation_id, current_user, dispatcher)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
