from fishing_booking.models.reservation import Reservation
from fishing_booking.models.trip import Trip
from fishing_booking.schemas.reservation import (
    ReservationResponse,
    ReservationTripDetail,
)
from fishing_booking.schemas.trip import (
    BoatSummary,
    CaptainSummary,
    TripGuest,
    TripReservation,
    TripResponse,
)


def seats_remaining(trip: Trip) -> int:
    return trip.capacity - sum(r.number_of_seats for r in trip.reservations)


def build_reservation_response(
    reservation: Reservation, trip: Trip, remaining: int
) -> ReservationResponse:
    return ReservationResponse(
        id=reservation.id,
        number_of_seats=reservation.number_of_seats,
        reservation_date=reservation.reservation_date,
        guest_name=reservation.guest_name,
        guest_email=reservation.guest_email,
        guest_phone=reservation.guest_phone,
        trip=ReservationTripDetail(
            id=trip.id,
            location=trip.location,
            date=trip.date,
            capacity=trip.capacity,
            price=float(trip.price),
            captain_name=trip.captain_name,
            seats_remaining=remaining,
        ),
    )


def build_trip_response(trip: Trip, include_reservations: bool = False) -> TripResponse:
    reservations = []
    if include_reservations:
        reservations = [
            TripReservation(
                id=r.id,
                number_of_seats=r.number_of_seats,
                reservation_date=r.reservation_date,
                guest=TripGuest(id=r.user.id, full_name=r.user.full_name)
                if r.user
                else None,
                guest_name=r.guest_name,
                guest_email=r.guest_email,
                guest_phone=r.guest_phone,
            )
            for r in trip.reservations
        ]

    return TripResponse(
        id=trip.id,
        location=trip.location,
        date=trip.date,
        price=float(trip.price),
        capacity=trip.capacity,
        seats_remaining=seats_remaining(trip),
        status=trip.status,
        cancellation_reason=trip.cancellation_reason,
        captain=CaptainSummary(
            id=trip.captain.id,
            full_name=trip.captain.full_name,
            email=trip.captain.email,
        ),
        boat=BoatSummary(id=trip.boat.id, name=trip.boat.name, capacity=trip.boat.capacity)
        if trip.boat
        else None,
        reservations=reservations,
    )
