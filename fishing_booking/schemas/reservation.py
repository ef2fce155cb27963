from pydantic import EmailStr, Field
from datetime import datetime
from typing import Optional

from fishing_booking.schemas.base import CamelModel


class ReservationCreate(CamelModel):
    # Range is checked by the admission engine, after the trip checks
    number_of_seats: int


class GuestReservationCreate(CamelModel):
    number_of_seats: int
    guest_name: str = Field(..., min_length=1, max_length=100)
    guest_email: EmailStr
    guest_phone: Optional[str] = Field(None, max_length=30)


class ReservationTripDetail(CamelModel):
    id: int
    location: str
    date: datetime
    capacity: int
    price: float
    captain_name: str
    seats_remaining: int


class ReservationResponse(CamelModel):
    id: int
    number_of_seats: int
    reservation_date: datetime
    guest_name: Optional[str] = None
    guest_email: Optional[str] = None
    guest_phone: Optional[str] = None
    trip: ReservationTripDetail
