from pydantic import Field, validator
from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from fishing_booking.models.trip import TripStatus
from fishing_booking.schemas.base import CamelModel
from fishing_booking.utils.time_utils import to_naive_utc


class TripBase(CamelModel):
    location: str = Field(..., min_length=1, max_length=200)
    date: datetime
    price: Decimal = Field(..., ge=Decimal("0.01"), le=Decimal("10000"), decimal_places=2)
    capacity: int = Field(..., ge=1, le=50)
    boat_id: Optional[int] = None

    @validator("date")
    def normalize_date(cls, v):
        return to_naive_utc(v)


class TripCreate(TripBase):
    pass


class TripUpdate(TripBase):
    pass


class TripCancel(CamelModel):
    reason: str = Field(..., min_length=10, max_length=500)


class CaptainSummary(CamelModel):
    id: int
    full_name: str
    email: Optional[str] = None


class BoatSummary(CamelModel):
    id: int
    name: str
    capacity: int


class TripGuest(CamelModel):
    id: int
    full_name: str


class TripReservation(CamelModel):
    id: int
    number_of_seats: int
    reservation_date: datetime
    guest: Optional[TripGuest] = None
    guest_name: Optional[str] = None
    guest_email: Optional[str] = None
    guest_phone: Optional[str] = None


class TripResponse(CamelModel):
    id: int
    location: str
    date: datetime
    price: float
    capacity: int
    seats_remaining: int
    status: TripStatus
    cancellation_reason: Optional[str] = None
    captain: CaptainSummary
    boat: Optional[BoatSummary] = None
    reservations: List[TripReservation] = []
