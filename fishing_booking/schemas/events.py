from pydantic import BaseModel
from datetime import datetime
from typing import Literal, Optional, Union


class ReservationCreated(BaseModel):
    reservation_id: int
    trip_id: int
    number_of_seats: int
    booker_name: str
    booker_email: Optional[str] = None
    booker_phone: Optional[str] = None
    trip_location: str
    trip_date: datetime
    captain_name: str
    captain_email: Optional[str] = None


class ReservationCancelled(BaseModel):
    # The row is gone once this is published, so everything needed is copied here
    reservation_id: int
    trip_id: int
    booker_name: str
    booker_email: Optional[str] = None
    trip_location: str
    trip_date: datetime
    captain_name: str
    cancelled_by: Literal["guest", "captain"]


class TripCancelled(BaseModel):
    trip_id: int
    reservation_id: int
    booker_name: str
    booker_email: Optional[str] = None
    trip_location: str
    trip_date: datetime
    reason: str


BookingEvent = Union[ReservationCreated, ReservationCancelled, TripCancelled]
