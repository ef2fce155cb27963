from pydantic import Field

from fishing_booking.schemas.base import CamelModel


class BoatBase(CamelModel):
    name: str = Field(..., min_length=1, max_length=100)
    capacity: int = Field(..., ge=1, le=100)


class BoatCreate(BoatBase):
    pass


class BoatUpdate(BoatBase):
    pass


class BoatResponse(BoatBase):
    id: int
    captain_id: int
