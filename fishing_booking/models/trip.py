from sqlalchemy import (
    Column,
    Integer,
    String,
    Numeric,
    DateTime,
    ForeignKey,
    Enum,
    CheckConstraint,
)
from sqlalchemy.orm import relationship
import enum

from fishing_booking.database import Base
from fishing_booking.utils.time_utils import utcnow


class TripStatus(enum.Enum):
    ACTIVE = "Active"
    CANCELLED = "Cancelled"


class Trip(Base):
    __tablename__ = "trips"
    __table_args__ = (
        CheckConstraint("capacity >= 1", name="ck_trips_capacity_positive"),
        {"extend_existing": True},
    )

    id = Column(Integer, primary_key=True, index=True)
    location = Column(String, nullable=False)
    date = Column(DateTime, nullable=False, index=True)  # UTC
    price = Column(Numeric(10, 2), nullable=False)
    capacity = Column(Integer, nullable=False)
    status = Column(Enum(TripStatus), default=TripStatus.ACTIVE, nullable=False)
    cancellation_reason = Column(String(500), nullable=True)
    # Bumped by every capacity-affecting transaction; the bump is the row lock.
    version = Column(Integer, default=0, nullable=False)

    captain_id = Column(
        Integer, ForeignKey("users.id", ondelete="RESTRICT"), nullable=False, index=True
    )
    boat_id = Column(
        Integer, ForeignKey("boats.id", ondelete="SET NULL"), nullable=True
    )

    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    # Relationships
    captain = relationship("User", back_populates="managed_trips")
    boat = relationship("Boat", back_populates="trips")
    reservations = relationship(
        "Reservation", back_populates="trip", order_by="Reservation.id"
    )

    @property
    def is_cancelled(self) -> bool:
        return self.status == TripStatus.CANCELLED

    @property
    def captain_name(self) -> str:
        return self.captain.full_name if self.captain else ""
