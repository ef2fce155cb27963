from sqlalchemy import Column, Integer, String, DateTime, Enum
from sqlalchemy.orm import relationship
import enum

from fishing_booking.database import Base
from fishing_booking.utils.time_utils import utcnow


class UserRole(enum.Enum):
    CAPTAIN = "Captain"
    GUEST = "Guest"


class User(Base):
    __tablename__ = "users"
    __table_args__ = {"extend_existing": True}

    id = Column(Integer, primary_key=True, index=True)
    full_name = Column(String(100), nullable=False)
    email = Column(String, unique=True, index=True, nullable=False)
    hashed_password = Column(String, nullable=False)
    role = Column(Enum(UserRole), nullable=False)
    created_at = Column(DateTime, default=utcnow)

    # Relationships
    reservations = relationship(
        "Reservation",
        back_populates="user",
        cascade="all, delete-orphan",
    )
    managed_trips = relationship("Trip", back_populates="captain")
    boats = relationship(
        "Boat",
        back_populates="captain",
        cascade="all, delete-orphan",
    )
