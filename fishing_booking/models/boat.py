from sqlalchemy import Column, Integer, String, ForeignKey, CheckConstraint
from sqlalchemy.orm import relationship

from fishing_booking.database import Base


class Boat(Base):
    __tablename__ = "boats"
    __table_args__ = (
        CheckConstraint("capacity >= 1", name="ck_boats_capacity_positive"),
        {"extend_existing": True},
    )

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), nullable=False)
    capacity = Column(Integer, nullable=False)
    captain_id = Column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )

    # Relationships
    captain = relationship("User", back_populates="boats")
    trips = relationship("Trip", back_populates="boat", passive_deletes=True)
