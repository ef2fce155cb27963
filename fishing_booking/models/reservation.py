from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, CheckConstraint
from sqlalchemy.orm import relationship

from fishing_booking.database import Base
from fishing_booking.schemas.booker import AnonymousBooker, Booker, RegisteredBooker
from fishing_booking.utils.time_utils import utcnow


class Reservation(Base):
    __tablename__ = "reservations"
    __table_args__ = (
        CheckConstraint("number_of_seats >= 1", name="ck_reservations_seats_positive"),
        # A reservation belongs either to a registered guest or to an anonymous contact
        CheckConstraint(
            "(user_id IS NOT NULL AND guest_name IS NULL AND guest_email IS NULL"
            " AND guest_phone IS NULL)"
            " OR (user_id IS NULL AND guest_name IS NOT NULL AND guest_email IS NOT NULL)",
            name="ck_reservations_single_booker",
        ),
        {"extend_existing": True},
    )

    id = Column(Integer, primary_key=True, index=True)
    trip_id = Column(Integer, ForeignKey("trips.id"), nullable=False, index=True)
    number_of_seats = Column(Integer, nullable=False)
    reservation_date = Column(DateTime, default=utcnow, nullable=False)

    user_id = Column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=True, index=True
    )
    guest_name = Column(String, nullable=True)
    guest_email = Column(String, nullable=True)
    guest_phone = Column(String, nullable=True)

    # Relationships
    trip = relationship("Trip", back_populates="reservations")
    user = relationship("User", back_populates="reservations")

    @property
    def booker(self) -> Booker:
        if self.user_id is not None:
            return RegisteredBooker(user_id=self.user_id)
        return AnonymousBooker(
            name=self.guest_name, email=self.guest_email, phone=self.guest_phone
        )

    @property
    def contact_name(self) -> str:
        if self.user is not None:
            return self.user.full_name
        return self.guest_name or ""

    @property
    def contact_email(self) -> str:
        if self.user is not None:
            return self.user.email
        return self.guest_email or ""
