from sqlalchemy.orm import Session
from typing import Optional
import logging

from fishing_booking.exceptions import InvalidRequest
from fishing_booking.models.trip import Trip
from fishing_booking.models.user import User, UserRole
from fishing_booking.schemas.user import UserRegister
from fishing_booking.services.auth import hash_password

logger = logging.getLogger(__name__)


def get_user(db: Session, user_id: int) -> Optional[User]:
    return db.query(User).filter(User.id == user_id).first()


def get_user_by_email(db: Session, email: str) -> Optional[User]:
    return db.query(User).filter(User.email == email).first()


def create_user(db: Session, user: UserRegister, role: UserRole) -> User:
    if get_user_by_email(db, user.email):
        raise InvalidRequest("User with this email already exists.", field="email")

    db_user = User(
        full_name=user.full_name,
        email=user.email,
        hashed_password=hash_password(user.password),
        role=role,
    )
    db.add(db_user)
    db.commit()
    db.refresh(db_user)
    logger.info(f"User registered: {db_user.email} ({role.value})")
    return db_user


def delete_user(db: Session, user: User) -> None:
    """
    Delete an account. A guest's reservations go with it; a captain who
    still owns trips is refused, since trips are never deleted.
    """
    if db.query(Trip).filter(Trip.captain_id == user.id).count() > 0:
        raise InvalidRequest("Captains who still own trips cannot be deleted.")

    db.delete(user)
    db.commit()
    logger.info(f"User {user.id} deleted")
