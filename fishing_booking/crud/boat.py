from sqlalchemy.orm import Session
from typing import List, Optional

from fishing_booking.exceptions import NotFound, Unauthorized
from fishing_booking.models.boat import Boat
from fishing_booking.schemas.boat import BoatCreate, BoatUpdate


def get_boat(db: Session, boat_id: int) -> Optional[Boat]:
    return db.query(Boat).filter(Boat.id == boat_id).first()


def get_boats(
    db: Session,
    skip: int = 0,
    limit: int = 100,
    captain_id: Optional[int] = None,
) -> List[Boat]:
    query = db.query(Boat)

    if captain_id:
        query = query.filter(Boat.captain_id == captain_id)

    return query.order_by(Boat.id).offset(skip).limit(limit).all()


def get_owned_boat(db: Session, boat_id: int, captain_id: int) -> Boat:
    db_boat = get_boat(db, boat_id)
    if not db_boat:
        raise NotFound("Boat", boat_id)
    if db_boat.captain_id != captain_id:
        raise Unauthorized("You can only manage your own boats.")
    return db_boat


def create_boat(db: Session, boat: BoatCreate, captain_id: int) -> Boat:
    db_boat = Boat(name=boat.name, capacity=boat.capacity, captain_id=captain_id)
    db.add(db_boat)
    db.commit()
    db.refresh(db_boat)
    return db_boat


def update_boat(db: Session, boat_id: int, captain_id: int, boat: BoatUpdate) -> Boat:
    db_boat = get_owned_boat(db, boat_id, captain_id)

    update_data = boat.model_dump(exclude_unset=True)
    for field, value in update_data.items():
        setattr(db_boat, field, value)

    db.commit()
    db.refresh(db_boat)
    return db_boat


def delete_boat(db: Session, boat_id: int, captain_id: int) -> None:
    db_boat = get_owned_boat(db, boat_id, captain_id)
    # Trips keep running without a boat
    for trip in db_boat.trips:
        trip.boat_id = None
    db.delete(db_boat)
    db.commit()
