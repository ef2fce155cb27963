from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session
from typing import List

from fishing_booking.crud import boat as crud
from fishing_booking.database import get_db
from fishing_booking.exceptions import NotFound
from fishing_booking.models.user import User
from fishing_booking.schemas.boat import BoatCreate, BoatResponse, BoatUpdate
from fishing_booking.services.auth import require_captain

router = APIRouter()


@router.get("", response_model=List[BoatResponse])
def read_boats(skip: int = 0, limit: int = 100, db: Session = Depends(get_db)):
    return crud.get_boats(db, skip=skip, limit=limit)


@router.get("/my-boats", response_model=List[BoatResponse])
def read_my_boats(
    db: Session = Depends(get_db), current_user: User = Depends(require_captain)
):
    return crud.get_boats(db, captain_id=current_user.id)


@router.get("/{boat_id}", response_model=BoatResponse)
def read_boat(boat_id: int, db: Session = Depends(get_db)):
    db_boat = crud.get_boat(db, boat_id)
    if db_boat is None:
        raise NotFound("Boat", boat_id)
    return db_boat


@router.post("", response_model=BoatResponse, status_code=status.HTTP_201_CREATED)
def create_boat(
    boat: BoatCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_captain),
):
    return crud.create_boat(db, boat, captain_id=current_user.id)


@router.put("/{boat_id}", status_code=status.HTTP_204_NO_CONTENT)
def update_boat(
    boat_id: int,
    boat: BoatUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_captain),
):
    crud.update_boat(db, boat_id, current_user.id, boat)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.delete("/{boat_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_boat(
    boat_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_captain),
):
    crud.delete_boat(db, boat_id, current_user.id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
