from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session
from datetime import date
from typing import List, Optional

from fishing_booking.crud import trip as crud
from fishing_booking.database import get_db
from fishing_booking.exceptions import NotFound
from fishing_booking.models.user import User
from fishing_booking.schemas.trip import TripCancel, TripCreate, TripResponse, TripUpdate
from fishing_booking.services import admission
from fishing_booking.services.auth import require_captain
from fishing_booking.services.notifications import NotificationDispatcher, get_dispatcher
from fishing_booking.utils.response_utils import build_trip_response

router = APIRouter()


@router.get("", response_model=List[TripResponse])
def read_trips(
    location: Optional[str] = None,
    date: Optional[date] = None,
    db: Session = Depends(get_db),
):
    """Upcoming active trips that are still open, optionally by location and day."""
    trips = crud.get_public_trips(db, location=location, on_date=date)
    return [build_trip_response(trip) for trip in trips]


@router.get("/my-trips", response_model=List[TripResponse])
def read_my_trips(
    db: Session = Depends(get_db), current_user: User = Depends(require_captain)
):
    trips = crud.get_captain_trips(db, current_user.id)
    return [build_trip_response(trip, include_reservations=True) for trip in trips]


@router.get("/{trip_id}", response_model=TripResponse)
def read_trip(trip_id: int, db: Session = Depends(get_db)):
    db_trip = crud.get_trip(db, trip_id)
    if db_trip is None:
        raise NotFound("Trip", trip_id)
    return build_trip_response(db_trip)


@router.post("", response_model=TripResponse, status_code=status.HTTP_201_CREATED)
def create_trip(
    trip: TripCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_captain),
):
    db_trip = crud.create_trip(db, trip, captain_id=current_user.id)
    return build_trip_response(db_trip)


@router.put("/{trip_id}", status_code=status.HTTP_204_NO_CONTENT)
def update_trip(
    trip_id: int,
    trip: TripUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_captain),
):
    crud.update_trip(db, trip_id, current_user.id, trip)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.put("/{trip_id}/cancel", status_code=status.HTTP_204_NO_CONTENT)
def cancel_trip(
    trip_id: int,
    payload: TripCancel,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_captain),
    dispatcher: NotificationDispatcher = Depends(get_dispatcher),
):
    admission.cancel_trip(db, trip_id, current_user, payload.reason, dispatcher)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
