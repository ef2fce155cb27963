from fishing_booking.models.user import User, UserRole
from fishing_booking.models.boat import Boat
from fishing_booking.models.trip import Trip, TripStatus
from fishing_booking.models.reservation import Reservation

# This makes the models directory a Python package and ensures all models are loaded
