from typing import Any, Dict, Optional


class BookingError(Exception):
    """Base class for every error the booking API reports to its callers"""

    def __init__(
        self,
        message: str = "An error occurred",
        status_code: int = 500,
        details: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        super().__init__(self.message)


class NotFound(BookingError):
    def __init__(self, entity: str, id: Any = None):
        message = f"{entity} not found." if id is None else f"{entity} {id} not found."
        super().__init__(message=message, status_code=404)


class Unauthorized(BookingError):
    def __init__(self, message: str = "You are not authorized to perform this action."):
        super().__init__(message=message, status_code=401)


class InvalidRequest(BookingError):
    def __init__(self, message: str, field: Optional[str] = None):
        details = {"field": field} if field else {}
        super().__init__(message=message, status_code=400, details=details)


class TripNotBookable(BookingError):
    def __init__(self, message: str = "This trip is not active and cannot be booked."):
        super().__init__(message=message, status_code=400)


class TripExpired(BookingError):
    def __init__(
        self, message: str = "This trip is in the past and can no longer be booked."
    ):
        super().__init__(message=message, status_code=400)


class InsufficientCapacity(BookingError):
    """Raised when a request asks for more seats than the trip has left"""

    def __init__(self, remaining: int, requested: int):
        self.remaining = remaining
        self.requested = requested
        super().__init__(
            message=f"Not enough seats available. Only {remaining} seats are left.",
            status_code=400,
            details={"remainingSeats": remaining, "requestedSeats": requested},
        )


class AlreadyCancelled(BookingError):
    def __init__(self, message: str = "This trip has already been cancelled."):
        super().__init__(message=message, status_code=400)


class Unavailable(BookingError):
    def __init__(
        self, message: str = "The booking service is temporarily unavailable, please retry."
    ):
        super().__init__(message=message, status_code=503)


class DeliveryError(Exception):
    """Raised by the email sender; never surfaced to a booking caller"""

    def __init__(self, recipient: str, reason: str):
        self.recipient = recipient
        self.reason = reason
        super().__init__(f"Email delivery to {recipient} failed: {reason}")
