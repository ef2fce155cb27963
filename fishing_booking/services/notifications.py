"""
Booking notifications.

Business operations publish events after their transaction commits; the
dispatcher turns each event into emails on a small worker pool. Delivery is
best effort: one attempt per recipient, failures are logged and dropped, and
nothing here can fail or slow down the booking that triggered it.
"""

from concurrent.futures import Future, ThreadPoolExecutor
from datetime import datetime
from html import escape
from typing import List, Optional
import logging
import os

from dotenv import load_dotenv
from pydantic import BaseModel

from fishing_booking.exceptions import DeliveryError
from fishing_booking.schemas.events import (
    BookingEvent,
    ReservationCancelled,
    ReservationCreated,
    TripCancelled,
)
from fishing_booking.services.email import EmailService, email_service

load_dotenv()

logger = logging.getLogger(__name__)

NOTIFICATION_WORKERS = int(os.getenv("NOTIFICATION_WORKERS", "4"))


class OutgoingEmail(BaseModel):
    to: str
    subject: str
    html_body: str


def _format_date(value: datetime) -> str:
    return value.strftime("%B %d, %Y at %H:%M UTC")


def _reservation_created_emails(event: ReservationCreated) -> List[OutgoingEmail]:
    emails = []
    if event.booker_email:
        emails.append(
            OutgoingEmail(
                to=event.booker_email,
                subject="Fishing Trip Booking Confirmation",
                html_body=f"""
                <h2>Hello {escape(event.booker_name)},</h2>
                <p>Your reservation for the trip to <b>{escape(event.trip_location)}</b> has been confirmed!</p>
                <ul>
                    <li><b>Date:</b> {_format_date(event.trip_date)}</li>
                    <li><b>Seats Reserved:</b> {event.number_of_seats}</li>
                    <li><b>Captain:</b> {escape(event.captain_name)}</li>
                </ul>
                <p>We look forward to seeing you!</p>
                """,
            )
        )
    if event.captain_email:
        emails.append(
            OutgoingEmail(
                to=event.captain_email,
                subject=f"New Reservation for your trip to {event.trip_location}",
                html_body=f"""
                <h2>Hello Captain {escape(event.captain_name)},</h2>
                <p>You have received a new reservation for your upcoming trip.</p>
                <h3>Trip Details:</h3>
                <ul>
                    <li><b>Location:</b> {escape(event.trip_location)}</li>
                    <li><b>Date:</b> {_format_date(event.trip_date)}</li>
                </ul>
                <h3>Reservation Details:</h3>
                <ul>
                    <li><b>Guest Name:</b> {escape(event.booker_name)}</li>
                    <li><b>Seats Reserved:</b> {event.number_of_seats}</li>
                    <li><b>Guest Phone:</b> {escape(event.booker_phone or "N/A")}</li>
                    <li><b>Guest Email:</b> {escape(event.booker_email or "N/A")}</li>
                </ul>
                <p>This is an automated notification.</p>
                """,
            )
        )
    return emails


def _reservation_cancelled_emails(event: ReservationCancelled) -> List[OutgoingEmail]:
    if not event.booker_email:
        return []
    source = "the trip's captain" if event.cancelled_by == "captain" else "you"
    return [
        OutgoingEmail(
            to=event.booker_email,
            subject="Your Fishing Trip Reservation Has Been Canceled",
            html_body=f"""
            <h2>Hello {escape(event.booker_name)},</h2>
            <p>This is a confirmation that your reservation was successfully canceled by <b>{source}</b>.</p>
            <hr>
            <h3>Canceled Trip Details:</h3>
            <ul>
                <li><b>Location:</b> {escape(event.trip_location)}</li>
                <li><b>Date:</b> {_format_date(event.trip_date)}</li>
            </ul>
            <p>If you believe this was a mistake, please contact our support.</p>
            """,
        )
    ]


def _trip_cancelled_emails(event: TripCancelled) -> List[OutgoingEmail]:
    if not event.booker_email:
        return []
    return [
        OutgoingEmail(
            to=event.booker_email,
            subject=f"Trip Canceled: Your Booking for {event.trip_location}",
            html_body=f"""
            <h2>Hello {escape(event.booker_name)},</h2>
            <p>We are sorry to inform you that the fishing trip to <b>{escape(event.trip_location)}</b>
            scheduled for <b>{_format_date(event.trip_date)}</b> has been canceled.</p>
            <p>The captain provided the following reason for the cancellation:</p>
            <blockquote style="border-left: 4px solid #ccc; padding-left: 15px; margin-left: 20px;">
                <i>"{escape(event.reason)}"</i>
            </blockquote>
            <p>We apologize for any inconvenience and hope to see you on another trip soon.</p>
            """,
        )
    ]


def render_emails(event: BookingEvent) -> List[OutgoingEmail]:
    if isinstance(event, ReservationCreated):
        return _reservation_created_emails(event)
    if isinstance(event, ReservationCancelled):
        return _reservation_cancelled_emails(event)
    if isinstance(event, TripCancelled):
        return _trip_cancelled_emails(event)
    raise TypeError(f"Unknown booking event: {type(event).__name__}")


class NotificationDispatcher:
    """Fire-and-forget email fan-out for booking events"""

    def __init__(
        self, sender: EmailService, max_workers: int = NOTIFICATION_WORKERS
    ):
        self.sender = sender
        self._executor = ThreadPoolExecutor(
            max_workers=max_workers, thread_name_prefix="notifications"
        )

    def publish(self, event: BookingEvent) -> Optional[Future]:
        """Queue an event for delivery and return immediately."""
        try:
            return self._executor.submit(self.deliver, event)
        except RuntimeError:
            logger.error(
                f"Notification dispatcher is shut down, dropping {type(event).__name__}"
            )
            return None

    def deliver(self, event: BookingEvent) -> int:
        """Send every email the event calls for. Returns how many went out."""
        sent = 0
        try:
            emails = render_emails(event)
        except Exception:
            logger.exception(f"Could not render emails for {type(event).__name__}")
            return sent

        for email in emails:
            try:
                self.sender.send(email.to, email.subject, email.html_body)
                sent += 1
            except DeliveryError as e:
                logger.warning(f"{type(event).__name__} notification not delivered: {e}")
            except Exception:
                logger.exception(
                    f"Unexpected error sending {type(event).__name__} notification to {email.to}"
                )
        return sent

    def shutdown(self, wait: bool = True) -> None:
        self._executor.shutdown(wait=wait)


notification_dispatcher = NotificationDispatcher(email_service)


def get_dispatcher() -> NotificationDispatcher:
    return notification_dispatcher
