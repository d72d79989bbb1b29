"""Best-effort email side effects of event creation and booking.

Messages are queued on FastAPI ``BackgroundTasks`` so they run after the
committed result has been returned; a failed send is logged and dropped.
"""

import logging

from fastapi import BackgroundTasks

from app.email_templates import booking_confirmation_html, event_created_html
from app.emailer import Mailer
from app.models.event import Event
from app.models.user import User

logger = logging.getLogger("notifications")

EVENT_CREATED_SUBJECT = "Your Event has been Created!"
BOOKING_CONFIRMED_SUBJECT = "Event Booking Confirmation!"


def deliver(mailer: Mailer, to_email: str, subject: str, html: str) -> bool:
    try:
        return mailer.send(to_email, subject, html)
    except Exception:
        logger.exception("Failed to send %r email to %s", subject, to_email)
        return False


def queue_event_created(background: BackgroundTasks, mailer: Mailer, host: User, event: Event) -> None:
    if not host.email:
        return
    html = event_created_html(host.name, event.title, event.date, event.time, event.location)
    background.add_task(deliver, mailer, host.email, EVENT_CREATED_SUBJECT, html)


def queue_booking_confirmation(
    background: BackgroundTasks,
    mailer: Mailer,
    booker: User,
    event: Event,
    total_booked_events: int,
) -> None:
    if not booker.email:
        return
    html = booking_confirmation_html(
        booker.name, event.title, event.date, event.time, event.location, total_booked_events
    )
    background.add_task(deliver, mailer, booker.email, BOOKING_CONFIRMED_SUBJECT, html)
