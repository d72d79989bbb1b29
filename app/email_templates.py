from datetime import datetime
from html import escape
from typing import Optional

BRAND = "EventHub"


def _display_date(value: datetime) -> str:
    return value.strftime("%m/%d/%Y")


def _details(date: datetime, time: str, location: str) -> str:
    return f"""
        <ul>
          <li>Date: {_display_date(date)}</li>
          <li>Time: {escape(time)}</li>
          <li>Location: {escape(location)}</li>
        </ul>"""


def event_created_html(host_name: Optional[str], title: str, date: datetime, time: str, location: str) -> str:
    return f"""
        <h1>Event Created Successfully!</h1>
        <p>Dear {escape(host_name or "User")},</p>
        <p>Your event "<strong>{escape(title)}</strong>" has been successfully created and is now listed on {BRAND}.</p>
        <p>Details:</p>{_details(date, time, location)}
        <p>Thank you for using {BRAND}!</p>
    """


def booking_confirmation_html(
    booker_name: Optional[str],
    title: str,
    date: datetime,
    time: str,
    location: str,
    total_booked_events: int,
) -> str:
    return f"""
        <h1>Booking Confirmed!</h1>
        <p>Dear {escape(booker_name or "User")},</p>
        <p>You have successfully booked a ticket for the event: "<strong>{escape(title)}</strong>".</p>
        <p>Event Details:</p>{_details(date, time, location)}
        <p>You have now made bookings for a total of <strong>{total_booked_events}</strong> event(s) on {BRAND}.</p>
        <p>Thank you for using {BRAND}!</p>
    """
