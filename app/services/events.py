"""Event lifecycle and booking rules.

Every function takes an open ``AsyncSession`` and raises ``app.errors``
exceptions on failure; HTTP concerns stay in ``app.routes.events``.
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import utcnow
from app.errors import (
    BookerNotFound,
    EventNotFound,
    Forbidden,
    HostNotFound,
    InvalidDate,
    InvalidIdFormat,
    MissingFields,
    SelfBookingForbidden,
    SoldOut,
    ValidationError,
)
from app.models.booking import Booking
from app.models.event import Event
from app.models.user import User
from app.schemas import REQUIRED_TEXT_FIELDS, EventCreate, EventUpdate

logger = logging.getLogger("events")

# Never writable through an update payload, whatever the caller sends.
IMMUTABLE_FIELDS = frozenset({"id", "host_id", "attendees", "created_at", "updated_at", "booked_by"})


@dataclass(slots=True)
class BookingOutcome:
    event: Event
    booker: User
    total_booked_events: int


# -------------------------------------------------------------------
# Helpers
# -------------------------------------------------------------------

def parse_event_id(raw: str) -> str:
    """Canonical form of a well-formed event id, else InvalidIdFormat."""
    try:
        return str(uuid.UUID(str(raw)))
    except (TypeError, ValueError):
        raise InvalidIdFormat()


def parse_event_date(value: Any) -> datetime:
    """Parse an ISO calendar date (or date-time) into a naive UTC datetime."""
    if isinstance(value, datetime):
        parsed = value
    else:
        text = str(value or "").strip()
        if not text:
            raise InvalidDate()
        if text.endswith(("Z", "z")):
            text = text[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            raise InvalidDate()
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
    return parsed


async def _load_event(db: AsyncSession, event_id: str) -> Event:
    # populate_existing so counters written by a Core UPDATE are re-read.
    result = await db.execute(
        select(Event).where(Event.id == event_id).execution_options(populate_existing=True)
    )
    event = result.scalar_one_or_none()
    if event is None:
        raise EventNotFound()
    return event


async def get_event_for_host(db: AsyncSession, raw_id: str, user_id: str, action: str) -> Event:
    event = await _load_event(db, parse_event_id(raw_id))
    if event.host_id != user_id:
        raise Forbidden(f"You are not authorized to {action} this event")
    return event


async def count_booked_events(db: AsyncSession, user_id: str) -> int:
    """Number of distinct events the user holds at least one booking for."""
    total = await db.scalar(
        select(func.count(func.distinct(Booking.event_id))).where(Booking.user_id == user_id)
    )
    return int(total or 0)


# -------------------------------------------------------------------
# Operations
# -------------------------------------------------------------------

async def list_events(db: AsyncSession) -> list[Event]:
    """All events, soonest first; same-day events newest-created first."""
    result = await db.execute(select(Event).order_by(Event.date.asc(), Event.created_at.desc()))
    return list(result.scalars().all())


async def get_event(db: AsyncSession, raw_id: str) -> Event:
    return await _load_event(db, parse_event_id(raw_id))


async def create_event(db: AsyncSession, host_id: str, payload: EventCreate) -> tuple[Event, User]:
    missing = [f for f in (*REQUIRED_TEXT_FIELDS, "date") if not getattr(payload, f)]
    if missing or payload.capacity is None:
        raise MissingFields()

    event_date = parse_event_date(payload.date)

    host = await db.get(User, host_id)
    if host is None:
        raise HostNotFound()

    event = Event(
        title=payload.title,
        date=event_date,
        time=payload.time,
        location=payload.location,
        description=payload.description,
        category=payload.category,
        image_url=payload.image_url or None,
        capacity=payload.capacity,
        is_public=True if payload.is_public is None else payload.is_public,
        price=0 if payload.price is None else payload.price,
        host_id=host.id,
        attendees=0,
    )
    db.add(event)
    await db.commit()
    logger.info("Event %s created by host %s", event.id, host.id)
    return await _load_event(db, event.id), host


async def update_event(db: AsyncSession, raw_id: str, user_id: str, payload: EventUpdate) -> Event:
    event = await get_event_for_host(db, raw_id, user_id, "update")

    updates = {k: v for k, v in payload.model_dump(exclude_unset=True).items() if k not in IMMUTABLE_FIELDS}

    if "date" in updates:
        updates["date"] = parse_event_date(updates["date"])

    blanked = [f for f in REQUIRED_TEXT_FIELDS if f in updates and not updates[f]]
    if blanked:
        raise ValidationError(f"Validation Error: {', '.join(blanked)} cannot be empty")
    for field in ("capacity", "is_public", "price"):
        if field in updates and updates[field] is None:
            raise ValidationError(f"Validation Error: {field} cannot be empty")
    if "image_url" in updates:
        updates["image_url"] = updates["image_url"] or None

    event_id = event.id
    new_capacity = updates.pop("capacity", None)

    for key, value in updates.items():
        setattr(event, key, value)

    if new_capacity is not None:
        # Guarded like book_event: bookings committed after the load above still count.
        result = await db.execute(
            update(Event)
            .where(Event.id == event_id, Event.attendees <= new_capacity)
            .values(capacity=new_capacity, updated_at=utcnow())
            .execution_options(synchronize_session=False)
        )
        if result.rowcount != 1:
            await db.rollback()
            current = await _load_event(db, event_id)
            raise ValidationError(
                f"Validation Error: capacity cannot be less than current attendees ({current.attendees})"
            )

    # updated_at is refreshed by the column's onupdate only when something changed.
    await db.commit()
    return await _load_event(db, event_id)


async def delete_event(db: AsyncSession, raw_id: str, user_id: str) -> None:
    event = await get_event_for_host(db, raw_id, user_id, "delete")
    await db.delete(event)
    await db.commit()
    logger.info("Event %s deleted by host %s", event.id, user_id)


async def book_event(db: AsyncSession, raw_id: str, user_id: str) -> BookingOutcome:
    """Reserve one slot on an event for ``user_id``.

    Repeat bookings by the same user are accepted; each takes a slot.
    """
    event_id = parse_event_id(raw_id)
    event = await _load_event(db, event_id)

    if event.host_id == user_id:
        raise SelfBookingForbidden()

    if event.attendees >= event.capacity:
        raise SoldOut()

    booker = await db.get(User, user_id)
    if booker is None:
        raise BookerNotFound()

    # Guarded increment: a concurrent booking that took the last slot after
    # the check above makes this match no row.
    result = await db.execute(
        update(Event)
        .where(Event.id == event_id, Event.attendees < Event.capacity)
        .values(attendees=Event.attendees + 1, updated_at=utcnow())
        .execution_options(synchronize_session=False)
    )
    if result.rowcount != 1:
        await db.rollback()
        raise SoldOut()

    db.add(Booking(event_id=event_id, user_id=booker.id))
    await db.commit()

    updated = await _load_event(db, event_id)
    total = await count_booked_events(db, booker.id)
    logger.info(
        "User %s booked event %s (%s/%s)", booker.id, event_id, updated.attendees, updated.capacity
    )
    return BookingOutcome(event=updated, booker=booker, total_booked_events=total)
