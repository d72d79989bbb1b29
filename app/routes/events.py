# app/routes/events.py

from typing import List

from fastapi import APIRouter, BackgroundTasks, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.auth_token import CurrentUser, get_current_user
from app.database import get_db
from app.emailer import Mailer, get_mailer
from app.schemas import EventCreate, EventRead, EventUpdate, MessageResponse
from app.services import events as event_service
from app.services import notifications

router = APIRouter(prefix="/api/events", tags=["events"])


# Public ------------------------------------------------------------

@router.get("", response_model=List[EventRead])
@router.get("/", response_model=List[EventRead], include_in_schema=False)
async def list_events(db: AsyncSession = Depends(get_db)):
    return await event_service.list_events(db)


@router.get("/{event_id}", response_model=EventRead)
async def get_event(event_id: str, db: AsyncSession = Depends(get_db)):
    return await event_service.get_event(db, event_id)


# Host --------------------------------------------------------------

@router.post("", response_model=EventRead, status_code=status.HTTP_201_CREATED)
@router.post("/", response_model=EventRead, status_code=status.HTTP_201_CREATED, include_in_schema=False)
async def create_event(
    payload: EventCreate,
    background: BackgroundTasks,
    db: AsyncSession = Depends(get_db),
    user: CurrentUser = Depends(get_current_user),
    mailer: Mailer = Depends(get_mailer),
):
    event, host = await event_service.create_event(db, user.id, payload)
    notifications.queue_event_created(background, mailer, host, event)
    return event


@router.put("/{event_id}", response_model=EventRead)
async def update_event(
    event_id: str,
    payload: EventUpdate,
    db: AsyncSession = Depends(get_db),
    user: CurrentUser = Depends(get_current_user),
):
    return await event_service.update_event(db, event_id, user.id, payload)


@router.delete("/{event_id}", response_model=MessageResponse)
async def delete_event(
    event_id: str,
    db: AsyncSession = Depends(get_db),
    user: CurrentUser = Depends(get_current_user),
):
    await event_service.delete_event(db, event_id, user.id)
    return {"message": "Event deleted successfully"}


# Booker ------------------------------------------------------------

@router.post("/{event_id}/book", response_model=EventRead)
async def book_event(
    event_id: str,
    background: BackgroundTasks,
    db: AsyncSession = Depends(get_db),
    user: CurrentUser = Depends(get_current_user),
    mailer: Mailer = Depends(get_mailer),
):
    outcome = await event_service.book_event(db, event_id, user.id)
    notifications.queue_booking_confirmation(
        background, mailer, outcome.booker, outcome.event, outcome.total_booked_events
    )
    return outcome.event
