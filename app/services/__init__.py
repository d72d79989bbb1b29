"""Service layer: event rules and their notification side effects."""

from . import events, notifications
from .events import BookingOutcome

__all__ = ["BookingOutcome", "events", "notifications"]
