from app.models.booking import Booking
from app.models.event import Event
from app.models.user import User

__all__ = ["Booking", "Event", "User"]
