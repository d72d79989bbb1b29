import uuid

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Column,
    DateTime,
    Float,
    ForeignKey,
    Integer,
    String,
    Text,
)
from sqlalchemy.orm import relationship

from app.database import Base, utcnow


class Event(Base):
    __tablename__ = "events"
    __table_args__ = (
        CheckConstraint("capacity >= 1", name="ck_events_capacity_positive"),
        CheckConstraint("attendees >= 0", name="ck_events_attendees_non_negative"),
        CheckConstraint("price >= 0", name="ck_events_price_non_negative"),
    )

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    title = Column(String(200), nullable=False)
    date = Column(DateTime, nullable=False, index=True)
    time = Column(String(50), nullable=False)
    location = Column(String(255), nullable=False)
    description = Column(Text, nullable=False)
    category = Column(String(100), nullable=False)
    image_url = Column(String(2048), nullable=True)
    host_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    attendees = Column(Integer, nullable=False, default=0)
    capacity = Column(Integer, nullable=False)
    is_public = Column(Boolean, nullable=False, default=True)
    price = Column(Float, nullable=False, default=0)
    created_at = Column(DateTime, nullable=False, default=utcnow)
    updated_at = Column(DateTime, nullable=False, default=utcnow, onupdate=utcnow)

    host = relationship("User", back_populates="hosted_events")
    bookings = relationship(
        "Booking",
        back_populates="event",
        order_by="Booking.id",
        lazy="selectin",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    @property
    def booked_by(self) -> list[str]:
        """User ids in booking order; a user appears once per booking."""
        return [booking.user_id for booking in self.bookings]
