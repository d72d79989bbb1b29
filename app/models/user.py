import uuid

from sqlalchemy import Column, DateTime, String
from sqlalchemy.orm import relationship

from app.database import Base, utcnow


class User(Base):
    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    name = Column(String(100), nullable=False)
    email = Column(String(255), unique=True, nullable=False, index=True)
    password_hash = Column("hashed_password", String, nullable=False)
    created_at = Column(DateTime, default=utcnow, nullable=False)

    hosted_events = relationship("Event", back_populates="host", passive_deletes=True)
