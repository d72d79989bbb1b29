# app/schemas.py
# ------------------------------------------------------------
# Pydantic v2 schemas, organized by domain
# ------------------------------------------------------------
from datetime import datetime, timezone
import re
from typing import Optional, List

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_serializer, field_validator
from pydantic.alias_generators import to_camel


_CONTROL_CHAR_RE = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f]")


def _strip_control_chars(value):
    if isinstance(value, str):
        return _CONTROL_CHAR_RE.sub("", value).strip()
    return value


class CamelModel(BaseModel):
    """Accepts and emits camelCase keys; snake_case is accepted on input too."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
        str_strip_whitespace=True,
    )


# ============================================================
# Users / auth
# ============================================================

class SignupIn(CamelModel):
    name: Optional[str] = Field(default=None, max_length=100)
    email: Optional[EmailStr] = None
    password: Optional[str] = Field(default=None, max_length=128)

    @field_validator("name", mode="before")
    @classmethod
    def _clean_name(cls, value):
        return _strip_control_chars(value)

    @field_validator("email", mode="before")
    @classmethod
    def _normalize_email(cls, value):
        if isinstance(value, str):
            value = value.strip().lower()
            return value or None
        return value


class LoginIn(CamelModel):
    email: Optional[str] = None
    password: Optional[str] = None

    @field_validator("email", mode="before")
    @classmethod
    def _normalize_email(cls, value):
        return value.strip().lower() if isinstance(value, str) else value


class UserPublic(CamelModel):
    id: str
    name: str
    email: str


class AuthResponse(BaseModel):
    token: str
    user: UserPublic


# ============================================================
# Events
# ============================================================

# Text fields an event can never be without.
REQUIRED_TEXT_FIELDS = ("title", "time", "location", "description", "category")


class EventCreate(CamelModel):
    """Creation payload. Presence of required fields is checked by the service
    so that a missing field yields the single "missing fields" message."""

    title: Optional[str] = Field(default=None, max_length=200)
    date: Optional[str] = None
    time: Optional[str] = Field(default=None, max_length=50)
    location: Optional[str] = Field(default=None, max_length=255)
    description: Optional[str] = None
    category: Optional[str] = Field(default=None, max_length=100)
    image_url: Optional[str] = Field(default=None, max_length=2048)
    capacity: Optional[int] = Field(default=None, ge=1)
    is_public: Optional[bool] = None
    price: Optional[float] = Field(default=None, ge=0, allow_inf_nan=False)

    @field_validator("title", "time", "location", "description", "category", "image_url", mode="before")
    @classmethod
    def _clean_text(cls, value):
        return _strip_control_chars(value)


class EventUpdate(EventCreate):
    """Partial update. Keys not declared here (hostId, attendees, bookedBy,
    createdAt, ...) are dropped silently."""

    model_config = ConfigDict(extra="ignore")


class EventRead(CamelModel):
    id: str
    title: str
    date: datetime
    time: str
    location: str
    description: str
    category: str
    image_url: Optional[str] = None
    host_id: str
    attendees: int
    capacity: int
    is_public: bool
    price: float
    booked_by: List[str] = []
    created_at: datetime
    updated_at: datetime

    @field_serializer("date", "created_at", "updated_at")
    def _as_utc(self, value: datetime) -> str:
        # Columns hold naive UTC.
        if value.tzinfo is not None:
            value = value.astimezone(timezone.utc).replace(tzinfo=None)
        return value.isoformat(timespec="microseconds") + "Z"


class MessageResponse(BaseModel):
    message: str
