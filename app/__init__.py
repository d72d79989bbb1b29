"""EventHub backend: events, bookings and the accounts that own them."""

# Re-export the common database helpers for convenience. The engine itself is
# reached through ``app.database`` because configure_engine() can replace it.
from .database import Base, get_db  # noqa: F401

__all__ = ["Base", "get_db"]
