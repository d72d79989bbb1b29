import asyncio
from datetime import timedelta

from sqlalchemy import select

import app.database as database
from app.models.event import Event
from app.models.user import User
from app.security import hash_password

DEMO_EMAIL = "host@example.com"
DEMO_PASSWORD = "changeme123"


async def main() -> None:
    """Create tables and a demo host with a couple of upcoming events."""

    await database.init_models()
    async with database.SessionLocal() as session:
        existing = await session.scalar(select(User).where(User.email == DEMO_EMAIL))
        if existing:
            print(f"Demo host {DEMO_EMAIL} already exists; nothing to do.")
            await database.dispose_engine()
            return

        host = User(name="Demo Host", email=DEMO_EMAIL, password_hash=hash_password(DEMO_PASSWORD))
        session.add(host)
        await session.flush()

        today = database.utcnow().replace(hour=0, minute=0, second=0, microsecond=0)
        session.add_all([
            Event(
                title="Community Meetup",
                date=today + timedelta(days=7),
                time="18:00",
                location="Main Hall",
                description="Monthly meetup for local organizers.",
                category="Networking",
                capacity=50,
                host_id=host.id,
            ),
            Event(
                title="Python Workshop",
                date=today + timedelta(days=14),
                time="10:00",
                location="Room 101",
                description="Hands-on introduction to async Python.",
                category="Education",
                capacity=20,
                price=15,
                host_id=host.id,
            ),
        ])
        await session.commit()
    await database.dispose_engine()
    print(f"Seeded demo host {DEMO_EMAIL} (password: {DEMO_PASSWORD}) with 2 events.")


if __name__ == "__main__":
    asyncio.run(main())
