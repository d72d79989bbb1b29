# app/database.py
from __future__ import annotations

import os
from datetime import datetime, timezone
from pathlib import Path
from typing import Mapping, Optional

from dotenv import load_dotenv
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, create_async_engine
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.engine.url import make_url

load_dotenv()


def _default_db_url() -> str:
    """
    Use a file-based SQLite DB at the project root when DATABASE_URL is not provided.
    File-based SQLite works reliably across async connections and threads.
    """
    root = Path(__file__).resolve().parents[1]
    return f"sqlite+aiosqlite:///{(root / 'eventhub.db').as_posix()}"


def _translate_sslmode(value: str) -> Optional[str]:
    """Translate libpq sslmode values to asyncpg-compatible flags."""

    normalized = value.strip().lower()
    if normalized in {"require", "verify-ca", "verify-full"}:
        return "true"
    if normalized == "disable":
        return "false"

    # "prefer" and "allow" have no asyncpg equivalent; leave the driver default.
    return None


def _normalize_database_url(raw_url: Optional[str]) -> Optional[str]:
    """Ensure async-friendly drivers even if the URL omits them."""

    if not raw_url:
        return raw_url

    try:
        url = make_url(raw_url)
    except Exception:
        # If SQLAlchemy can't parse the URL, fall back to the raw value.
        return raw_url

    driver = url.drivername.lower()
    if driver in {"postgresql", "postgres", "postgresql+psycopg2"}:
        url = url.set(drivername="postgresql+asyncpg")
    elif driver.startswith("postgresql+") and driver != "postgresql+asyncpg":
        url = url.set(drivername="postgresql+asyncpg")
    elif driver == "sqlite":
        url = url.set(drivername="sqlite+aiosqlite")

    if url.drivername == "postgresql+asyncpg":
        query = dict(url.query)
        sslmode = query.pop("sslmode", None)
        if sslmode is not None:
            translated = _translate_sslmode(sslmode)
            if translated is not None:
                query["ssl"] = translated
        if query != url.query:
            url = url.set(query=query)

    return url.render_as_string(hide_password=False)


def _database_url_from_env(env: Mapping[str, str]) -> Optional[str]:
    """Resolve the preferred database URL from environment variables."""

    candidates = [
        env.get("DATABASE_URL"),
        env.get("POSTGRES_URL"),
    ]

    for raw in candidates:
        normalized = _normalize_database_url(raw)
        if normalized:
            return normalized

    return None


DEFAULT_SQLITE_URL: str = _default_db_url()
DATABASE_URL: str = _database_url_from_env(os.environ) or DEFAULT_SQLITE_URL

# Optional echo flag for local debugging
ECHO = os.getenv("SQLALCHEMY_ECHO", "0").lower() in {"1", "true", "yes"}


def _build_engine(database_url: str) -> AsyncEngine:
    return create_async_engine(
        database_url,
        echo=ECHO,
        pool_pre_ping=True,
    )


def _build_session_factory(bind_engine: AsyncEngine) -> sessionmaker:
    return sessionmaker(
        bind=bind_engine,
        class_=AsyncSession,
        autocommit=False,
        autoflush=False,
        expire_on_commit=False,
    )


Base = declarative_base()


def utcnow() -> datetime:
    """Naive UTC timestamp, the form every DateTime column stores."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


# Process-wide connection state, (re)built by configure_engine().
engine: AsyncEngine
SessionLocal: sessionmaker
CURRENT_DATABASE_URL: str


def configure_engine(database_url: str) -> None:
    """Configure the global engine/session factory pair.

    Called once at import with the environment's URL; tests call it again
    to point the application at a throwaway database.
    """

    global engine, SessionLocal, CURRENT_DATABASE_URL

    engine = _build_engine(database_url)
    SessionLocal = _build_session_factory(engine)
    CURRENT_DATABASE_URL = database_url


configure_engine(DATABASE_URL)


async def get_db():
    """FastAPI dependency that yields an AsyncSession."""

    async with SessionLocal() as session:
        yield session


async def init_models() -> None:
    """
    Import all model modules so they register with Base, then create tables.
    Safe to run on every startup; existing tables are left alone.
    """

    # Ensure SQLAlchemy knows about every mapped class
    import app.models  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def dispose_engine() -> None:
    """Close pooled connections on shutdown."""

    await engine.dispose()
