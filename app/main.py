import asyncio
import logging
import os
from dotenv import load_dotenv  # load .env variables

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from sqlalchemy.exc import DBAPIError, OperationalError

import app.database as database
from app.emailer import Mailer
from app.errors import register_exception_handlers

# ----- Load environment variables -----
load_dotenv()

# ----- Logging -----
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s"
)
logger = logging.getLogger("eventhub")

# ----- Routers -----
from app.routes.auth import router as auth_router
from app.routes.events import router as events_router
from app.routes.users import router as users_router

# ----- FastAPI app -----
app = FastAPI(
    title="EventHub Backend",
    version="0.1.0",
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
)

register_exception_handlers(app)

# ----- CORS (enabled only if ALLOWED_ORIGINS is set) -----
raw_origins = os.getenv("ALLOWED_ORIGINS", "").strip()
if raw_origins:
    allowed_origins = [o.strip() for o in raw_origins.split(",") if o.strip()]
    app.add_middleware(
        CORSMiddleware,
        allow_origins=allowed_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=[
            "Authorization", "Content-Type", "Accept", "Origin", "X-Requested-With"
        ],
        max_age=86400,
    )

# ----- Include routers -----
app.include_router(auth_router)      # /api/auth ...
app.include_router(users_router)     # /api/users ...
app.include_router(events_router)    # /api/events ...


@app.on_event("startup")
async def on_startup():
    """Ensure database connectivity with simple retry logic, then build the mail transport."""

    max_attempts = int(os.getenv("DB_INIT_MAX_ATTEMPTS", "10"))
    base_delay = float(os.getenv("DB_INIT_RETRY_SECONDS", "1.0"))

    attempt = 0
    while True:
        attempt += 1
        try:
            await database.init_models()
        except (OperationalError, DBAPIError, OSError) as exc:  # pragma: no cover - depends on timing
            if attempt >= max_attempts:
                logger.exception("Database not reachable after %s attempts", attempt)
                raise

            wait_time = base_delay * min(2 ** (attempt - 1), 8)
            logger.warning(
                "Database not ready (attempt %s/%s): %s. Retrying in %.1f seconds...",
                attempt,
                max_attempts,
                exc,
                wait_time,
            )
            await asyncio.sleep(wait_time)
        else:
            logger.info("EventHub API started and database tables ensured.")
            break

    app.state.mailer = Mailer.from_env()

    # Avoid logging secrets; log only whether they are present.
    if os.getenv("DATABASE_URL"):
        logger.info("DATABASE_URL loaded.")
    if os.getenv("JWT_SECRET"):
        logger.info("JWT_SECRET loaded.")
    else:
        logger.warning("JWT_SECRET not set; using the development default.")


# ----- Shutdown: release process-wide connections -----
@app.on_event("shutdown")
async def on_shutdown():
    await database.dispose_engine()
    logger.info("EventHub API shut down")


# ----- Health check endpoint -----
@app.get("/health", tags=["meta"])
async def health():
    return {"ok": True}
