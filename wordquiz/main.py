import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from wordquiz.core.config import settings
from wordquiz.db import session as session_module
from wordquiz.db.base import Base
from wordquiz.db.initial_data import seed_initial_data
from wordquiz.api.v2.api import api_router
from wordquiz.admin import mount_admin

# --- Logging configuration ---
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

# --- FastAPI application ---
app = FastAPI(
    title="Wordquiz API V2",
    openapi_url="/api/v2/openapi.json",
)


def _sanitize_origin(origin: str | None) -> str | None:
    if not origin:
        return None
    value = origin.strip()
    if not value:
        return None
    if not value.startswith("http"):
        value = f"https://{value}"
    return value.rstrip("/")


cors_origins = sorted({origin for origin in map(_sanitize_origin, settings.BACKEND_CORS_ORIGINS) if origin})
logger.info("CORS origins: %s", cors_origins)

app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["Authorization", "Content-Type"],
)

if settings.ADMIN_ENABLED:
    mount_admin(app, session_module.sync_engine)

app.include_router(api_router, prefix="/api/v2")


def prepare_database() -> int:
    """Create missing tables and seed the bundled dictionary on first run."""

    logger.info("Checking and creating database tables...")
    Base.metadata.create_all(bind=session_module.sync_engine)
    logger.info("Database tables are ready.")

    if not settings.SEED_ON_STARTUP:
        return 0

    with session_module.SessionLocal() as db:
        return seed_initial_data(db, settings.SEED_WORDS_FILE)


@app.on_event("startup")
def startup() -> None:
    prepare_database()


@app.get("/")
def read_root():
    return {"message": "Welcome to the Wordquiz API!"}
