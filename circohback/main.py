import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Depends
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from circohback.db.base import get_db
from circohback.core.config import settings
from circohback.core.logging import configure_logging
from circohback.routers import activities as activities_router
from circohback.routers import growth as growth_router
from circohback.routers import achievements as achievements_router
from circohback.routers import config as config_router
from circohback.services.growth_config import get_growth_config
from circohback.core.errors import (
    CircohBackException,
    circohback_exception_handler,
    validation_exception_handler,
    unhandled_exception_handler,
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging(settings.LOG_LEVEL)
    # Fail fast on a malformed level/category table.
    get_growth_config()
    logger.info("CircohBack growth API started (env=%s)", settings.APP_ENV)
    yield


app = FastAPI(
    title="CircohBack Growth API",
    description=(
        "**Relationship growth score**\n\n"
        "Turns a user's activity log into a growth score: per-category "
        "breakdown, level curve, achievements, streaks and one-shot level-up "
        "events.\n\n"
        "All error responses follow the `{code, message, details}` envelope."
    ),
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

# --- CORS ---
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# --- Exception handlers (most specific first) ---
app.add_exception_handler(CircohBackException, circohback_exception_handler)
app.add_exception_handler(RequestValidationError, validation_exception_handler)
app.add_exception_handler(Exception, unhandled_exception_handler)

# --- Routers ---
app.include_router(activities_router.router)
app.include_router(growth_router.router)
app.include_router(achievements_router.router)
app.include_router(config_router.router)


@app.get("/health", tags=["health"], summary="Health check")
def health(db: Session = Depends(get_db)):
    """
    Returns `{"status": "ok", "db": "ok"}` when both the API and the database
    are reachable. Returns HTTP 503 if the DB is down.
    """
    try:
        db.execute(text("SELECT 1"))
        db_status = "ok"
    except SQLAlchemyError:
        logger.warning("Health check: database unreachable", exc_info=True)
        db_status = "unreachable"

    if db_status != "ok":
        return JSONResponse(
            status_code=503,
            content={"status": "error", "db": db_status},
        )
    return {"status": "ok", "db": "ok", "env": settings.APP_ENV}
