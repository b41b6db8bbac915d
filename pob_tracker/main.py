"""FastAPI application entry point."""

import asyncio
import logging
import sys
from contextlib import asynccontextmanager
from datetime import UTC, datetime

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.exc import SQLAlchemyError

from pob_tracker.api import passengers, sites, trips, users
from pob_tracker.config import get_settings
from pob_tracker.database import connection_manager
from pob_tracker.errors import register_exception_handlers

settings = get_settings()

logger = logging.getLogger(__name__)


def configure_logging(level: str) -> None:
    """Send application logs to stdout once per process."""
    root = logging.getLogger()
    if root.handlers:
        return
    root.setLevel(level)
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s %(message)s"))
    root.addHandler(handler)


configure_logging(settings.log_level)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Handle application startup and shutdown events."""
    # The API starts even when the database is down; requests retry the connection
    try:
        await asyncio.to_thread(connection_manager.connect)
    except SQLAlchemyError as e:
        logger.warning(f"Database not reachable at startup: {e}")
    yield
    await asyncio.to_thread(connection_manager.invalidate)


app = FastAPI(
    title="POB Tracker API",
    description="Personnel transport and persons-on-board tracking",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "PATCH", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization", "X-Requested-With"],
)

register_exception_handlers(app)

# Register routers
app.include_router(users.router)
app.include_router(passengers.router)
app.include_router(trips.router)
app.include_router(sites.router)


@app.get("/api/health")
def health_check():
    """Health check endpoint. Reports database status without depending on it."""
    return {
        "status": "OK",
        "server": "running",
        "db_connected": connection_manager.ping(),
        "environment": settings.environment,
        "timestamp": datetime.now(UTC).isoformat(),
    }
