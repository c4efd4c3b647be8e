# main.py
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from reminder_app import database
from reminder_app.logging import RequestLoggingMiddleware, init_logging
from reminder_app.routes import router

# ---------------------------------------------------------------------------
# Logging setup
# ---------------------------------------------------------------------------
init_logging()
logger = logging.getLogger("reminder_app.main")


# ---------------------------------------------------------------------------
# App lifespan (startup/shutdown)
# ---------------------------------------------------------------------------
@asynccontextmanager
async def lifespan(app: FastAPI):
    """Handle startup and shutdown tasks."""
    logger.info("Startup: initializing database...")
    try:
        await database.init_db_async()
        logger.info("Connected to database: %s", database.get_database_dsn())
    except Exception as e:
        logger.critical("Database initialization failed: %s", e)
        raise  # fail fast: reminders cannot be stored without the DB

    from reminder_app.features.reminders import start_reminder_service, stop_reminder_service

    logger.info("Startup: starting reminder service...")
    await start_reminder_service()

    yield  # app runs during this block

    logger.info("Shutdown: stopping reminder service...")
    try:
        await stop_reminder_service()
    except Exception as e:
        logger.error("Error stopping reminder service: %s", e)

    logger.info("Shutdown: closing database connection pool...")
    try:
        await database.shutdown_db_async()
        logger.info("Cleanup complete.")
    except Exception as e:
        logger.error("Error during shutdown cleanup: %s", e)


# ---------------------------------------------------------------------------
# FastAPI Application
# ---------------------------------------------------------------------------
app = FastAPI(
    title="Reminders",
    version="1.0.0",
    lifespan=lifespan,
)

app.add_middleware(RequestLoggingMiddleware)


@app.get("/", tags=["Health"])
async def root():
    """Basic health check to verify the service is running."""
    from reminder_app.features.reminders import is_service_running

    return {"status": "ok", "scheduler_running": is_service_running()}


app.include_router(router)
