import logging
from typing import Any, Dict, Optional, cast

from dotenv import load_dotenv
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import AsyncEngine, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

from reminder_app.config import get_settings

load_dotenv()
logger = logging.getLogger("reminder_app.database")

# ---------------------------------------------------------------------------
# Engine state (created lazily by init_db_async)
# ---------------------------------------------------------------------------

async_engine: Optional[AsyncEngine] = None
AsyncSessionLocal: Optional[async_sessionmaker] = None
_CURRENT_DB_URL: Optional[str] = None


def _detect_driver(url: str) -> str:
    try:
        return make_url(url).drivername
    except Exception:
        return url.split(":", 1)[0]


def _make_engine(url: Optional[str] = None) -> AsyncEngine:
    global _CURRENT_DB_URL

    url = (url or get_settings().database_url or "").strip()
    if not url:
        raise RuntimeError("DATABASE_URL is required")

    driver = _detect_driver(url)
    engine_kwargs: Dict[str, Any] = {"echo": False, "future": True}
    if driver.startswith("sqlite"):
        # aiosqlite connections are bound to the loop that opened them
        engine_kwargs["poolclass"] = NullPool
    else:
        engine_kwargs["pool_pre_ping"] = True
        engine_kwargs["pool_size"] = 5
        engine_kwargs["max_overflow"] = 5

    _CURRENT_DB_URL = url
    return create_async_engine(url, **engine_kwargs)


# ---------------------------------------------------------------------------
# Utilities
# ---------------------------------------------------------------------------

def get_database_dsn(hide_password: bool = True) -> str:
    """Return the configured DB DSN string."""
    url_str = _CURRENT_DB_URL or ""
    try:
        url = make_url(cast(str, url_str))
        return url.render_as_string(hide_password=hide_password)
    except Exception:
        return url_str


async def init_db_async(url: Optional[str] = None) -> None:
    """Create the engine and the key-value table."""
    from reminder_app.models import models

    global async_engine, AsyncSessionLocal

    if async_engine is not None:
        await async_engine.dispose()

    try:
        async_engine = _make_engine(url)
        AsyncSessionLocal = async_sessionmaker(bind=async_engine, expire_on_commit=False)
        async with async_engine.begin() as conn:
            await conn.run_sync(models.Base.metadata.create_all)
        logger.info("Database initialized successfully.")
    except Exception as e:
        logger.critical("Database initialization failed: %s", e)
        raise RuntimeError("Failed to initialize database") from e


async def shutdown_db_async() -> None:
    """Dispose the async engine cleanly."""
    global async_engine, AsyncSessionLocal

    if async_engine is None:
        return
    try:
        await async_engine.dispose()
        logger.info("Database connection pool closed.")
    except Exception as e:
        logger.error("Error shutting down database engine: %s", e)
        raise
    finally:
        async_engine = None
        AsyncSessionLocal = None
