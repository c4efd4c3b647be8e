import logging
from typing import Optional

from reminder_app import database
from reminder_app.models import models as db

logger = logging.getLogger("reminder_app.crud")


def _session():
    if database.AsyncSessionLocal is None:
        raise RuntimeError("Database not initialized; call init_db_async() first")
    return database.AsyncSessionLocal()


# --- Key-value operations ----------------------------------------------------

async def get_value(key: str) -> Optional[str]:
    async with _session() as dbs:
        row = await dbs.get(db.KeyValue, key)
        if row is None:
            logger.debug("No value stored under key %s", key)
            return None
        return row.value


async def set_value(key: str, value: str) -> None:
    async with _session() as dbs:
        row = await dbs.get(db.KeyValue, key)
        if row is None:
            dbs.add(db.KeyValue(key=key, value=value))
        else:
            row.value = value
        await dbs.commit()
        logger.debug("Stored %d bytes under key %s", len(value), key)

