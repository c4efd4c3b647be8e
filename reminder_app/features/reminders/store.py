"""
Reminder Store: the canonical ordered list of reminders, mirrored to a
key-value store under a single key.
"""
import logging
from typing import Iterable, List, Optional, Protocol, Tuple

from pydantic import TypeAdapter, ValidationError
from sqlalchemy.exc import SQLAlchemyError

from reminder_app import crud
from reminder_app.errors import PersistenceFailure
from reminder_app.schemas import Reminder

logger = logging.getLogger("reminder_app.store")

DEFAULT_STORAGE_KEY = "@reminders"

_reminder_list = TypeAdapter(List[Reminder])


class KeyValueStore(Protocol):
    async def get(self, key: str) -> Optional[str]: ...

    async def set(self, key: str, blob: str) -> None: ...


class DatabaseKeyValueStore:
    """Key-value store over the SQLAlchemy ``kv_store`` table."""

    async def get(self, key: str) -> Optional[str]:
        try:
            return await crud.get_value(key)
        except (SQLAlchemyError, OSError, RuntimeError) as e:
            raise PersistenceFailure(f"Could not read {key}: {e}") from e

    async def set(self, key: str, blob: str) -> None:
        try:
            await crud.set_value(key, blob)
        except (SQLAlchemyError, OSError, RuntimeError) as e:
            raise PersistenceFailure(f"Could not write {key}: {e}") from e


def serialize_reminders(reminders: Iterable[Reminder]) -> str:
    return _reminder_list.dump_json(list(reminders), by_alias=True).decode("utf-8")


def deserialize_reminders(blob: str) -> List[Reminder]:
    return _reminder_list.validate_json(blob)


def _first_of_each_id(reminders: Iterable[Reminder]) -> Tuple[Reminder, ...]:
    seen = set()
    kept = []
    for r in reminders:
        if r.id not in seen:
            seen.add(r.id)
            kept.append(r)
    return tuple(kept)


class ReminderStore:
    def __init__(self, kv: KeyValueStore, key: str = DEFAULT_STORAGE_KEY):
        self._kv = kv
        self._key = key
        self._reminders: Tuple[Reminder, ...] = ()

    @property
    def reminders(self) -> Tuple[Reminder, ...]:
        return self._reminders

    def get(self, reminder_id: str) -> Optional[Reminder]:
        for r in self._reminders:
            if r.id == reminder_id:
                return r
        return None

    def ids(self) -> set:
        return {r.id for r in self._reminders}

    def __len__(self) -> int:
        return len(self._reminders)

    async def load(self) -> Tuple[Reminder, ...]:
        """Read the persisted list. Any failure leaves the store empty."""
        try:
            blob = await self._kv.get(self._key)
        except PersistenceFailure as e:
            logger.warning("Could not read reminders, starting empty: %s", e)
            self._reminders = ()
            return self._reminders

        if not blob:
            self._reminders = ()
            return self._reminders

        try:
            loaded = deserialize_reminders(blob)
        except (ValidationError, ValueError) as e:
            logger.warning("Stored reminders are unreadable, starting empty: %s", e)
            self._reminders = ()
            return self._reminders

        self._reminders = _first_of_each_id(loaded)
        if len(self._reminders) != len(loaded):
            logger.warning("Dropped %d stored reminder(s) with a repeated id", len(loaded) - len(self._reminders))
        logger.info("Loaded %d reminder(s)", len(self._reminders))
        return self._reminders

    async def replace_all(self, reminders: Iterable[Reminder]) -> Tuple[Reminder, ...]:
        """Persist ``reminders`` then make them the in-memory list.

        Raises PersistenceFailure without touching the in-memory list when the
        write fails.
        """
        new = tuple(reminders)
        ids = [r.id for r in new]
        if len(ids) != len(set(ids)):
            raise ValueError("Reminder ids must be unique")

        await self._kv.set(self._key, serialize_reminders(new))
        self._reminders = new
        return self._reminders
