"""
Reminder Lifecycle Manager: creates, edits and deletes reminders and keeps the
notification scheduler in step with the store.

This is the only component that talks to the notification scheduler. Scheduler
problems never abort an operation; they come back as warnings on the
``ReminderOutcome``.
"""
import asyncio
import logging
import uuid
from dataclasses import dataclass, field
from datetime import datetime
from typing import Callable, List, Optional, Tuple, Union
from zoneinfo import ZoneInfo

from reminder_app.errors import (
    EmptyTitleError,
    PersistenceFailure,
    ReminderError,
    ReminderNotFoundError,
    SchedulerFailure,
)
from reminder_app.features.reminders.notifier import NotificationContent, NotificationScheduler
from reminder_app.features.reminders.store import ReminderStore
from reminder_app.features.reminders.triggers import compute_trigger
from reminder_app.schemas import Category, Reminder, Repeat

logger = logging.getLogger("reminder_app.manager")


@dataclass
class ReminderOutcome:
    reminder: Reminder
    warnings: List[ReminderError] = field(default_factory=list)


def _new_id() -> str:
    return uuid.uuid4().hex


def _validate_title(title: Optional[str]) -> str:
    if title is None or not str(title).strip():
        raise EmptyTitleError(title)
    return title


def notification_content(reminder: Reminder) -> NotificationContent:
    return NotificationContent(
        title=reminder.title,
        body=f"{reminder.category.value} - Reminder",
        reminder_id=reminder.id,
    )


class ReminderManager:
    def __init__(
        self,
        store: ReminderStore,
        scheduler: NotificationScheduler,
        *,
        reschedule_on_edit: bool = False,
        timezone: Optional[str] = None,
        id_factory: Callable[[], str] = _new_id,
    ):
        self._store = store
        self._scheduler = scheduler
        self._reschedule_on_edit = reschedule_on_edit
        self._timezone = timezone
        self._id_factory = id_factory
        self._lock = asyncio.Lock()

    # --- Queries -------------------------------------------------------------

    @property
    def reminders(self) -> Tuple[Reminder, ...]:
        return self._store.reminders

    def list(self, category: Optional[Union[Category, str]] = None) -> List[Reminder]:
        if category is None:
            return list(self._store.reminders)
        category = Category(category)
        return [r for r in self._store.reminders if r.category is category]

    def get(self, reminder_id: str) -> Reminder:
        reminder = self._store.get(reminder_id)
        if reminder is None:
            raise ReminderNotFoundError(reminder_id)
        return reminder

    # --- Scheduler helpers ---------------------------------------------------

    async def _schedule(self, reminder: Reminder, warnings: List[ReminderError]) -> Optional[str]:
        trigger = compute_trigger(reminder.repeat, reminder.occurs_at, self._timezone)
        try:
            return await self._scheduler.schedule(notification_content(reminder), trigger)
        except SchedulerFailure as e:
            logger.warning("Scheduling failed for reminder %s: %s", reminder.id, e)
            warnings.append(e)
            return None

    async def _cancel_quietly(self, handle: Optional[str], warnings: List[ReminderError]) -> None:
        if not handle:
            return
        try:
            await self._scheduler.cancel(handle)
        except SchedulerFailure as e:
            logger.warning("Cancelling notification %s failed: %s", handle, e)
            warnings.append(e)

    def _unique_id(self) -> str:
        existing = self._store.ids()
        while True:
            reminder_id = self._id_factory()
            if reminder_id not in existing:
                return reminder_id
            logger.debug("Generated id %s already in use, retrying", reminder_id)

    # --- Mutations -----------------------------------------------------------

    async def create(
        self,
        title: str,
        category: Union[Category, str] = Category.personal,
        repeat: Union[Repeat, str] = Repeat.none,
        occurs_at: Optional[datetime] = None,
    ) -> ReminderOutcome:
        _validate_title(title)
        if occurs_at is None:
            occurs_at = _now_wall_clock(self._timezone)

        async with self._lock:
            warnings: List[ReminderError] = []
            reminder = Reminder(
                id=self._unique_id(),
                title=title,
                category=Category(category),
                occurs_at=occurs_at,
                repeat=Repeat(repeat),
            )
            handle = await self._schedule(reminder, warnings)
            reminder = reminder.model_copy(update={"schedule_handle": handle})

            try:
                await self._store.replace_all((reminder,) + self._store.reminders)
            except PersistenceFailure:
                await self._cancel_quietly(handle, warnings)
                raise

            logger.info("Created reminder %s (%s, %s)", reminder.id, reminder.category.value, reminder.repeat.value)
            return ReminderOutcome(reminder, warnings)

    async def edit(
        self,
        reminder_id: str,
        title: str,
        category: Union[Category, str],
        repeat: Union[Repeat, str],
        occurs_at: datetime,
    ) -> ReminderOutcome:
        async with self._lock:
            current = self.get(reminder_id)
            _validate_title(title)

            warnings: List[ReminderError] = []
            updated = current.model_copy(
                update={
                    "title": title,
                    "category": Category(category),
                    "repeat": Repeat(repeat),
                    "occurs_at": occurs_at,
                }
            )

            # By default the existing notification is left as scheduled, even if
            # the time or cadence changed. REMINDER_RESCHEDULE_ON_EDIT opts in to
            # replacing it.
            old_handle = current.schedule_handle
            if self._reschedule_on_edit:
                new_handle = await self._schedule(updated, warnings)
                updated = updated.model_copy(update={"schedule_handle": new_handle})

            new_list = tuple(updated if r.id == reminder_id else r for r in self._store.reminders)
            try:
                await self._store.replace_all(new_list)
            except PersistenceFailure:
                if self._reschedule_on_edit:
                    await self._cancel_quietly(updated.schedule_handle, warnings)
                raise

            if self._reschedule_on_edit:
                await self._cancel_quietly(old_handle, warnings)

            logger.info("Updated reminder %s", reminder_id)
            return ReminderOutcome(updated, warnings)

    async def delete(self, reminder_id: str) -> ReminderOutcome:
        async with self._lock:
            current = self.get(reminder_id)
            warnings: List[ReminderError] = []

            await self._cancel_quietly(current.schedule_handle, warnings)
            await self._store.replace_all(r for r in self._store.reminders if r.id != reminder_id)

            logger.info("Deleted reminder %s", reminder_id)
            return ReminderOutcome(current, warnings)

    async def restore_schedules(self, now: Optional[datetime] = None) -> List[ReminderError]:
        """Re-arm notifications after a restart.

        Live handles are kept. One-shot reminders whose time has passed lose
        their handle; everything else is scheduled again.

        Scheduled notifications are only kept when the updated list could be
        saved; on a write failure the new jobs are cancelled again and the
        failure is returned with the other warnings.
        """
        now = now or datetime.now().astimezone()
        async with self._lock:
            warnings: List[ReminderError] = []
            new_handles: List[str] = []
            restored = []
            for r in self._store.reminders:
                if r.schedule_handle and await self._scheduler.is_scheduled(r.schedule_handle):
                    restored.append(r)
                    continue

                if r.repeat is Repeat.none and _is_past(r.occurs_at, now, self._timezone):
                    handle = None
                else:
                    handle = await self._schedule(r, warnings)
                    if handle:
                        new_handles.append(handle)

                if handle != r.schedule_handle:
                    r = r.model_copy(update={"schedule_handle": handle})
                restored.append(r)

            if tuple(restored) == self._store.reminders:
                return warnings

            try:
                await self._store.replace_all(restored)
            except PersistenceFailure as e:
                logger.error("Could not save restored schedules, notifications stay off until next start: %s", e)
                for handle in new_handles:
                    await self._cancel_quietly(handle, warnings)
                warnings.append(e)
                return warnings

            logger.info("Restored schedules for %d reminder(s)", len(restored))
            return warnings


def _now_wall_clock(timezone: Optional[str]) -> datetime:
    if timezone:
        return datetime.now(ZoneInfo(timezone)).replace(tzinfo=None)
    return datetime.now()


def _aware(dt: datetime, timezone: Optional[str]) -> datetime:
    """Naive datetimes are wall-clock time in the scheduler zone."""
    if dt.tzinfo is not None:
        return dt
    if timezone:
        return dt.replace(tzinfo=ZoneInfo(timezone))
    return dt.astimezone()


def _is_past(occurs_at: datetime, now: datetime, timezone: Optional[str] = None) -> bool:
    return _aware(occurs_at, timezone) <= _aware(now, timezone)
