"""
Notification scheduler backed by APScheduler.

Each scheduled notification is one APScheduler job; the job id is the handle
handed back to the lifecycle manager.
"""
import logging
import uuid
from dataclasses import dataclass
from typing import Callable, Optional, Protocol

import httpx
from apscheduler.jobstores.base import JobLookupError
from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.cron import CronTrigger
from apscheduler.triggers.date import DateTrigger

from reminder_app.errors import SchedulerFailure
from reminder_app.features.reminders.triggers import (
    DailyTrigger,
    OneShotTrigger,
    SchedulerTrigger,
    WeeklyTrigger,
)
from reminder_app.utils.push import deliver_notification

logger = logging.getLogger("reminder_app.notifier")

# ISO weekday 1..7 → cron day names
_CRON_DAYS = ("mon", "tue", "wed", "thu", "fri", "sat", "sun")


@dataclass(frozen=True)
class NotificationContent:
    title: str
    body: str
    reminder_id: Optional[str] = None


class NotificationScheduler(Protocol):
    async def schedule(self, content: NotificationContent, trigger: SchedulerTrigger) -> str: ...

    async def cancel(self, handle: str) -> None: ...

    async def is_scheduled(self, handle: str) -> bool: ...


def to_apscheduler_trigger(trigger: SchedulerTrigger, timezone: Optional[str] = None):
    if isinstance(trigger, OneShotTrigger):
        return DateTrigger(run_date=trigger.at, timezone=timezone)
    if isinstance(trigger, DailyTrigger):
        return CronTrigger(hour=trigger.hour, minute=trigger.minute, timezone=timezone)
    if isinstance(trigger, WeeklyTrigger):
        if not 1 <= trigger.weekday <= 7:
            raise ValueError(f"weekday must be 1..7, got {trigger.weekday}")
        return CronTrigger(
            day_of_week=_CRON_DAYS[trigger.weekday - 1],
            hour=trigger.hour,
            minute=trigger.minute,
            timezone=timezone,
        )
    raise TypeError(f"Unsupported trigger: {trigger!r}")


async def fire_notification(title: str, body: str, reminder_id: Optional[str] = None) -> None:
    """Job target. Module level so persistent job stores can reference it."""
    try:
        await deliver_notification(title, body, reminder_id)
    except httpx.HTTPError as e:
        logger.error("Failed to deliver notification for reminder %s: %s", reminder_id, e)


class APSchedulerNotifier:
    def __init__(
        self,
        scheduler: Optional[AsyncIOScheduler] = None,
        *,
        timezone: Optional[str] = None,
        jobstore_url: Optional[str] = None,
        misfire_grace_seconds: int = 60,
        func: Callable = fire_notification,
    ):
        if scheduler is None:
            kwargs = {}
            if timezone:
                kwargs["timezone"] = timezone
            if jobstore_url:
                from apscheduler.jobstores.sqlalchemy import SQLAlchemyJobStore

                kwargs["jobstores"] = {"default": SQLAlchemyJobStore(url=jobstore_url)}
            scheduler = AsyncIOScheduler(**kwargs)
        self._scheduler = scheduler
        self._timezone = timezone
        self._misfire_grace_seconds = misfire_grace_seconds
        self._func = func

    @property
    def running(self) -> bool:
        return self._scheduler.running

    def start(self, paused: bool = False) -> None:
        if self._scheduler.running:
            logger.warning("Notification scheduler already running")
            return
        self._scheduler.start(paused=paused)
        logger.info("Notification scheduler started")

    def shutdown(self) -> None:
        if not self._scheduler.running:
            return
        self._scheduler.shutdown(wait=False)
        logger.info("Notification scheduler stopped")

    async def schedule(self, content: NotificationContent, trigger: SchedulerTrigger) -> str:
        handle = uuid.uuid4().hex
        try:
            self._scheduler.add_job(
                self._func,
                trigger=to_apscheduler_trigger(trigger, self._timezone),
                args=[content.title, content.body, content.reminder_id],
                id=handle,
                name=f"reminder:{content.reminder_id}",
                misfire_grace_time=self._misfire_grace_seconds,
                coalesce=True,
            )
        except Exception as e:
            raise SchedulerFailure(f"Could not schedule notification for reminder {content.reminder_id}: {e}") from e
        logger.debug("Scheduled job %s for reminder %s (%s)", handle, content.reminder_id, trigger)
        return handle

    async def cancel(self, handle: str) -> None:
        try:
            self._scheduler.remove_job(handle)
        except JobLookupError:
            # Already fired or cancelled
            logger.debug("Job %s not found, nothing to cancel", handle)
            return
        except Exception as e:
            raise SchedulerFailure(f"Could not cancel notification {handle}: {e}") from e
        logger.debug("Cancelled job %s", handle)

    async def is_scheduled(self, handle: str) -> bool:
        return self._scheduler.get_job(handle) is not None
