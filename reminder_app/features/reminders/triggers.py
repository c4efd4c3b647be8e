"""
Trigger computation: maps a reminder's repeat cadence and anchor time to the
description the notification scheduler understands.

Weekdays use ISO numbering (1 = Monday ... 7 = Sunday), as returned by
``datetime.isoweekday()``.
"""
from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Union
from zoneinfo import ZoneInfo

from reminder_app.schemas import Repeat


@dataclass(frozen=True)
class OneShotTrigger:
    at: datetime
    repeats: bool = False


@dataclass(frozen=True)
class DailyTrigger:
    hour: int
    minute: int
    repeats: bool = True


@dataclass(frozen=True)
class WeeklyTrigger:
    weekday: int  # ISO: 1 = Monday, 7 = Sunday
    hour: int
    minute: int
    repeats: bool = True


SchedulerTrigger = Union[OneShotTrigger, DailyTrigger, WeeklyTrigger]


def _wall_clock(dt: datetime, timezone: Optional[str] = None) -> datetime:
    """Aware datetimes are read in the scheduler zone (host zone when unset).

    Naive datetimes are already wall-clock time in that zone.
    """
    if dt.tzinfo is None:
        return dt
    if timezone:
        return dt.astimezone(ZoneInfo(timezone)).replace(tzinfo=None)
    return dt.astimezone().replace(tzinfo=None)


def compute_trigger(repeat: Repeat, occurs_at: datetime, timezone: Optional[str] = None) -> SchedulerTrigger:
    repeat = Repeat(repeat)
    if repeat is Repeat.none:
        return OneShotTrigger(at=occurs_at)

    local = _wall_clock(occurs_at, timezone)
    if repeat is Repeat.daily:
        return DailyTrigger(hour=local.hour, minute=local.minute)
    return WeeklyTrigger(weekday=local.isoweekday(), hour=local.hour, minute=local.minute)
