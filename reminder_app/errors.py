"""
Reminder errors.

``EmptyTitleError``, ``ReminderNotFoundError`` and ``PersistenceFailure`` are
raised to the caller. ``SchedulerFailure`` and ``PermissionDenied`` are
non-fatal: the lifecycle manager and startup code catch them and hand them back
as warnings instead of aborting.
"""
from typing import Optional


class ReminderError(Exception):
    """Base class for all reminder errors."""


class EmptyTitleError(ReminderError):
    def __init__(self, title: Optional[str] = None):
        super().__init__("Reminder title must not be empty")
        self.title = title


class ReminderNotFoundError(ReminderError):
    def __init__(self, reminder_id: str):
        super().__init__(f"Reminder {reminder_id} not found")
        self.reminder_id = reminder_id


class PermissionDenied(ReminderError):
    def __init__(self, status: str = "denied"):
        super().__init__(f"Notification permission not granted (status={status})")
        self.status = status


class SchedulerFailure(ReminderError):
    """The notification scheduler failed to schedule or cancel."""


class PersistenceFailure(ReminderError):
    """Reading from or writing to the key-value store failed."""
