"""
Reminder Service: builds the store, notification scheduler and lifecycle
manager at startup and tears them down at shutdown.
"""
import logging
from typing import Optional

from reminder_app.config import get_settings
from reminder_app.features.reminders.manager import ReminderManager
from reminder_app.features.reminders.notifier import APSchedulerNotifier
from reminder_app.features.reminders.permissions import (
    PermissionStatus,
    permission_warning,
    request_notification_permission,
)
from reminder_app.features.reminders.store import DatabaseKeyValueStore, ReminderStore

logger = logging.getLogger("reminder_app.service")

# Global service state
_manager: Optional[ReminderManager] = None
_notifier: Optional[APSchedulerNotifier] = None
_permission: Optional[PermissionStatus] = None


async def start_reminder_service() -> ReminderManager:
    """Ask for notification permission, load reminders and re-arm their notifications."""
    global _manager, _notifier, _permission

    if _manager is not None:
        logger.warning("Reminder service already running")
        return _manager

    settings = get_settings()

    _permission = await request_notification_permission(settings)
    permission_warning(_permission)

    _notifier = APSchedulerNotifier(
        timezone=settings.scheduler_timezone,
        jobstore_url=settings.scheduler_jobstore_url,
        misfire_grace_seconds=settings.scheduler_misfire_grace_seconds,
    )
    _notifier.start()

    store = ReminderStore(DatabaseKeyValueStore(), key=settings.reminder_storage_key)
    await store.load()

    manager = ReminderManager(
        store,
        _notifier,
        reschedule_on_edit=settings.reminder_reschedule_on_edit,
        timezone=settings.scheduler_timezone,
    )
    warnings = await manager.restore_schedules()
    if warnings:
        logger.warning("%d notification(s) could not be restored", len(warnings))

    _manager = manager
    logger.info("Reminder service started with %d reminder(s)", len(store))
    return _manager


async def stop_reminder_service() -> None:
    global _manager, _notifier

    if _manager is None:
        logger.warning("Reminder service not running")
        return

    if _notifier is not None:
        _notifier.shutdown()
    _notifier = None
    _manager = None
    logger.info("Reminder service stopped")


def is_service_running() -> bool:
    return _manager is not None and _notifier is not None and _notifier.running


def get_manager() -> ReminderManager:
    if _manager is None:
        raise RuntimeError("Reminder service is not running")
    return _manager


def get_permission_status() -> PermissionStatus:
    return _permission or PermissionStatus.denied
