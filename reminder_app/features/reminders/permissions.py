"""
Permission check for notifications, asked once at startup.

A denial is logged and reported through the API but never blocks reminder
operations: reminders are still saved and scheduled.
"""
import logging
from enum import Enum
from typing import Optional

from reminder_app.config import Settings, get_settings
from reminder_app.errors import PermissionDenied

logger = logging.getLogger("reminder_app.permissions")


class PermissionStatus(str, Enum):
    granted = "granted"
    denied = "denied"


async def request_notification_permission(settings: Optional[Settings] = None) -> PermissionStatus:
    settings = settings or get_settings()
    raw = (settings.notification_permission or "").strip().lower()
    if raw == PermissionStatus.granted.value:
        return PermissionStatus.granted
    if raw != PermissionStatus.denied.value:
        logger.warning("Unknown NOTIFICATION_PERMISSION value %r, treating as denied", raw)
    return PermissionStatus.denied


def permission_warning(status: PermissionStatus) -> Optional[PermissionDenied]:
    """Denial is reported, never raised: reminders still work without alerts."""
    if status is PermissionStatus.granted:
        return None
    warning = PermissionDenied(status.value)
    logger.warning("%s; reminders will be saved but notifications may not appear", warning)
    return warning
