"""
Reminder feature module: reminder lifecycle and local notification scheduling
"""
from .service import (
    get_manager,
    get_permission_status,
    is_service_running,
    start_reminder_service,
    stop_reminder_service,
)

__all__ = [
    "get_manager",
    "get_permission_status",
    "is_service_running",
    "start_reminder_service",
    "stop_reminder_service",
]
