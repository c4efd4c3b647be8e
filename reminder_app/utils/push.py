import logging
from datetime import datetime, timezone
from typing import Any, Dict, Optional

import httpx

from reminder_app.config import get_settings

logger = logging.getLogger("reminder_app.push")


async def deliver_notification(
    title: str,
    body: str,
    reminder_id: Optional[str] = None,
    *,
    push_url: Optional[str] = None,
    token: Optional[str] = None,
) -> bool:
    """Deliver a fired notification.

    POSTs to the configured push URL, or only logs when none is set.
    Returns True when the notification went out over HTTP.
    """
    settings = get_settings()
    push_url = push_url or settings.notification_push_url
    token = token or settings.notification_push_token

    if not push_url:
        logger.info("Reminder fired: %s (%s)", title, body)
        return False

    headers = {"Content-Type": "application/json"}
    if token:
        headers["Authorization"] = f"Bearer {token}"

    payload = _notification_payload(title, body, reminder_id)
    async with httpx.AsyncClient(timeout=settings.notification_push_timeout) as client:
        resp = await client.post(push_url, json=payload, headers=headers)
        resp.raise_for_status()
    logger.info("Notification pushed for reminder %s (%s)", reminder_id, resp.status_code)
    return True


def _notification_payload(title: str, body: str, reminder_id: Optional[str]) -> Dict[str, Any]:
    settings = get_settings()
    return {
        "title": title,
        "body": body,
        "data": {"reminder_id": reminder_id},
        "fired_at": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
        "show_alert": settings.notify_show_alert,
        "play_sound": settings.notify_play_sound,
        "set_badge": settings.notify_set_badge,
    }
