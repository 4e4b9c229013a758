from __future__ import annotations

import logging
from dataclasses import dataclass

from apps.notifications.models import Notification
from apps.users.models import User

from .push import PushError, send_multicast

logger = logging.getLogger(__name__)

NEW_MESSAGE_TITLE = "הודעה חדשה"
PREVIEW_LENGTH = 80


@dataclass
class NotificationPayload:
    type: str
    title: str
    body: str
    data: dict

    def as_payload(self) -> dict:
        return {"title": self.title, "body": self.body, **self.data}


def create_in_app_notification(user: User, payload: NotificationPayload) -> Notification:
    return Notification.objects.create(user=user, type=payload.type, payload=payload.as_payload())


def push_tokens_for(user: User) -> list[str]:
    return [device.push_token for device in user.devices.all() if device.push_token]


def dispatch_notification(user_id: int, payload: NotificationPayload) -> int:
    """
    Record an in-app notification for ``user_id`` and push it to their devices.

    Returns the number of devices the gateway accepted. A user without devices,
    or a gateway failure, yields 0 rather than an error.
    """
    user = User.objects.prefetch_related("devices").filter(pk=user_id).first()
    if user is None:
        logger.info("push.skipped", extra={"user_id": user_id, "reason": "missing_user"})
        return 0
    create_in_app_notification(user, payload)

    tokens = push_tokens_for(user)
    if not tokens:
        return 0
    try:
        result = send_multicast(tokens, payload.title, payload.body, payload.data)
    except PushError as exc:
        logger.warning("push.failed", extra={"user_id": user_id, "devices": len(tokens), "error": str(exc)})
        return 0
    logger.info(
        "push.sent",
        extra={"user_id": user_id, "devices": len(tokens), "delivered": result.success_count},
    )
    return result.success_count


def message_preview(text: str | None) -> str:
    return text[:PREVIEW_LENGTH] if text else NEW_MESSAGE_TITLE


def new_message_payload(*, match_id: int, message_id: int, text: str | None) -> NotificationPayload:
    return NotificationPayload(
        type="message:new",
        title=NEW_MESSAGE_TITLE,
        body=message_preview(text),
        data={"matchId": str(match_id), "messageId": str(message_id)},
    )
