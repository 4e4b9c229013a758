from __future__ import annotations

import logging

from celery import shared_task

from apps.messaging.models import Message

from .services import dispatch_notification, new_message_payload

logger = logging.getLogger(__name__)


@shared_task
def notify_match_message(recipient_id: int, match_id: int, message_id: int) -> int:
    try:
        message = Message.objects.get(id=message_id)
    except Message.DoesNotExist:
        return 0
    payload = new_message_payload(match_id=match_id, message_id=message_id, text=message.text)
    try:
        return dispatch_notification(recipient_id, payload)
    except Exception:
        logger.exception("push.failed", extra={"user_id": recipient_id, "message_id": message_id})
        return 0
