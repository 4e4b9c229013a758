from __future__ import annotations

import logging

from apps.core.pubsub import publish_events, user_channel

from .models import Message

logger = logging.getLogger(__name__)


def serialize_message(message: Message) -> dict:
    from .serializers import MessageSerializer

    return dict(MessageSerializer(message).data)


def publish_message_event(message: Message) -> int:
    payload = {
        "type": "message:new",
        "payload": serialize_message(message),
    }
    channels = [user_channel(user_id) for user_id in message.match.user_ids]
    if not channels:
        return 0
    return publish_events(channels, payload)


def enqueue_message_notification(message: Message) -> None:
    from apps.notifications.tasks import notify_match_message

    recipient_id = message.match.other_user_id(message.sender_id)
    if recipient_id is None:
        return
    try:
        notify_match_message.delay(recipient_id, message.match_id, message.pk)
    except Exception:
        logger.exception("push.enqueue_failed", extra={"message_id": message.pk})


def handle_message_created(message_id: int) -> None:
    try:
        message = Message.objects.select_related("match").get(pk=message_id)
    except Message.DoesNotExist:
        return
    try:
        publish_message_event(message)
    except Exception:
        logger.exception("message.publish_failed", extra={"message_id": message_id})
    enqueue_message_notification(message)
