from __future__ import annotations

import json
import logging
from functools import lru_cache
from typing import Iterable

from django.conf import settings
from django.core.serializers.json import DjangoJSONEncoder
from redis import Redis
from redis.exceptions import RedisError

logger = logging.getLogger(__name__)


@lru_cache(maxsize=1)
def get_redis_client() -> Redis:
    url = getattr(settings, "PUBSUB_REDIS_URL", "redis://localhost:6379/1")
    return Redis.from_url(url)


def user_channel(user_id: int) -> str:
    return f"user:{user_id}"


def publish_event(channel: str, payload: dict) -> bool:
    try:
        client = get_redis_client()
        client.publish(channel, json.dumps(payload, cls=DjangoJSONEncoder))
        return True
    except RedisError as exc:
        logger.warning("pubsub.publish_failed channel=%s error=%s", channel, exc)
        return False


def publish_events(channels: Iterable[str], payload: dict) -> int:
    delivered = 0
    for channel in dict.fromkeys(channels):
        if publish_event(channel, payload):
            delivered += 1
    return delivered
