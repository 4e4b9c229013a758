from __future__ import annotations

import logging
from typing import Iterable

from django.utils import timezone

from apps.core.errors import InvalidArgument, NotFoundError, PermissionDeniedError
from libs.idgen import parse_id

from .models import User

logger = logging.getLogger(__name__)


def require_user_id(value: object, field: str = "userId") -> int:
    if value in (None, ""):
        raise InvalidArgument(f"{field} is required.")
    user_id = parse_id(value)
    if user_id is None:
        raise NotFoundError("User not found.")
    return user_id


def get_user(value: object, field: str = "userId") -> User:
    user_id = require_user_id(value, field)
    try:
        return User.objects.get(pk=user_id)
    except User.DoesNotExist:
        raise NotFoundError("User not found.") from None


def get_users(values: Iterable[object], field: str = "userId") -> list[User]:
    ids = [require_user_id(value, field) for value in values]
    found = User.objects.in_bulk(ids)
    missing = [user_id for user_id in ids if user_id not in found]
    if missing:
        raise NotFoundError("User not found.")
    return [found[user_id] for user_id in ids]


def store_embedding(*, caller: User, user_id: object, vector: list[float]) -> None:
    """Overwrite a user's embedding verbatim."""
    target_id = require_user_id(user_id)
    if caller.pk != target_id and not caller.is_staff:
        raise PermissionDeniedError("Cannot store an embedding for another user.")
    updated = User.objects.filter(pk=target_id).update(embedding=list(vector), updated_at=timezone.now())
    if not updated:
        raise NotFoundError("User not found.")
    logger.info("embedding.stored", extra={"user_id": target_id, "dimensions": len(vector)})
