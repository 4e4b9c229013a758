from __future__ import annotations

import logging

from django.conf import settings
from django.db import transaction
from django.utils import timezone

from apps.core.errors import FailedPrecondition, InvalidArgument, NotFoundError, PermissionDeniedError
from apps.matching.models import Match
from apps.moderation.engine import moderate_text
from apps.users.models import User
from libs.idgen import parse_id

from ..models import Message

logger = logging.getLogger(__name__)


def _load_match(match_id: object) -> Match:
    pk = parse_id(match_id)
    if pk is None:
        raise NotFoundError("Match not found.")
    try:
        return Match.objects.prefetch_related("participants").get(pk=pk)
    except Match.DoesNotExist:
        raise NotFoundError("Match not found.") from None


def store_message(*, caller: User, match_id: object, sender_id: object, text: str | None) -> Message:
    """
    Validate and persist a chat message.

    Checks run in a fixed order and the first failure wins, so a message from
    the wrong sender is refused before its text is ever moderated.
    """
    if match_id in (None, "") or sender_id in (None, "") or not isinstance(text, str) or not text:
        raise InvalidArgument("matchId, from and text are required.")
    if parse_id(sender_id) != caller.pk:
        raise PermissionDeniedError("Messages can only be sent as the signed-in user.")
    max_length = getattr(settings, "MESSAGE_MAX_LENGTH", 2000)
    if len(text) > max_length:
        raise InvalidArgument(f"Message exceeds {max_length} characters.")

    decision = moderate_text(text)
    if not decision.allowed:
        logger.info("message.rejected", extra={"match_id": match_id, "sender_id": caller.pk, "labels": decision.labels})
        raise FailedPrecondition("Message was blocked by the safety filter.")

    match = _load_match(match_id)
    if match.state != Match.State.ACTIVE:
        raise FailedPrecondition("Match is not active.")
    if not match.has_user(caller.pk):
        raise PermissionDeniedError("You are not part of this match.")

    now = timezone.now()
    with transaction.atomic():
        message = Message.objects.create(
            match=match,
            sender=caller,
            text=text,
            status=Message.Status.SENT,
            moderation=decision.as_dict(),
        )
        Match.objects.filter(pk=match.pk).update(last_message_at=now, updated_at=now)

    logger.info("message.stored", extra={"match_id": match.pk, "message_id": message.pk, "sender_id": caller.pk})
    return message
