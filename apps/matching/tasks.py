from __future__ import annotations

import logging

from celery import shared_task
from django.db import transaction

from .models import ConversationStarter, Match
from .services.starters import extract_shared_interests, opening_lines

logger = logging.getLogger(__name__)


def create_starters(match: Match) -> list[ConversationStarter]:
    user_ids = match.user_ids
    if len(user_ids) != 2:
        return []
    shared = extract_shared_interests(*user_ids)
    with transaction.atomic():
        locked = Match.objects.select_for_update().get(pk=match.pk)
        if locked.starters.exists():
            return list(locked.starters.all())
        starters = ConversationStarter.objects.bulk_create(
            [ConversationStarter(match=locked, text=text) for text in opening_lines(shared)]
        )
    logger.info("starters.created", extra={"match_id": match.pk, "shared": len(shared)})
    return starters


@shared_task
def generate_conversation_starters(match_id: int) -> int:
    """Attach opening lines to a new match. Failures are logged and never retried."""
    try:
        match = Match.objects.prefetch_related("participants").get(pk=match_id)
    except Match.DoesNotExist:
        logger.warning("starters.failed", extra={"match_id": match_id, "reason": "missing_match"})
        return 0
    try:
        return len(create_starters(match))
    except Exception:
        logger.exception("starters.failed", extra={"match_id": match_id})
        return 0
