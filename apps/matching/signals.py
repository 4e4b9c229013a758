from __future__ import annotations

import logging

from django.db import transaction
from django.db.models.signals import post_save
from django.dispatch import receiver

from .models import Match
from .tasks import generate_conversation_starters

logger = logging.getLogger(__name__)


def enqueue_conversation_starters(match_id: int) -> None:
    try:
        generate_conversation_starters.delay(match_id)
    except Exception:
        logger.exception("starters.enqueue_failed", extra={"match_id": match_id})


@receiver(post_save, sender=Match)
def handle_match_created(sender, instance: Match, created: bool, **kwargs) -> None:
    if created:
        match_id = instance.pk
        transaction.on_commit(lambda: enqueue_conversation_starters(match_id))
