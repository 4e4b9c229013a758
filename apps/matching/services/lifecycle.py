from __future__ import annotations

import logging
from typing import Optional

from django.db import IntegrityError, transaction

from apps.core.errors import FailedPrecondition, InvalidArgument, NotFoundError, PermissionDeniedError
from apps.users.models import User
from apps.users.services import require_user_id
from libs.idgen import parse_id

from ..models import Match, MatchParticipant

logger = logging.getLogger(__name__)

ACTIVE_MATCH_EXISTS = "User already has an active match."


def _has_active_match(user_id: int) -> bool:
    return MatchParticipant.objects.filter(
        user_id=user_id, is_active=True, match__state=Match.State.ACTIVE
    ).exists()


def get_match(match_id: object) -> Match:
    if match_id in (None, ""):
        raise InvalidArgument("matchId is required.")
    pk = parse_id(match_id)
    if pk is None:
        raise NotFoundError("Match not found.")
    try:
        return Match.objects.prefetch_related("participants").get(pk=pk)
    except Match.DoesNotExist:
        raise NotFoundError("Match not found.") from None


def create_or_queue_match(user_a: object, user_b: object, score: Optional[float] = None) -> Match:
    """
    Open an active match between two users who have none.

    The check and the write share one transaction: both user rows are locked in
    id order before the active-match lookup, and the partial unique index on
    active participations rejects any writer that still slips through.
    """
    user_a_id = require_user_id(user_a, "userA")
    user_b_id = require_user_id(user_b, "userB")
    if user_a_id == user_b_id:
        raise InvalidArgument("A user cannot be matched with themselves.")

    with transaction.atomic():
        locked = list(
            User.objects.select_for_update().filter(pk__in=[user_a_id, user_b_id]).order_by("pk")
        )
        if len(locked) != 2:
            raise NotFoundError("User not found.")
        for user_id in (user_a_id, user_b_id):
            if _has_active_match(user_id):
                logger.info("match.create_blocked", extra={"user_id": user_id})
                raise FailedPrecondition(ACTIVE_MATCH_EXISTS)

        match = Match.objects.create(
            state=Match.State.ACTIVE,
            opened_by_id=user_a_id,
            score=float(score) if score is not None else None,
            last_message_at=None,
        )
        try:
            with transaction.atomic():
                MatchParticipant.objects.bulk_create(
                    [
                        MatchParticipant(match=match, user_id=user_a_id, position=0),
                        MatchParticipant(match=match, user_id=user_b_id, position=1),
                    ]
                )
        except IntegrityError:
            logger.warning("match.create_conflict", extra={"user_a": user_a_id, "user_b": user_b_id})
            raise FailedPrecondition(ACTIVE_MATCH_EXISTS) from None

    logger.info("match.created", extra={"match_id": match.id, "user_a": user_a_id, "user_b": user_b_id})
    return match


def get_active_match(user_id: object) -> Optional[Match]:
    uid = require_user_id(user_id)
    return (
        Match.objects.filter(
            state=Match.State.ACTIVE,
            participants__user_id=uid,
            participants__is_active=True,
        )
        .prefetch_related("participants")
        .first()
    )


def close_match(*, caller: User, match_id: object, reason: Optional[str] = None) -> Match:
    """Close a match. Closing an already closed match rewrites the same terminal state."""
    match = get_match(match_id)
    if not match.has_user(caller.pk):
        raise PermissionDeniedError("You are not part of this match.")

    with transaction.atomic():
        match.state = Match.State.CLOSED
        match.closed_by = caller
        match.close_reason = reason or None
        match.save(update_fields=["state", "closed_by", "close_reason", "updated_at"])
        MatchParticipant.objects.filter(match=match).update(is_active=False)

    logger.info("match.closed", extra={"match_id": match.id, "closed_by": caller.pk})
    return match
