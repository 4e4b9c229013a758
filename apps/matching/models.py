from __future__ import annotations

from django.db import models
from django.db.models import Q

from apps.core.models import BaseModel


class Match(BaseModel):
    class State(models.TextChoices):
        # pending is reserved for a queueing flow; this service only writes active/closed.
        PENDING = "pending", "Pending"
        ACTIVE = "active", "Active"
        CLOSED = "closed", "Closed"

    state = models.CharField(max_length=16, choices=State.choices, default=State.ACTIVE)
    opened_by = models.ForeignKey("users.User", on_delete=models.CASCADE, related_name="opened_matches")
    closed_by = models.ForeignKey(
        "users.User", on_delete=models.SET_NULL, related_name="closed_matches", null=True, blank=True
    )
    close_reason = models.CharField(max_length=255, null=True, blank=True)
    score = models.FloatField(null=True, blank=True)
    last_message_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["state", "-created_at"], name="matching_match_state_idx"),
        ]

    def __str__(self) -> str:  # pragma: no cover - debug helper
        return f"Match<{self.id}:{self.state}>"

    @property
    def user_ids(self) -> list[int]:
        return [participant.user_id for participant in self.participants.all()]

    def other_user_id(self, user_id: int) -> int | None:
        return next((uid for uid in self.user_ids if uid != user_id), None)

    def has_user(self, user_id: int) -> bool:
        return user_id in self.user_ids


class MatchParticipant(BaseModel):
    match = models.ForeignKey(Match, on_delete=models.CASCADE, related_name="participants")
    user = models.ForeignKey("users.User", on_delete=models.CASCADE, related_name="match_participations")
    position = models.PositiveSmallIntegerField()
    is_active = models.BooleanField(default=True)

    class Meta:
        ordering = ["position"]
        constraints = [
            models.UniqueConstraint(fields=["match", "user"], name="matching_participant_unique_user"),
            models.UniqueConstraint(fields=["match", "position"], name="matching_participant_unique_position"),
            models.UniqueConstraint(
                fields=["user"],
                condition=Q(is_active=True),
                name="matching_one_active_match_per_user",
            ),
        ]


class ConversationStarter(BaseModel):
    match = models.ForeignKey(Match, on_delete=models.CASCADE, related_name="starters")
    text = models.CharField(max_length=280)

    class Meta:
        ordering = ["created_at", "id"]
