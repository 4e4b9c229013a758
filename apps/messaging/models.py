from __future__ import annotations

from django.db import models

from apps.core.models import BaseModel


class Message(BaseModel):
    class Status(models.TextChoices):
        SENT = "sent", "Sent"
        DELIVERED = "delivered", "Delivered"
        READ = "read", "Read"

    match = models.ForeignKey("matching.Match", on_delete=models.CASCADE, related_name="messages")
    sender = models.ForeignKey("users.User", on_delete=models.CASCADE, related_name="sent_messages")
    text = models.TextField()
    status = models.CharField(max_length=16, choices=Status.choices, default=Status.SENT)
    moderation = models.JSONField(default=dict, blank=True)

    class Meta:
        ordering = ["created_at", "id"]
        indexes = [
            models.Index(fields=["match", "created_at"], name="messaging_match_created_idx"),
        ]

    def __str__(self) -> str:  # pragma: no cover - debug helper
        return f"Message<{self.id}:{self.match_id}>"
