from __future__ import annotations

from rest_framework import serializers

from .models import Message


class MessageSerializer(serializers.ModelSerializer):
    messageId = serializers.CharField(source="id", read_only=True)
    matchId = serializers.CharField(source="match_id", read_only=True)
    # "from" is a keyword, so the field is renamed in to_representation
    sender = serializers.CharField(source="sender_id", read_only=True)
    createdAt = serializers.DateTimeField(source="created_at", read_only=True)

    class Meta:
        model = Message
        fields = ["messageId", "matchId", "sender", "text", "status", "moderation", "createdAt"]
        read_only_fields = fields

    def to_representation(self, instance: Message) -> dict:
        data = super().to_representation(instance)
        data["from"] = data.pop("sender")
        return data
