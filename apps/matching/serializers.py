from __future__ import annotations

from rest_framework import serializers

from apps.users.models import Gender

from .models import ConversationStarter, Match


class CandidateFiltersSerializer(serializers.Serializer):
    gender = serializers.ChoiceField(choices=Gender.choices, required=False, allow_null=True)
    ageMin = serializers.IntegerField(required=False, allow_null=True, min_value=0)
    ageMax = serializers.IntegerField(required=False, allow_null=True, min_value=0)
    maxDistanceKm = serializers.FloatField(required=False, allow_null=True, min_value=0)
    # clamped by the retrieval service rather than rejected
    limit = serializers.IntegerField(required=False, allow_null=True)


class CandidateQuerySerializer(serializers.Serializer):
    userId = serializers.CharField()
    filters = CandidateFiltersSerializer(required=False)


class CandidateRefSerializer(serializers.Serializer):
    userId = serializers.CharField()


class ScoreCandidateSerializer(serializers.Serializer):
    sourceUser = serializers.CharField()
    candidate = CandidateRefSerializer()


class CreateMatchSerializer(serializers.Serializer):
    userA = serializers.CharField()
    userB = serializers.CharField()
    score = serializers.FloatField(required=False, allow_null=True)


class CloseMatchSerializer(serializers.Serializer):
    reason = serializers.CharField(required=False, allow_blank=True, allow_null=True, max_length=255)


class UserPairSerializer(serializers.Serializer):
    userA = serializers.CharField()
    userB = serializers.CharField()


class EmbedTextSerializer(serializers.Serializer):
    text = serializers.CharField(trim_whitespace=False)


class MatchSerializer(serializers.ModelSerializer):
    matchId = serializers.CharField(source="id", read_only=True)
    users = serializers.SerializerMethodField()
    openedBy = serializers.CharField(source="opened_by_id", read_only=True)
    closedBy = serializers.CharField(source="closed_by_id", read_only=True, allow_null=True)
    closeReason = serializers.CharField(source="close_reason", read_only=True, allow_null=True)
    lastMessageAt = serializers.DateTimeField(source="last_message_at", read_only=True)
    createdAt = serializers.DateTimeField(source="created_at", read_only=True)

    class Meta:
        model = Match
        fields = [
            "matchId",
            "users",
            "state",
            "openedBy",
            "closedBy",
            "closeReason",
            "score",
            "lastMessageAt",
            "createdAt",
        ]
        read_only_fields = fields

    def get_users(self, obj: Match) -> list[str]:
        return [str(user_id) for user_id in obj.user_ids]


class ConversationStarterSerializer(serializers.ModelSerializer):
    id = serializers.CharField(read_only=True)
    createdAt = serializers.DateTimeField(source="created_at", read_only=True)

    class Meta:
        model = ConversationStarter
        fields = ["id", "text", "createdAt"]
        read_only_fields = fields
