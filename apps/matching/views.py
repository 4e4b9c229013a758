from __future__ import annotations

from rest_framework import permissions, status
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from apps.core.errors import InvalidArgument, PermissionDeniedError
from apps.users.services import get_users, require_user_id

from .models import Match
from .serializers import (
    CandidateQuerySerializer,
    CloseMatchSerializer,
    ConversationStarterSerializer,
    CreateMatchSerializer,
    EmbedTextSerializer,
    MatchSerializer,
    ScoreCandidateSerializer,
    UserPairSerializer,
)
from .services.candidates import CandidateFilters, query_candidates
from .services.compatibility import score_compatibility
from .services.embedding import embed_text
from .services.lifecycle import close_match, create_or_queue_match, get_active_match, get_match
from .services.starters import extract_shared_interests


def _validated(serializer_class, data) -> dict:
    serializer = serializer_class(data=data)
    if not serializer.is_valid():
        raise InvalidArgument(serializer.errors)
    return serializer.validated_data


def participant_match(request: Request, match_id: str) -> Match:
    match = get_match(match_id)
    if not match.has_user(request.user.pk):
        raise PermissionDeniedError("You are not part of this match.")
    return match


class CandidateQueryView(APIView):
    permission_classes = [permissions.IsAuthenticated]
    throttle_scope = "matching"

    def post(self, request: Request) -> Response:
        data = _validated(CandidateQuerySerializer, request.data)
        requester_id = require_user_id(data["userId"])
        raw = data.get("filters") or {}
        filters = CandidateFilters(
            gender=raw.get("gender"),
            age_min=raw.get("ageMin"),
            age_max=raw.get("ageMax"),
            max_distance_km=raw.get("maxDistanceKm"),
            limit=raw.get("limit"),
        )
        candidates = query_candidates(requester_id, filters)
        return Response({"candidates": [candidate.as_dict() for candidate in candidates]})


class ScoreCandidateView(APIView):
    permission_classes = [permissions.IsAuthenticated]
    throttle_scope = "matching"

    def post(self, request: Request) -> Response:
        data = _validated(ScoreCandidateSerializer, request.data)
        source, candidate = get_users([data["sourceUser"], data["candidate"]["userId"]])
        return Response(score_compatibility(source, candidate).as_dict())


class MatchCreateView(APIView):
    permission_classes = [permissions.IsAuthenticated]
    throttle_scope = "matching"

    def post(self, request: Request) -> Response:
        data = _validated(CreateMatchSerializer, request.data)
        match = create_or_queue_match(data["userA"], data["userB"], data.get("score"))
        return Response({"matchId": str(match.id), "state": match.state}, status=status.HTTP_201_CREATED)


class ActiveMatchView(APIView):
    permission_classes = [permissions.IsAuthenticated]

    def get(self, request: Request) -> Response:
        match = get_active_match(request.query_params.get("userId"))
        if match is None:
            return Response({"matchId": None, "state": None})
        return Response({"matchId": str(match.id), "state": match.state, "match": MatchSerializer(match).data})


class MatchCloseView(APIView):
    permission_classes = [permissions.IsAuthenticated]

    def post(self, request: Request, match_id: str) -> Response:
        data = _validated(CloseMatchSerializer, request.data)
        close_match(caller=request.user, match_id=match_id, reason=data.get("reason"))
        return Response({"ok": True})


class MatchStartersView(APIView):
    permission_classes = [permissions.IsAuthenticated]

    def get(self, request: Request, match_id: str) -> Response:
        match = participant_match(request, match_id)
        starters = match.starters.order_by("created_at", "id")
        return Response({"starters": ConversationStarterSerializer(starters, many=True).data})


class SharedInterestsView(APIView):
    permission_classes = [permissions.IsAuthenticated]

    def post(self, request: Request) -> Response:
        data = _validated(UserPairSerializer, request.data)
        return Response({"shared": extract_shared_interests(data["userA"], data["userB"])})


class EmbedTextView(APIView):
    permission_classes = [permissions.IsAuthenticated]

    def post(self, request: Request) -> Response:
        data = _validated(EmbedTextSerializer, request.data)
        return Response({"vector": embed_text(data["text"])})
