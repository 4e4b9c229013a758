from __future__ import annotations

from collections.abc import Mapping

from django.conf import settings
from django.utils.decorators import method_decorator
from django_ratelimit.decorators import ratelimit
from rest_framework import generics, permissions, status
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from apps.core.errors import InvalidArgument
from apps.core.pagination import ChronologicalCursorPagination
from apps.matching.views import participant_match

from .models import Message
from .serializers import MessageSerializer
from .services.ingest import store_message


def _message_body(request: Request) -> Mapping:
    if not isinstance(request.data, Mapping):
        raise InvalidArgument("Request body must be a JSON object.")
    return request.data


def _store_and_respond(request: Request, match_id: object) -> Response:
    data = _message_body(request)
    message = store_message(
        caller=request.user,
        match_id=match_id,
        sender_id=data.get("from"),
        text=data.get("text"),
    )
    return Response({"messageId": str(message.id), "status": message.status}, status=status.HTTP_201_CREATED)


@method_decorator(
    ratelimit(key="user", rate=getattr(settings, "MESSAGE_RATE_LIMIT", "60/m"), method="POST", block=True),
    name="post",
)
class StoreMessageView(APIView):
    permission_classes = [permissions.IsAuthenticated]
    throttle_scope = "messaging"

    def post(self, request: Request) -> Response:
        return _store_and_respond(request, _message_body(request).get("matchId"))


@method_decorator(
    ratelimit(key="user", rate=getattr(settings, "MESSAGE_RATE_LIMIT", "60/m"), method="POST", block=True),
    name="post",
)
class MatchMessagesView(generics.ListAPIView):
    serializer_class = MessageSerializer
    permission_classes = [permissions.IsAuthenticated]
    pagination_class = ChronologicalCursorPagination
    throttle_scope = "messaging"

    def get_queryset(self):  # type: ignore[override]
        match = participant_match(self.request, self.kwargs["match_id"])
        return Message.objects.filter(match=match).order_by("created_at", "id")

    def post(self, request: Request, match_id: str) -> Response:
        return _store_and_respond(request, match_id)
