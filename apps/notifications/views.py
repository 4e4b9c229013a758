from __future__ import annotations

from django.utils import timezone
from rest_framework import mixins, permissions, status, viewsets
from rest_framework.decorators import action
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from apps.core.errors import InvalidArgument, Unavailable

from .models import Notification
from .push import PushError, send_to_token
from .serializers import NotificationSerializer, SendPushSerializer


class NotificationViewSet(mixins.ListModelMixin, viewsets.GenericViewSet):
    serializer_class = NotificationSerializer
    permission_classes = [permissions.IsAuthenticated]

    def get_queryset(self):  # type: ignore[override]
        return Notification.objects.filter(user=self.request.user)

    @action(detail=False, methods=["post"], url_path="mark-all-read")
    def mark_all_read(self, request: Request) -> Response:
        updated = Notification.objects.filter(user=request.user, is_read=False).update(
            is_read=True,
            read_at=timezone.now(),
        )
        return Response({"updated": updated}, status=status.HTTP_200_OK)


class SendPushView(APIView):
    permission_classes = [permissions.IsAuthenticated]

    def post(self, request: Request) -> Response:
        serializer = SendPushSerializer(data=request.data)
        if not serializer.is_valid():
            raise InvalidArgument("token, title and body are required.")
        data = serializer.validated_data
        try:
            send_to_token(data["token"], data["title"], data["body"], data.get("data"))
        except PushError as exc:
            raise Unavailable(str(exc)) from exc
        return Response({"ok": True})
