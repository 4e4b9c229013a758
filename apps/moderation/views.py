from __future__ import annotations

from rest_framework import permissions
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from apps.core.errors import InvalidArgument

from .engine import moderate_text
from .serializers import ModerateTextSerializer


class ModerateTextView(APIView):
    permission_classes = [permissions.IsAuthenticated]

    def post(self, request: Request) -> Response:
        serializer = ModerateTextSerializer(data=request.data)
        if not serializer.is_valid():
            raise InvalidArgument("text is required.")
        decision = moderate_text(serializer.validated_data["text"])
        return Response(decision.as_dict())
