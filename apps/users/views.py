from __future__ import annotations

from collections.abc import Mapping

from rest_framework import generics, permissions, status
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from apps.core.errors import InvalidArgument

from .models import Device
from .serializers import (
    DeviceSerializer,
    EmbeddingSerializer,
    PhotoListSerializer,
    PhotoSerializer,
    ProfileUpdateSerializer,
    UserProfileSerializer,
)
from .services import get_user, store_embedding


class UserProfileView(APIView):
    permission_classes = [permissions.IsAuthenticated]

    def get(self, request: Request, user_id: str) -> Response:
        user = get_user(user_id)
        return Response({"user": UserProfileSerializer(user).data})


class MyProfileView(generics.GenericAPIView):
    serializer_class = ProfileUpdateSerializer
    permission_classes = [permissions.IsAuthenticated]

    def get(self, request: Request) -> Response:
        return Response({"user": UserProfileSerializer(request.user).data})

    def patch(self, request: Request) -> Response:
        serializer = self.get_serializer(request.user, data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        user = serializer.save()
        return Response({"user": UserProfileSerializer(user).data})


class MyPhotosView(generics.GenericAPIView):
    serializer_class = PhotoListSerializer
    permission_classes = [permissions.IsAuthenticated]

    def put(self, request: Request) -> Response:
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        photos = serializer.replace_for(request.user)
        return Response({"photos": PhotoSerializer(photos, many=True).data})


class UserEmbeddingView(APIView):
    permission_classes = [permissions.IsAuthenticated]

    def put(self, request: Request, user_id: str) -> Response:
        serializer = EmbeddingSerializer(data=request.data)
        if not serializer.is_valid():
            raise InvalidArgument(serializer.errors)
        store_embedding(caller=request.user, user_id=user_id, vector=serializer.validated_data["vector"])
        return Response({"ok": True}, status=status.HTTP_200_OK)


class MyDevicesView(generics.GenericAPIView):
    serializer_class = DeviceSerializer
    permission_classes = [permissions.IsAuthenticated]

    def post(self, request: Request) -> Response:
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        device = serializer.register_for(request.user)
        return Response({"device": DeviceSerializer(device).data}, status=status.HTTP_201_CREATED)

    def delete(self, request: Request) -> Response:
        token = request.data.get("pushToken") if isinstance(request.data, Mapping) else None
        if not token:
            raise InvalidArgument("pushToken is required.")
        Device.objects.filter(user=request.user, push_token=token).delete()
        return Response(status=status.HTTP_204_NO_CONTENT)
