from __future__ import annotations

from rest_framework import serializers


class ModerateTextSerializer(serializers.Serializer):
    text = serializers.CharField(trim_whitespace=False)
