from __future__ import annotations

import math

from django.conf import settings
from django.db import transaction
from django.utils import timezone
from rest_framework import serializers

from .models import Device, Gender, Photo, User
from .utils import compute_age


def preferences_payload(user: User) -> dict:
    if not user.has_preferences:
        return dict(settings.DEFAULT_MATCH_PREFERENCES)
    return {
        "ageMin": user.pref_age_min,
        "ageMax": user.pref_age_max,
        "maxDistanceKm": user.pref_max_distance_km,
    }


def location_payload(user: User) -> dict | None:
    if user.location is None:
        return None
    return {"lat": user.latitude, "lng": user.longitude}


class PhotoSerializer(serializers.ModelSerializer):
    class Meta:
        model = Photo
        fields = ["url", "order", "approved"]
        read_only_fields = fields


class UserProfileSerializer(serializers.ModelSerializer):
    """Sanitized, read-only view of a user record."""

    userId = serializers.CharField(source="id", read_only=True)
    age = serializers.SerializerMethodField()
    location = serializers.SerializerMethodField()
    prefs = serializers.SerializerMethodField()

    class Meta:
        model = User
        fields = [
            "userId",
            "name",
            "age",
            "gender",
            "seeking",
            "location",
            "city",
            "bio",
            "interests",
            "prefs",
            "plan",
        ]
        read_only_fields = fields

    def get_age(self, obj: User) -> int:
        return compute_age(obj.birth_at)

    def get_location(self, obj: User) -> dict | None:
        return location_payload(obj)

    def get_prefs(self, obj: User) -> dict:
        return preferences_payload(obj)


class LocationSerializer(serializers.Serializer):
    lat = serializers.FloatField(min_value=-90, max_value=90)
    lng = serializers.FloatField(min_value=-180, max_value=180)


class PreferencesSerializer(serializers.Serializer):
    ageMin = serializers.IntegerField(min_value=1)
    ageMax = serializers.IntegerField(min_value=1)
    maxDistanceKm = serializers.IntegerField(min_value=1)


class ProfileUpdateSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=120, required=False, allow_blank=True)
    birthAt = serializers.DateTimeField(required=False, allow_null=True)
    gender = serializers.ChoiceField(choices=Gender.choices, required=False)
    seeking = serializers.ChoiceField(choices=Gender.choices, required=False)
    bio = serializers.CharField(max_length=settings.BIO_MAX_LENGTH, required=False, allow_blank=True)
    city = serializers.CharField(max_length=120, required=False, allow_blank=True)
    location = LocationSerializer(required=False, allow_null=True)
    interests = serializers.ListField(
        child=serializers.CharField(max_length=64), required=False, max_length=50
    )
    prefs = PreferencesSerializer(required=False)

    _DIRECT_FIELDS = {
        "name": "name",
        "birthAt": "birth_at",
        "gender": "gender",
        "seeking": "seeking",
        "bio": "bio",
        "city": "city",
    }

    def validate(self, attrs: dict) -> dict:
        location = attrs.get("location")
        if location is not None and not {"lat", "lng"} <= set(location):
            raise serializers.ValidationError({"location": "Both lat and lng are required."})
        if "prefs" in attrs:
            current = preferences_payload(self.instance) if self.instance is not None else {}
            merged = {**current, **attrs["prefs"]}
            missing = [key for key in ("ageMin", "ageMax", "maxDistanceKm") if key not in merged]
            if missing:
                raise serializers.ValidationError({"prefs": f"Missing: {', '.join(missing)}"})
            if merged["ageMin"] > merged["ageMax"]:
                raise serializers.ValidationError({"prefs": "ageMin must not exceed ageMax."})
            attrs["prefs"] = merged
        return attrs

    def validate_interests(self, values: list[str]) -> list[str]:
        cleaned = [value.strip() for value in values if value and value.strip()]
        return list(dict.fromkeys(cleaned))

    def update(self, instance: User, validated_data: dict) -> User:
        for key, attr in self._DIRECT_FIELDS.items():
            if key in validated_data:
                setattr(instance, attr, validated_data[key])
        if "location" in validated_data:
            location = validated_data["location"]
            instance.latitude = location["lat"] if location else None
            instance.longitude = location["lng"] if location else None
        if "interests" in validated_data:
            instance.interests = validated_data["interests"]
        if "prefs" in validated_data:
            prefs = validated_data["prefs"]
            instance.pref_age_min = prefs["ageMin"]
            instance.pref_age_max = prefs["ageMax"]
            instance.pref_max_distance_km = prefs["maxDistanceKm"]
        instance.save()
        return instance


class PhotoListSerializer(serializers.Serializer):
    photos = serializers.ListField(
        child=serializers.URLField(max_length=500),
        max_length=settings.MAX_PROFILE_PHOTOS,
        allow_empty=True,
    )

    def replace_for(self, user: User) -> list[Photo]:
        urls = self.validated_data["photos"]
        with transaction.atomic():
            Photo.objects.filter(user=user).delete()
            photos = Photo.objects.bulk_create(
                [Photo(user=user, url=url, order=index, approved=True) for index, url in enumerate(urls)]
            )
            User.objects.filter(pk=user.pk).update(updated_at=timezone.now())
        return photos


class EmbeddingSerializer(serializers.Serializer):
    vector = serializers.ListField(child=serializers.FloatField(), allow_empty=False)

    def validate_vector(self, values: list[float]) -> list[float]:
        minimum = settings.EMBEDDING_DIMENSIONS
        if len(values) < minimum:
            raise serializers.ValidationError(f"vector must contain at least {minimum} values.")
        if not all(math.isfinite(value) for value in values):
            raise serializers.ValidationError("vector values must be finite numbers.")
        return values


class DeviceSerializer(serializers.ModelSerializer):
    pushToken = serializers.CharField(source="push_token", max_length=255)
    lastSeen = serializers.DateTimeField(source="last_seen", read_only=True)

    class Meta:
        model = Device
        fields = ["pushToken", "platform", "lastSeen"]

    def register_for(self, user: User) -> Device:
        device, _ = Device.objects.update_or_create(
            user=user,
            push_token=self.validated_data["push_token"],
            defaults={"platform": self.validated_data.get("platform", "")},
        )
        return device
