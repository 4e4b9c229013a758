from __future__ import annotations

from datetime import datetime, timezone as dt_timezone

from rest_framework import status
from rest_framework.test import APIClient, APITestCase

from apps.users.models import Device, Photo, User


class ProfileApiTests(APITestCase):
    def setUp(self) -> None:
        self.user = User.objects.create_user(
            email="dana@example.com",
            password="pass1234",
            name="דנה",
            gender="female",
            seeking="male",
            birth_at=datetime(1995, 1, 1, tzinfo=dt_timezone.utc),
            city="תל אביב",
            latitude=32.08,
            longitude=34.78,
            interests=["קפה", "ים"],
            embedding=[0.1] * 256,
        )
        self.other = User.objects.create_user(email="omer@example.com", password="pass1234", name="עומר")
        self.client = APIClient()
        self.client.force_authenticate(user=self.user)

    def test_read_profile_returns_sanitized_view(self) -> None:
        response = self.client.get(f"/api/v1/users/{self.user.id}/")
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        profile = response.data["user"]
        self.assertEqual(profile["userId"], str(self.user.id))
        self.assertEqual(profile["location"], {"lat": 32.08, "lng": 34.78})
        self.assertEqual(profile["plan"], "free")
        self.assertEqual(profile["prefs"], {"ageMin": 24, "ageMax": 36, "maxDistanceKm": 30})
        for hidden in ("email", "password", "embedding", "is_staff"):
            self.assertNotIn(hidden, profile)

    def test_read_profile_malformed_id_is_not_found(self) -> None:
        response = self.client.get("/api/v1/users/not-a-user/")
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_patch_updates_basics_and_dedupes_interests(self) -> None:
        response = self.client.patch(
            "/api/v1/users/me/",
            {"bio": "שלום", "interests": [" יוגה ", "יוגה", "ספרים"], "location": {"lat": 31.77, "lng": 35.21}},
            format="json",
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.user.refresh_from_db()
        self.assertEqual(self.user.bio, "שלום")
        self.assertEqual(self.user.interests, ["יוגה", "ספרים"])
        self.assertEqual(self.user.location, (31.77, 35.21))

    def test_patch_partial_prefs_merges_defaults(self) -> None:
        response = self.client.patch("/api/v1/users/me/", {"prefs": {"ageMax": 40}}, format="json")
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["user"]["prefs"], {"ageMin": 24, "ageMax": 40, "maxDistanceKm": 30})

    def test_patch_rejects_inverted_age_range(self) -> None:
        response = self.client.patch(
            "/api/v1/users/me/",
            {"prefs": {"ageMin": 40, "ageMax": 30, "maxDistanceKm": 10}},
            format="json",
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data["error"], "invalid-argument")

    def test_patch_rejects_long_bio(self) -> None:
        response = self.client.patch("/api/v1/users/me/", {"bio": "א" * 501}, format="json")
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_replace_photos_keeps_order(self) -> None:
        Photo.objects.create(user=self.user, url="https://cdn.example.com/old.jpg", order=0)
        urls = ["https://cdn.example.com/a.jpg", "https://cdn.example.com/b.jpg"]
        response = self.client.put("/api/v1/users/me/photos/", {"photos": urls}, format="json")
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        stored = list(self.user.photos.values_list("url", "order", "approved"))
        self.assertEqual(stored, [(urls[0], 0, True), (urls[1], 1, True)])

    def test_replace_photos_caps_at_six(self) -> None:
        urls = [f"https://cdn.example.com/{index}.jpg" for index in range(7)]
        response = self.client.put("/api/v1/users/me/photos/", {"photos": urls}, format="json")
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_register_device_is_idempotent(self) -> None:
        for _ in range(2):
            response = self.client.post(
                "/api/v1/users/me/devices/", {"pushToken": "tok-1", "platform": "ios"}, format="json"
            )
            self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(Device.objects.filter(user=self.user).count(), 1)

        response = self.client.delete("/api/v1/users/me/devices/", {"pushToken": "tok-1"}, format="json")
        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)
        self.assertFalse(Device.objects.filter(user=self.user).exists())


class EmbeddingApiTests(APITestCase):
    def setUp(self) -> None:
        self.user = User.objects.create_user(email="vec@example.com", password="pass1234", name="Vec")
        self.other = User.objects.create_user(email="other@example.com", password="pass1234", name="Other")
        self.client = APIClient()
        self.client.force_authenticate(user=self.user)

    def test_store_own_embedding_verbatim(self) -> None:
        vector = [0.5] * 300
        response = self.client.put(f"/api/v1/users/{self.user.id}/embedding/", {"vector": vector}, format="json")
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data, {"ok": True})
        self.user.refresh_from_db()
        self.assertEqual(self.user.embedding, vector)

    def test_short_vector_is_invalid(self) -> None:
        response = self.client.put(
            f"/api/v1/users/{self.user.id}/embedding/", {"vector": [0.1] * 255}, format="json"
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data["error"], "invalid-argument")

    def test_cannot_overwrite_another_users_embedding(self) -> None:
        response = self.client.put(
            f"/api/v1/users/{self.other.id}/embedding/", {"vector": [0.1] * 256}, format="json"
        )
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.other.refresh_from_db()
        self.assertIsNone(self.other.embedding)

    def test_staff_may_store_for_others(self) -> None:
        staff = User.objects.create_user(email="ops@example.com", password="pass1234", name="Ops", is_staff=True)
        self.client.force_authenticate(user=staff)
        response = self.client.put(
            f"/api/v1/users/{self.other.id}/embedding/", {"vector": [0.2] * 256}, format="json"
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK)
