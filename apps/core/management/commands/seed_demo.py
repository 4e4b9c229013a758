from __future__ import annotations

from datetime import datetime, timezone as dt_timezone

from django.core.management.base import BaseCommand
from django.db import transaction

from apps.matching.models import Match
from apps.matching.services.lifecycle import create_or_queue_match
from apps.users.models import Gender, Photo, User

DEMO_USERS = [
    {
        "email": "demo-noa@example.com",
        "name": "נועה",
        "gender": Gender.FEMALE,
        "seeking": Gender.MALE,
        "birth_at": datetime(1994, 3, 12, tzinfo=dt_timezone.utc),
        "city": "תל אביב",
        "latitude": 32.0853,
        "longitude": 34.7818,
        "interests": ["טיולים", "קפה", "יוגה"],
        "bio": "אוהבת בקרים איטיים וטיולי שטח.",
    },
    {
        "email": "demo-itai@example.com",
        "name": "איתי",
        "gender": Gender.MALE,
        "seeking": Gender.FEMALE,
        "birth_at": datetime(1991, 7, 2, tzinfo=dt_timezone.utc),
        "city": "רמת גן",
        "latitude": 32.0684,
        "longitude": 34.8248,
        "interests": ["קפה", "מוזיקה", "טיולים"],
        "bio": "מתכנת ביום, מנגן בערב.",
    },
    {
        "email": "demo-maya@example.com",
        "name": "מאיה",
        "gender": Gender.FEMALE,
        "seeking": Gender.MALE,
        "birth_at": datetime(1997, 11, 20, tzinfo=dt_timezone.utc),
        "city": "חיפה",
        "latitude": 32.7940,
        "longitude": 34.9896,
        "interests": ["צילום", "ים"],
        "bio": "",
    },
]

DEFAULT_PASSWORD = "changeme123"


class Command(BaseCommand):
    help = "Seed demo profiles and an opening match"

    def add_arguments(self, parser):  # type: ignore[override]
        parser.add_argument(
            "--reset",
            action="store_true",
            help="Reset demo users before seeding",
        )

    @transaction.atomic
    def handle(self, *args, **options):
        if options.get("reset"):
            self.stdout.write("Removing existing demo data…")
            emails = [user["email"] for user in DEMO_USERS]
            User.objects.filter(email__in=emails).delete()

        users = [self._ensure_user(payload) for payload in DEMO_USERS]
        self._ensure_match(users)

        self.stdout.write(self.style.SUCCESS("Demo data seeded."))

    def _ensure_user(self, payload: dict) -> User:
        defaults = {key: value for key, value in payload.items() if key != "email"}
        user, created = User.objects.get_or_create(email=payload["email"], defaults=defaults)
        if created or not user.check_password(DEFAULT_PASSWORD):
            user.set_password(DEFAULT_PASSWORD)
            user.save(update_fields=["password"])
        if not user.photos.exists():
            Photo.objects.create(user=user, url=f"https://picsum.photos/seed/{user.pk}/600/800", order=0, approved=True)
        return user

    def _ensure_match(self, users: list[User]) -> None:
        if len(users) < 2:
            return
        first, second = users[0], users[1]
        if Match.objects.filter(state=Match.State.ACTIVE, participants__user=first).exists():
            return
        if Match.objects.filter(state=Match.State.ACTIVE, participants__user=second).exists():
            return
        create_or_queue_match(first.pk, second.pk, score=0.82)
