from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import List, Optional

from django.conf import settings
from django.db.models import Prefetch

from apps.users.models import Photo, User
from apps.users.utils import compute_age

from .geo import haversine_km


@dataclass
class CandidateFilters:
    gender: Optional[str] = None
    age_min: Optional[int] = None
    age_max: Optional[int] = None
    max_distance_km: Optional[float] = None
    limit: Optional[int] = None

    @property
    def effective_limit(self) -> int:
        default = getattr(settings, "CANDIDATE_DEFAULT_LIMIT", 10)
        ceiling = getattr(settings, "CANDIDATE_MAX_LIMIT", 50)
        requested = default if self.limit is None else self.limit
        return min(max(requested, 1), ceiling)


@dataclass
class CandidateSummary:
    userId: str
    name: str
    age: int
    city: str
    distanceKm: Optional[float]
    interests: List[str] = field(default_factory=list)
    photos: List[str] = field(default_factory=list)

    def as_dict(self) -> dict:
        return asdict(self)


def _passes_profile_filters(user: User, age: int, filters: CandidateFilters) -> bool:
    if not user.is_matchable:
        return False
    if filters.gender and user.gender and user.gender != filters.gender:
        return False
    # unknown age is 0, so any minimum age excludes it
    if filters.age_min and age < filters.age_min:
        return False
    if filters.age_max and age > filters.age_max:
        return False
    return True


def candidate_pool():
    pool_size = getattr(settings, "CANDIDATE_POOL_SIZE", 200)
    photos = Prefetch("photos", queryset=Photo.objects.order_by("order", "id"))
    return User.objects.order_by("id").prefetch_related(photos)[:pool_size]


def query_candidates(requester_id: int, filters: CandidateFilters | None = None) -> List[CandidateSummary]:
    """
    Scan a fixed window of users and return candidate summaries for ``requester_id``.

    ``limit`` is applied before the distance filter, so a tight ``max_distance_km``
    can return fewer than ``limit`` results even when qualifying users exist
    further down the pool.
    """
    filters = filters or CandidateFilters()
    requester = User.objects.filter(pk=requester_id).first()
    origin = requester.location if requester else None

    selected: list[tuple[User, int]] = []
    for user in candidate_pool():
        if user.pk == requester_id:
            continue
        age = compute_age(user.birth_at)
        if _passes_profile_filters(user, age, filters):
            selected.append((user, age))
    selected = selected[: filters.effective_limit]

    summaries = [
        CandidateSummary(
            userId=str(user.pk),
            name=user.name,
            age=age,
            city=user.city,
            distanceKm=haversine_km(origin, user.location),
            interests=list(user.interests or []),
            photos=[photo.url for photo in user.photos.all()],
        )
        for user, age in selected
    ]
    if filters.max_distance_km:
        summaries = [
            summary
            for summary in summaries
            if summary.distanceKm is None or summary.distanceKm <= filters.max_distance_km
        ]
    return summaries
