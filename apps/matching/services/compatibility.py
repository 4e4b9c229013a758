from __future__ import annotations

import math
from dataclasses import dataclass, field, fields
from typing import Any, Dict, List, Optional, Sequence

from django.conf import settings

from .geo import haversine_km, round_half_up


@dataclass(frozen=True)
class ScoringWeights:
    base: float = 0.4
    interest_step: float = 0.08
    interest_cap: float = 0.4
    distance_max_boost: float = 0.2
    distance_cap_km: float = 50
    distance_divisor: float = 250
    fallback_distance_km: float = 20
    embedding_cap: float = 0.2
    reason_interest_limit: int = 3

    @classmethod
    def from_settings(cls) -> "ScoringWeights":
        overrides: Dict[str, Any] = getattr(settings, "MATCH_SCORING", {}) or {}
        known = {f.name for f in fields(cls)}
        return cls(**{key: value for key, value in overrides.items() if key in known})


@dataclass
class CompatibilityScore:
    value: float
    reasons: List[str] = field(default_factory=list)
    components: Dict[str, float] = field(default_factory=dict)

    def as_dict(self) -> dict:
        return {"value": self.value, "reasons": list(self.reasons)}


def shared_interests(source: Sequence[str] | None, target: Sequence[str] | None) -> List[str]:
    """Distinct interests of ``source`` also present in ``target``, in ``source`` order."""
    target_set = set(target or [])
    return list(dict.fromkeys(interest for interest in source or [] if interest in target_set))


def interest_boost(shared_count: int, weights: ScoringWeights) -> float:
    return min(shared_count * weights.interest_step, weights.interest_cap)


def distance_boost(distance_km: float, weights: ScoringWeights) -> float:
    return max(0.0, weights.distance_max_boost - min(distance_km, weights.distance_cap_km) / weights.distance_divisor)


def embedding_boost(
    vector_a: Optional[Sequence[float]], vector_b: Optional[Sequence[float]], weights: ScoringWeights
) -> float:
    """Cosine similarity over the common prefix, scaled into [0, embedding_cap]; 0 when undefined."""
    if not vector_a or not vector_b:
        return 0.0
    length = min(len(vector_a), len(vector_b))
    dot = norm_a = norm_b = 0.0
    for index in range(length):
        a = float(vector_a[index])
        b = float(vector_b[index])
        dot += a * b
        norm_a += a * a
        norm_b += b * b
    if not norm_a or not norm_b:
        return 0.0
    similarity = dot / (math.sqrt(norm_a) * math.sqrt(norm_b))
    return max(0.0, min(weights.embedding_cap, similarity * weights.embedding_cap))


def _interest_reason(shared: List[str], weights: ScoringWeights) -> str:
    if not shared:
        return "התאמה ראשונית"
    return f"תחומי עניין משותפים ({', '.join(shared[: weights.reason_interest_limit])})"


def _distance_reason(distance_km: float) -> str:
    return f'מרחק משוער {int(round_half_up(distance_km))} ק"מ'


def score_compatibility(source, candidate, weights: ScoringWeights | None = None) -> CompatibilityScore:
    """
    Deterministic compatibility of ``candidate`` for ``source``.

    Both arguments only need ``interests``, ``location`` and ``embedding`` attributes.
    """
    weights = weights or ScoringWeights.from_settings()
    shared = shared_interests(source.interests, candidate.interests)
    distance_km = haversine_km(source.location, candidate.location)
    if distance_km is None:
        distance_km = weights.fallback_distance_km

    components = {
        "base": weights.base,
        "interests": interest_boost(len(shared), weights),
        "distance": distance_boost(distance_km, weights),
        "embedding": embedding_boost(source.embedding, candidate.embedding, weights),
    }
    value = min(
        1.0,
        components["base"] + components["interests"] + components["distance"] + components["embedding"],
    )
    reasons = [_interest_reason(shared, weights), _distance_reason(distance_km)]
    return CompatibilityScore(value=value, reasons=reasons, components=components)
