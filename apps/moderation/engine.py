from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Iterable, Sequence

from django.conf import settings


@dataclass(frozen=True)
class ModerationDecision:
    allowed: bool
    labels: list[str] = field(default_factory=list)

    def as_dict(self) -> dict:
        return asdict(self)


def banned_terms() -> list[str]:
    terms = getattr(settings, "MODERATION_BANNED_TERMS", [])
    if isinstance(terms, str):
        terms = terms.split(",")
    return [term.strip() for term in terms if term and term.strip()]


def classify(text: str, lexicon: Iterable[str]) -> ModerationDecision:
    """
    Naive case-insensitive substring match against ``lexicon``.

    A term embedded inside an unrelated word still matches, and creative
    spellings slip through.
    """
    lowered = text.lower()
    labels = [term for term in lexicon if term and term.lower() in lowered]
    return ModerationDecision(allowed=not labels, labels=labels)


def moderate_text(text: str, lexicon: Sequence[str] | None = None) -> ModerationDecision:
    return classify(text or "", banned_terms() if lexicon is None else lexicon)
