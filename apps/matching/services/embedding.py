from __future__ import annotations

from typing import List

from django.conf import settings

from apps.core.errors import InvalidArgument

MIN_TEXT_LENGTH = 3


def _code_units(text: str) -> List[int]:
    # UTF-16 code units, so astral characters count twice like they do on the clients
    raw = text.encode("utf-16-le")
    return [int.from_bytes(raw[index : index + 2], "little") for index in range(0, len(raw), 2)]


def embed_text(text: str | None, dimensions: int | None = None) -> List[float]:
    """
    Character-code embedding: slot ``i`` sums ``code / 255`` over positions
    ``i, i + dimensions, ...`` and the vector is scaled by ``max(max(vector), 1)``.
    """
    codes = _code_units(text) if isinstance(text, str) else []
    if len(codes) < MIN_TEXT_LENGTH:
        raise InvalidArgument(f"text must be at least {MIN_TEXT_LENGTH} characters.")
    size = dimensions or getattr(settings, "EMBEDDING_DIMENSIONS", 256)
    vector = [0.0] * size
    for position, code in enumerate(codes):
        vector[position % size] += code / 255
    scale = max(max(vector), 1)
    return [round(value / scale, 6) for value in vector]
