"""
Similarity between two TextCharacteristics.

Weighted sum of:
- length ratio min/max (0.3; skipped when either length is unknown)
- exact language match (0.2; always applied)
- domain match (0.3; full credit for equal, half when one contains the other)
- complexity closeness 1 - |a - b| (0.2; skipped when either is unknown)

normalized by the weights that applied, so the result is in [0, 1].
"""

from textlab.config import (
    SIMILARITY_COMPLEXITY_WEIGHT,
    SIMILARITY_DOMAIN_WEIGHT,
    SIMILARITY_LANGUAGE_WEIGHT,
    SIMILARITY_LENGTH_WEIGHT,
)
from textlab.strategy.models import TextCharacteristics


def calculate_similarity(a: TextCharacteristics, b: TextCharacteristics) -> float:
    similarity = 0.0
    weights = 0.0

    if a.length > 0 and b.length > 0:
        ratio = min(a.length, b.length) / max(a.length, b.length)
        similarity += ratio * SIMILARITY_LENGTH_WEIGHT
        weights += SIMILARITY_LENGTH_WEIGHT

    if a.language == b.language:
        similarity += SIMILARITY_LANGUAGE_WEIGHT
    weights += SIMILARITY_LANGUAGE_WEIGHT

    if a.domain == b.domain:
        similarity += SIMILARITY_DOMAIN_WEIGHT
    elif a.domain in b.domain or b.domain in a.domain:
        similarity += SIMILARITY_DOMAIN_WEIGHT / 2
    weights += SIMILARITY_DOMAIN_WEIGHT

    if a.complexity is not None and b.complexity is not None:
        similarity += (1 - abs(a.complexity - b.complexity)) * SIMILARITY_COMPLEXITY_WEIGHT
        weights += SIMILARITY_COMPLEXITY_WEIGHT

    if weights > 0:
        return similarity / weights
    return 0.0
