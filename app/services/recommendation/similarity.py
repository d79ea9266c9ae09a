from collections.abc import Iterable
from typing import Any

from app.models.media import Movie


def jaccard_similarity(set_a: set[Any], set_b: set[Any]) -> float:
    """Calculate Jaccard similarity between two sets. Empty sets score 0."""
    if not set_a or not set_b:
        return 0.0

    intersection = len(set_a & set_b)
    union = len(set_a | set_b)
    return intersection / union if union > 0 else 0.0


def item_similarity(item_a: Movie, item_b: Movie) -> float:
    """Genre overlap between two titles."""
    return jaccard_similarity(set(item_a.genre_ids), set(item_b.genre_ids))


def rank_similar(source: Movie, candidates: Iterable[Movie], limit: int, threshold: float = 0.1) -> list[Movie]:
    """
    Candidates whose genre overlap with ``source`` exceeds ``threshold``,
    most similar first. The source itself is skipped and equal scores keep
    their candidate order.
    """
    scored = []
    for candidate in candidates:
        if candidate.id == source.id:
            continue
        similarity = item_similarity(source, candidate)
        if similarity > threshold:
            scored.append((similarity, candidate))

    scored.sort(key=lambda pair: pair[0], reverse=True)
    return [candidate for _, candidate in scored[:limit]]
