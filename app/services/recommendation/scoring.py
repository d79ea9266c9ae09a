from dataclasses import dataclass

from app.core.config import Settings
from app.core.constants import (
    CATEGORY_REASON_THRESHOLD,
    RATING_REASON_THRESHOLD,
    REASON_CATEGORY,
    REASON_DEFAULT,
    REASON_RATING,
    REASON_YEAR,
    YEAR_REASON_THRESHOLD,
)
from app.models.media import Movie
from app.models.watchlist import ScoredRecommendation
from app.services.recommendation.preferences import PreferenceVector
from app.utils import parse_year


@dataclass(frozen=True)
class ScoringWeights:
    category: float = 0.5
    rating: float = 0.3
    year: float = 0.2
    popularity_cap: float = 0.1

    @classmethod
    def from_settings(cls, settings: Settings) -> "ScoringWeights":
        return cls(
            category=settings.RECOMMENDATION_CATEGORY_WEIGHT,
            rating=settings.RECOMMENDATION_RATING_WEIGHT,
            year=settings.RECOMMENDATION_YEAR_WEIGHT,
            popularity_cap=settings.RECOMMENDATION_POPULARITY_CAP,
        )


def _reason(category_match: float, rating_match: float, year_match: float) -> str:
    if category_match > CATEGORY_REASON_THRESHOLD:
        return REASON_CATEGORY
    if rating_match > RATING_REASON_THRESHOLD:
        return REASON_RATING
    if year_match > YEAR_REASON_THRESHOLD:
        return REASON_YEAR
    return REASON_DEFAULT


def score_candidate(
    candidate: Movie, preferences: PreferenceVector, weights: ScoringWeights = ScoringWeights()
) -> ScoredRecommendation:
    """
    Score one candidate against a preference vector.

    category match: mean preference weight over the candidate's genres.
    rating match: 1 - |candidate rating - preferred rating| / 10.
    year match: preference weight of the candidate's release year.
    The weighted sum gets a popularity bonus of popularity / 100, capped.
    """
    category_match = 0.0
    if candidate.genre_ids:
        category_match = sum(preferences.categories.get(g, 0.0) for g in candidate.genre_ids) / len(
            candidate.genre_ids
        )

    rating_match = 0.0
    if preferences.avg_rating is not None and candidate.vote_average > 0:
        rating_match = 1.0 - abs(candidate.vote_average - preferences.avg_rating) / 10.0

    year_match = 0.0
    year = parse_year(candidate.release_date)
    if year > 0:
        year_match = preferences.years.get(year, 0.0)

    score = category_match * weights.category + rating_match * weights.rating + year_match * weights.year
    if candidate.popularity > 0:
        score += min(candidate.popularity / 100.0, weights.popularity_cap)

    return ScoredRecommendation(
        movie=candidate,
        score=score,
        reason=_reason(category_match, rating_match, year_match),
        genre_match=category_match,
        rating_match=rating_match,
        year_match=year_match,
    )


def rank_candidates(
    candidates: list[Movie],
    preferences: PreferenceVector,
    limit: int,
    weights: ScoringWeights = ScoringWeights(),
) -> list[ScoredRecommendation]:
    """Score every candidate, highest first, truncated to ``limit``. Ties keep candidate order."""
    scored = [score_candidate(candidate, preferences, weights) for candidate in candidates]
    scored.sort(key=lambda rec: rec.score, reverse=True)
    return scored[:limit]
