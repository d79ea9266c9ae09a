from collections import Counter
from dataclasses import dataclass, field

from app.models.watchlist import WatchlistItem
from app.utils import parse_year


@dataclass
class PreferenceVector:
    """
    What a user's watchlist says about their taste.

    ``categories`` and ``years`` map a genre id or release year to the share
    of watchlist items carrying it. ``avg_rating`` is the mean of the user's
    positive ratings, or None when nothing has been rated.
    """

    categories: dict[int, float] = field(default_factory=dict)
    years: dict[int, float] = field(default_factory=dict)
    avg_rating: float | None = None

    def as_features(self) -> dict[str, float]:
        """Flat ``category_<id>`` / ``avg_rating`` / ``year_<y>`` view, as exposed in debug output."""
        features = {f"category_{genre_id}": weight for genre_id, weight in self.categories.items()}
        if self.avg_rating is not None:
            features["avg_rating"] = self.avg_rating
        features.update({f"year_{year}": weight for year, weight in self.years.items()})
        return features


def derive_preferences(items: list[WatchlistItem]) -> PreferenceVector:
    """Build a PreferenceVector from a watchlist snapshot. Items without details only count towards totals."""
    total = len(items)
    if total == 0:
        return PreferenceVector()

    genre_counts: Counter[int] = Counter()
    year_counts: Counter[int] = Counter()
    ratings = []

    for item in items:
        if item.movie is not None:
            genre_counts.update(set(item.movie.genre_ids))
            year = parse_year(item.movie.release_date)
            if year > 0:
                year_counts[year] += 1
        if item.rating > 0:
            ratings.append(item.rating)

    return PreferenceVector(
        categories={genre_id: count / total for genre_id, count in genre_counts.items()},
        years={year: count / total for year, count in year_counts.items()},
        avg_rating=sum(ratings) / len(ratings) if ratings else None,
    )
