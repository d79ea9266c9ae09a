import math
from typing import TypeVar

from app.core.constants import PLACEHOLDER_BACKDROP, PLACEHOLDER_POSTER
from app.models.media import Movie, Ratings
from app.models.response import Meta

T = TypeVar("T")


def parse_year(date_str: str | None) -> int:
    """Extract the year from a ``YYYY-MM-DD`` or ``YYYY`` string, 0 when absent."""
    if not date_str:
        return 0
    try:
        return int(date_str.split("-")[0])
    except ValueError:
        return 0


def paginate_results(results: list[T], page: int, per_page: int) -> tuple[list[T], Meta]:
    """
    Slice an in-memory result list into one page.

    Out-of-range pages are clamped into ``[1, total_pages]``.
    """
    total_results = len(results)
    total_pages = math.ceil(total_results / per_page) if per_page > 0 else 0

    if page < 1:
        page = 1
    if total_pages > 0 and page > total_pages:
        page = total_pages

    start = (page - 1) * per_page
    end = min(start + per_page, total_results)
    paged = results[start:end] if start < total_results else []

    return paged, Meta.for_page(page, per_page, total_pages, total_results)


def validate_movie_data(movie: Movie) -> Movie:
    """Fill blank display fields with placeholders and zero out impossible numbers."""
    if not movie.title:
        movie.title = "Unknown Title"
    if not movie.overview:
        movie.overview = "No overview available"
    if not movie.poster_path:
        movie.poster_path = PLACEHOLDER_POSTER
    if not movie.backdrop_path:
        movie.backdrop_path = PLACEHOLDER_BACKDROP
    if not movie.release_date:
        movie.release_date = "Unknown"
    if not movie.status:
        movie.status = "Unknown"
    if not movie.tagline:
        movie.tagline = "No tagline available"

    if movie.vote_average < 0 or movie.vote_average > 10:
        movie.vote_average = 0
    if movie.vote_count < 0:
        movie.vote_count = 0
    if movie.popularity < 0:
        movie.popularity = 0
    if movie.runtime < 0:
        movie.runtime = 0
    return movie


def validate_ratings(ratings: Ratings) -> Ratings:
    if ratings.tmdb < 0 or ratings.tmdb > 10:
        ratings.tmdb = 0
    if ratings.omdb < 0 or ratings.omdb > 10:
        ratings.omdb = 0
    if ratings.imdb < 0 or ratings.imdb > 10:
        ratings.imdb = 0
    if ratings.rotten_tomatoes < 0 or ratings.rotten_tomatoes > 100:
        ratings.rotten_tomatoes = 0
    if ratings.metacritic < 0 or ratings.metacritic > 100:
        ratings.metacritic = 0
    return ratings


def calculate_average_rating(ratings: Ratings) -> float:
    """Average every positive rating on a 10-point scale, rounded to one decimal."""
    values = [r for r in (ratings.tmdb, ratings.omdb, ratings.imdb) if r > 0]
    # Rotten Tomatoes and Metacritic are percentages
    values += [r / 10.0 for r in (ratings.rotten_tomatoes, ratings.metacritic) if r > 0]
    if not values:
        return 0.0
    return round(sum(values) / len(values), 1)
