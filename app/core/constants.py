"""
Core constants used across the application. Keep these simple and documented.
"""

# Recommendation explanations, first matching rule wins
REASON_CATEGORY: str = "Similar genres to your favorites"
REASON_RATING: str = "Matches your rating preferences"
REASON_YEAR: str = "From your preferred time period"
REASON_DEFAULT: str = "Based on your watchlist preferences"

CATEGORY_REASON_THRESHOLD: float = 0.5
RATING_REASON_THRESHOLD: float = 0.7
YEAR_REASON_THRESHOLD: float = 0.3

# Provider page size for trending and discover listings
PROVIDER_PAGE_SIZE: int = 20

# A genre counts as popular when it appears on this many trending titles
POPULAR_GENRE_MIN_COUNT: int = 3

PLACEHOLDER_POSTER: str = "/placeholder-poster.jpg"
PLACEHOLDER_BACKDROP: str = "/placeholder-backdrop.jpg"
