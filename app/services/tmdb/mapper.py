from typing import Any

from app.core.exceptions import ProviderResponseError
from app.models.media import (
    CastMember,
    Credits,
    CrewMember,
    Genre,
    Movie,
    ProductionCompany,
    SpokenLanguage,
    TVShow,
)
from app.utils import validate_movie_data


def _text(value: Any) -> str:
    # TMDB sends null for missing strings
    return value if isinstance(value, str) else ""


def _records(payload: Any, field: str) -> list[dict[str, Any]]:
    items = payload.get(field) if isinstance(payload, dict) else None
    if not isinstance(items, list):
        return []
    return [item for item in items if isinstance(item, dict) and item.get("id") is not None]


def results_of(payload: Any) -> list[dict[str, Any]]:
    """Return the ``results`` array of a listing payload or raise on a malformed body."""
    if not isinstance(payload, dict):
        raise ProviderResponseError("TMDB listing payload is not an object")
    return _records(payload, "results")


def genres_from_tmdb(payload: Any) -> list[Genre]:
    return [Genre(id=g["id"], name=_text(g.get("name"))) for g in _records(payload, "genres")]


def credits_from_tmdb(payload: Any) -> Credits:
    return Credits(
        cast=[
            CastMember(
                id=c["id"],
                name=_text(c.get("name")),
                character=_text(c.get("character")),
                profile_path=_text(c.get("profile_path")),
                order=c.get("order") or 0,
            )
            for c in _records(payload, "cast")
        ],
        crew=[
            CrewMember(
                id=c["id"],
                name=_text(c.get("name")),
                job=_text(c.get("job")),
                department=_text(c.get("department")),
                profile_path=_text(c.get("profile_path")),
            )
            for c in _records(payload, "crew")
        ],
    )


def _companies(payload: dict[str, Any]) -> list[ProductionCompany]:
    return [
        ProductionCompany(
            id=c["id"],
            name=_text(c.get("name")),
            logo_path=_text(c.get("logo_path")),
            origin_country=_text(c.get("origin_country")),
        )
        for c in _records(payload, "production_companies")
    ]


def _languages(payload: dict[str, Any]) -> list[SpokenLanguage]:
    languages = payload.get("spoken_languages") or []
    return [
        SpokenLanguage(iso_639_1=_text(lang.get("iso_639_1")), name=_text(lang.get("name")))
        for lang in languages
        if isinstance(lang, dict)
    ]


def movie_from_tmdb(payload: Any, media_type: str = "movie") -> Movie:
    """
    Convert a TMDB movie or TV record (listing or detail) into a Movie.

    TV records are folded into the same shape: name becomes title and the
    first air date becomes the release date.
    """
    if not isinstance(payload, dict) or payload.get("id") is None:
        raise ProviderResponseError("TMDB record is missing an id")

    if media_type == "tv":
        title = _text(payload.get("name"))
        original_title = _text(payload.get("original_name"))
        release_date = _text(payload.get("first_air_date"))
    else:
        title = _text(payload.get("title"))
        original_title = _text(payload.get("original_title"))
        release_date = _text(payload.get("release_date"))

    vote_average = float(payload.get("vote_average") or 0.0)
    movie = Movie(
        id=payload["id"],
        title=title,
        original_title=original_title,
        overview=_text(payload.get("overview")),
        poster_path=_text(payload.get("poster_path")),
        backdrop_path=_text(payload.get("backdrop_path")),
        release_date=release_date,
        runtime=payload.get("runtime") or 0,
        status=_text(payload.get("status")),
        tagline=_text(payload.get("tagline")),
        vote_average=vote_average,
        vote_count=payload.get("vote_count") or 0,
        popularity=float(payload.get("popularity") or 0.0),
        adult=bool(payload.get("adult")),
        video=bool(payload.get("video")),
        genre_ids=[g for g in payload.get("genre_ids") or [] if isinstance(g, int)],
        genres=genres_from_tmdb(payload),
        production_companies=_companies(payload),
        spoken_languages=_languages(payload),
        credits=credits_from_tmdb(payload.get("credits")),
        media_type=media_type,
    )
    movie.ratings.tmdb = vote_average
    return validate_movie_data(movie)


def tv_from_tmdb(payload: Any) -> TVShow:
    if not isinstance(payload, dict) or payload.get("id") is None:
        raise ProviderResponseError("TMDB TV record is missing an id")
    return TVShow(
        id=payload["id"],
        name=_text(payload.get("name")),
        original_name=_text(payload.get("original_name")),
        overview=_text(payload.get("overview")),
        poster_path=_text(payload.get("poster_path")),
        backdrop_path=_text(payload.get("backdrop_path")),
        first_air_date=_text(payload.get("first_air_date")),
        last_air_date=_text(payload.get("last_air_date")),
        number_of_seasons=payload.get("number_of_seasons") or 0,
        number_of_episodes=payload.get("number_of_episodes") or 0,
        status=_text(payload.get("status")),
        tagline=_text(payload.get("tagline")),
        vote_average=float(payload.get("vote_average") or 0.0),
        vote_count=payload.get("vote_count") or 0,
        popularity=float(payload.get("popularity") or 0.0),
        genres=genres_from_tmdb(payload),
        production_companies=_companies(payload),
        spoken_languages=_languages(payload),
    )
