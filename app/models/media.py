from pydantic import BaseModel, Field, model_validator


class Genre(BaseModel):
    id: int
    name: str = ""


class ProductionCompany(BaseModel):
    id: int
    name: str = ""
    logo_path: str = ""
    origin_country: str = ""


class SpokenLanguage(BaseModel):
    iso_639_1: str = ""
    name: str = ""


class CastMember(BaseModel):
    id: int
    name: str = ""
    character: str = ""
    profile_path: str = ""
    order: int = 0


class CrewMember(BaseModel):
    id: int
    name: str = ""
    job: str = ""
    department: str = ""
    profile_path: str = ""


class Credits(BaseModel):
    cast: list[CastMember] = Field(default_factory=list)
    crew: list[CrewMember] = Field(default_factory=list)


class Ratings(BaseModel):
    """Ratings from the different sources. TMDB/OMDB/IMDb are 0-10, RT and Metacritic are 0-100."""

    tmdb: float = 0.0
    omdb: float = 0.0
    rotten_tomatoes: float = 0.0
    imdb: float = 0.0
    metacritic: float = 0.0
    average: float = 0.0


class Movie(BaseModel):
    """
    A movie or TV title as served by the API.

    Trending, search and discover listings produce these too, so the same
    model is the candidate type scored by the recommender.
    """

    id: int
    title: str = ""
    original_title: str = ""
    overview: str = ""
    poster_path: str = ""
    backdrop_path: str = ""
    release_date: str = ""
    runtime: int = 0
    status: str = ""
    tagline: str = ""
    vote_average: float = 0.0
    vote_count: int = 0
    popularity: float = 0.0
    adult: bool = False
    video: bool = False
    genre_ids: list[int] = Field(default_factory=list)
    genres: list[Genre] = Field(default_factory=list)
    production_companies: list[ProductionCompany] = Field(default_factory=list)
    spoken_languages: list[SpokenLanguage] = Field(default_factory=list)
    credits: Credits = Field(default_factory=Credits)
    ratings: Ratings = Field(default_factory=Ratings)
    media_type: str = "movie"
    trailer_key: str | None = None

    @model_validator(mode="after")
    def _fill_genre_ids(self) -> "Movie":
        # detail payloads carry full genre objects instead of ids
        if not self.genre_ids and self.genres:
            self.genre_ids = [g.id for g in self.genres]
        return self


class TVShow(BaseModel):
    id: int
    name: str = ""
    original_name: str = ""
    overview: str = ""
    poster_path: str = ""
    backdrop_path: str = ""
    first_air_date: str = ""
    last_air_date: str = ""
    number_of_seasons: int = 0
    number_of_episodes: int = 0
    status: str = ""
    tagline: str = ""
    vote_average: float = 0.0
    vote_count: int = 0
    popularity: float = 0.0
    genres: list[Genre] = Field(default_factory=list)
    production_companies: list[ProductionCompany] = Field(default_factory=list)
    spoken_languages: list[SpokenLanguage] = Field(default_factory=list)
    media_type: str = "tv"


class MediaPage(BaseModel):
    page: int = 1
    results: list[Movie] = Field(default_factory=list)
    total_pages: int = 0
    total_results: int = 0
