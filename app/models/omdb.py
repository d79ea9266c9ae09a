from pydantic import BaseModel, ConfigDict, Field


class OMDBRating(BaseModel):
    source: str = Field(default="", alias="Source")
    value: str = Field(default="", alias="Value")


class OMDBRecord(BaseModel):
    """One title as returned by OMDB. Values are strings, "N/A" when unknown."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    title: str = Field(default="", alias="Title")
    year: str = Field(default="", alias="Year")
    rated: str = Field(default="", alias="Rated")
    released: str = Field(default="", alias="Released")
    runtime: str = Field(default="", alias="Runtime")
    genre: str = Field(default="", alias="Genre")
    director: str = Field(default="", alias="Director")
    writer: str = Field(default="", alias="Writer")
    actors: str = Field(default="", alias="Actors")
    plot: str = Field(default="", alias="Plot")
    language: str = Field(default="", alias="Language")
    country: str = Field(default="", alias="Country")
    awards: str = Field(default="", alias="Awards")
    poster: str = Field(default="", alias="Poster")
    ratings: list[OMDBRating] = Field(default_factory=list, alias="Ratings")
    metascore: str = Field(default="", alias="Metascore")
    imdb_rating: str = Field(default="", alias="imdbRating")
    imdb_votes: str = Field(default="", alias="imdbVotes")
    imdb_id: str = Field(default="", alias="imdbID")
    type: str = Field(default="", alias="Type")
    box_office: str = Field(default="", alias="BoxOffice")
