"""Pydantic schemas for show listings."""

from pydantic import BaseModel, ConfigDict

from cartelera.schemas.cinema import VenueResponse


class SessionResponse(BaseModel):
    """A single screening time."""

    model_config = ConfigDict(from_attributes=True)

    time: str
    room: str | None = None
    date: str | None = None
    type: str | None = None
    url: str | None = None


class PersonResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    name: str
    picture: str | None = None
    character: str | None = None


class ShowResponse(BaseModel):
    """
    Show response schema.

    Scraped fields are always present; the TMDb fields are filled only for
    enriched listings.
    """

    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    sessions: list[SessionResponse] = []
    special_edition: str | None = None
    synopsis: str | None = None
    duration: int | None = None
    duration_readable: str | None = None
    poster: str | None = None
    trailer: str | None = None
    genres: list[str] | None = None
    director: PersonResponse | None = None
    actors: list[PersonResponse] | None = None
    source: str | None = None

    # TMDb fields
    original_name: str | None = None
    writers: list[PersonResponse] | None = None
    tmdb_id: int | None = None
    imdb_id: str | None = None
    tagline: str | None = None
    budget: int | None = None
    revenue: int | None = None
    year: int | None = None
    release_date: str | None = None
    original_language: str | None = None
    popularity: float | None = None
    vote_average: float | None = None
    vote_count: int | None = None


class VenueShowsResponse(VenueResponse):
    """Venue with its current listing."""

    last_updated: str
    shows: list[ShowResponse]
