"""Data models for scrapers and the reconciler."""

import re
from dataclasses import dataclass

_TIME_RE = re.compile(r"^\d{2}:\d{2}$")


@dataclass(frozen=True)
class Venue:
    """A cinema with one fixed listings source."""

    id: str
    name: str
    family: str  # Scraper family tag, key into SCRAPER_REGISTRY
    source: str  # URL the scraper reads listings from
    address: str | None = None
    location: str | None = None  # City or province used for filtering
    website: str | None = None


@dataclass(frozen=True)
class Session:
    """One screening of a show."""

    time: str  # Local start time, "HH:MM"
    room: str | None = None
    date: str | None = None  # ISO date
    type: str | None = None  # e.g. "VOSE", "3D"
    url: str | None = None  # Booking URL

    def __post_init__(self) -> None:
        """Validate that time is zero-padded "HH:MM"."""
        if not _TIME_RE.match(self.time):
            raise ValueError(f"Session time must be 'HH:MM', got {self.time!r}")


@dataclass(frozen=True)
class Person:
    """Director, writer or cast member."""

    name: str
    picture: str | None = None
    character: str | None = None


@dataclass
class ShowRecord:
    """
    Normalized show as scraped from a cinema website.

    The id is slugify(name) so re-scraping the same film gives the same key.
    """

    id: str
    name: str
    sessions: tuple[Session, ...] = ()
    special_edition: str | None = None
    synopsis: str | None = None
    duration: int | None = None  # Minutes
    duration_readable: str | None = None
    poster: str | None = None
    trailer: str | None = None
    genres: list[str] | None = None
    director: Person | None = None
    actors: list[Person] | None = None
    source: str | None = None  # Page the show was scraped from


@dataclass
class EnrichedShow(ShowRecord):
    """ShowRecord merged with TMDb metadata."""

    original_name: str | None = None
    writers: list[Person] | None = None
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
