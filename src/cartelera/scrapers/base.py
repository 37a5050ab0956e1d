"""Base scraper interface for all cinema scrapers."""

from abc import ABC, abstractmethod

import httpx
from bs4 import BeautifulSoup

from cartelera.config import settings
from cartelera.errors import FetchError
from cartelera.scrapers.models import Person, Session, ShowRecord, Venue
from cartelera.utils.text import clean_text, format_duration, slugify


class PageFetcher:
    """HTTP and HTML helpers shared by every scraper."""

    def __init__(self, timeout: float | None = None, user_agent: str | None = None) -> None:
        self.timeout = timeout or settings.scrape_timeout
        self.user_agent = user_agent or settings.user_agent

    def client(self) -> httpx.AsyncClient:
        """Create the HTTP client used for one scrape."""
        return httpx.AsyncClient(
            timeout=self.timeout,
            headers={"User-Agent": self.user_agent},
            follow_redirects=True,
        )

    async def get(self, client: httpx.AsyncClient, url: str) -> httpx.Response:
        """GET a URL, wrapping transport and status errors in FetchError."""
        try:
            response = await client.get(url)
            response.raise_for_status()
        except httpx.HTTPError as e:
            raise FetchError(f"Failed to fetch {url}: {e}") from e
        return response

    def soup(self, html: str) -> BeautifulSoup:
        return BeautifulSoup(html, "html.parser")


class BaseScraper(PageFetcher, ABC):
    """
    Abstract base class for all cinema scrapers.

    Each subclass handles one family of cinema websites and turns its pages
    into ShowRecord objects. Scrapers keep no state between calls.
    """

    @abstractmethod
    async def fetch_shows(self, venue: Venue) -> list[ShowRecord]:
        """
        Fetch the current listings for a venue.

        Args:
            venue: Venue whose source URL is scraped

        Returns:
            Shows in the order they appear on the website

        Raises:
            FetchError: The source could not be downloaded
            ParseError: The page lacks the elements the scraper relies on
        """

    def build_show(
        self,
        name: str,
        sessions: tuple[Session, ...],
        *,
        special_edition: str | None = None,
        synopsis: str | None = None,
        duration: int | None = None,
        poster: str | None = None,
        trailer: str | None = None,
        genres: list[str] | None = None,
        director: str | None = None,
        actors: list[str] | None = None,
        source: str | None = None,
    ) -> ShowRecord:
        """
        Assemble a ShowRecord with a derived id and readable duration.

        Empty strings coming from the page are stored as None.
        """
        director = clean_text(director)
        return ShowRecord(
            id=slugify(name),
            name=name,
            sessions=sessions,
            special_edition=special_edition,
            synopsis=clean_text(synopsis) or None,
            duration=duration,
            duration_readable=format_duration(duration) if duration else None,
            poster=poster or None,
            trailer=clean_text(trailer) or None,
            genres=[g for g in (clean_text(g) for g in genres or []) if g] or None,
            director=Person(name=director) if director else None,
            actors=[Person(name=a) for a in (clean_text(a) for a in actors or []) if a] or None,
            source=source,
        )
