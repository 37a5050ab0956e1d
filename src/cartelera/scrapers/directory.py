"""reservaentradas.com cinema directory scraper."""

import logging
from urllib.parse import urljoin, urlparse

from cartelera.config import settings
from cartelera.errors import ParseError
from cartelera.scrapers.base import PageFetcher
from cartelera.scrapers.models import Venue
from cartelera.utils.text import clean_text

logger = logging.getLogger(__name__)


class DirectoryScraper(PageFetcher):
    """
    Scraper for the provider-wide cinema directory.

    Produces venues rather than shows; only used to refresh the venue
    registry. Venues are grouped by province, each province being a
    ".province" block with an h2 heading and one link per cinema.
    """

    FAMILY = "card-grid"

    def __init__(self, url: str | None = None, **kwargs) -> None:
        super().__init__(**kwargs)
        self.url = url or settings.directory_url

    async def fetch_venues(self) -> list[Venue]:
        """Fetch the directory page and return every listed cinema."""
        async with self.client() as client:
            response = await self.get(client, self.url)

        venues = self._parse_html(response.text)
        if not venues:
            raise ParseError(f"No cinemas found in directory {self.url}")

        logger.info(f"Directory: Found {len(venues)} cinemas")
        return venues

    def _parse_html(self, html: str) -> list[Venue]:
        soup = self.soup(html)
        venues: dict[str, Venue] = {}

        for province in soup.select(".province"):
            heading = province.find("h2")
            location = clean_text(heading.get_text()) if heading else None

            for link in province.select("a[href]"):
                name = clean_text(link.get_text())
                source = urljoin(self.url, link["href"])
                venue_id = self._venue_id(source)
                if not name or not venue_id:
                    logger.debug(f"Skipping directory link {link.get('href')!r}")
                    continue

                address_elem = link.find_next_sibling(class_="address")
                address = clean_text(address_elem.get_text()) if address_elem else ""
                venues.setdefault(
                    venue_id,
                    Venue(
                        id=venue_id,
                        name=name,
                        family=self.FAMILY,
                        source=source,
                        address=address or None,
                        location=location or None,
                    ),
                )

        return list(venues.values())

    def _venue_id(self, url: str) -> str | None:
        """Last path segment, e.g. ".../cine/zaragoza/cinesaragonia/" → "cinesaragonia"."""
        segments = [s for s in urlparse(url).path.split("/") if s]
        if len(segments) < 2 or segments[0] != "cine":
            return None
        return segments[-1].lower()
