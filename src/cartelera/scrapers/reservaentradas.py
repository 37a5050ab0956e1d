"""reservaentradas.com scraper for independent cinemas."""

import asyncio
import logging
import re
from urllib.parse import urljoin

import httpx
from bs4 import BeautifulSoup, Tag

from cartelera.errors import ParseError
from cartelera.scrapers.base import BaseScraper
from cartelera.scrapers.models import Session, ShowRecord, Venue
from cartelera.utils.text import (
    clean_text,
    normalise_time,
    parse_local_date,
    parse_minutes,
    split_special_edition,
)

logger = logging.getLogger(__name__)

_ISO_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")


class ReservaEntradasScraper(BaseScraper):
    """
    Scraper for cinemas selling tickets through reservaentradas.com.

    The venue page is a grid of film cards; each card links to a film page
    with the synopsis, credits and sessions grouped by day. Card titles can
    carry special-edition markers ("CLUB VOSE: ...", "(40º aniversario)",
    "... 4K") which are moved to the special_edition field.
    """

    async def fetch_shows(self, venue: Venue) -> list[ShowRecord]:
        """Fetch the card grid, then every film page concurrently."""
        async with self.client() as client:
            response = await self.get(client, venue.source)
            cards = self._parse_cards(response.text, venue.source)
            if not cards:
                raise ParseError(f"No film cards found on {venue.source}")

            results = await asyncio.gather(
                *(self._fetch_film(client, title, url, poster) for title, url, poster in cards)
            )

        logger.info(f"{venue.name}: Found {len(results)} shows")
        return list(results)

    def _parse_cards(self, html: str, base_url: str) -> list[tuple[str, str, str | None]]:
        """Return (title, film page URL, poster URL) for each card in grid order."""
        soup = self.soup(html)
        cards: list[tuple[str, str, str | None]] = []

        for card in soup.select(".movie-card"):
            link = card.select_one(".movie-card__title a[href]")
            title = clean_text(link.get_text()) if link else ""
            if not title:
                logger.warning("Skipping film card without title")
                continue

            img = card.select_one("img[src]")
            poster = urljoin(base_url, img["src"]) if img else None
            cards.append((title, urljoin(base_url, link["href"]), poster))

        return cards

    async def _fetch_film(
        self,
        client: httpx.AsyncClient,
        raw_title: str,
        url: str,
        poster: str | None,
    ) -> ShowRecord:
        """
        Fetch a film page and build its show.

        The card already provides the title, so a failing film page still
        yields a show, just without sessions or credits.
        """
        name, special_edition = split_special_edition(raw_title)
        try:
            response = await self.get(client, url)
            return self._parse_film(response.text, name, special_edition, url, poster)
        except Exception as e:
            logger.warning(f"Failed to scrape film page {url}, keeping card data: {e}")
            return self.build_show(
                name, (), special_edition=special_edition, poster=poster, source=url
            )

    def _parse_film(
        self,
        html: str,
        name: str,
        special_edition: str | None,
        url: str,
        poster: str | None,
    ) -> ShowRecord:
        soup = self.soup(html)

        trailer = soup.select_one("a.movie-info__trailer[href]")
        cast = self._field(soup, ".movie-info__cast")
        genres = self._field(soup, ".movie-info__genre")

        sessions = tuple(
            session
            for day in soup.select(".sessions__day")
            for session in self._parse_day(day, url)
        )

        return self.build_show(
            name,
            sessions,
            special_edition=special_edition,
            synopsis=self._field(soup, ".movie-info__synopsis"),
            duration=parse_minutes(self._field(soup, ".movie-info__duration")),
            poster=poster,
            trailer=trailer["href"] if trailer else None,
            genres=genres.split(", ") if genres else None,
            director=self._field(soup, ".movie-info__director"),
            actors=cast.split(", ") if cast else None,
            source=url,
        )

    def _field(self, soup: BeautifulSoup, selector: str) -> str | None:
        """Text of a field, without its "<strong>Director:</strong>" label."""
        elem = soup.select_one(selector)
        if not elem:
            return None
        label = elem.find(["strong", "b"])
        if label:
            label.decompose()
        return clean_text(elem.get_text(" ")) or None

    def _parse_day(self, day: Tag, url: str) -> list[Session]:
        """Parse the sessions of one day block."""
        data_date = day.get("data-date") or ""
        if _ISO_DATE_RE.match(data_date):
            session_date = data_date
        else:
            heading = day.find(["h2", "h3", "h4"])
            session_date = parse_local_date(heading.get_text() if heading else data_date)

        parsed = (self._parse_session(link, session_date, url) for link in day.select("a.session"))
        return [session for session in parsed if session is not None]

    def _parse_session(self, link: Tag, session_date: str | None, url: str) -> Session | None:
        time_elem = link.select_one(".session__time")
        time = normalise_time(time_elem.get_text() if time_elem else link.get_text())
        if not time:
            logger.warning(f"Session without time on {url}: {clean_text(link.get_text())}")
            return None

        room_elem = link.select_one(".session__room")
        version_elem = link.select_one(".session__version")
        room = clean_text(room_elem.get_text()) if room_elem else ""
        version = clean_text(version_elem.get_text()) if version_elem else ""
        href = link.get("href")
        return Session(
            time=time,
            room=re.sub(r"^sala\s+", "", room, flags=re.IGNORECASE) or None,
            date=session_date,
            type=version or None,
            url=urljoin(url, href) if href else None,
        )
