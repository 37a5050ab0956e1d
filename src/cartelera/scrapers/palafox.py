"""Cines Palafox scraper (Palafox, Aragonia and Cervantes)."""

import asyncio
import logging
import re
from urllib.parse import urljoin

import httpx
from bs4 import Tag

from cartelera.errors import ParseError
from cartelera.scrapers.base import BaseScraper
from cartelera.scrapers.models import Session, ShowRecord, Venue
from cartelera.utils.text import clean_text, normalise_time, parse_local_date, parse_minutes

logger = logging.getLogger(__name__)


class PalafoxScraper(BaseScraper):
    """
    Scraper for the Cines Palafox family of websites.

    The listing page links to one detail page per film. Each detail page
    shows the sessions for a single day: the first list item holds the date
    as DD/MM/YYYY and the second holds one link per session, written as
    "Sala 3 - 20:30 (VOSE)".
    """

    SESSION_RE = re.compile(
        r"Sala\s+(\w+)\s*-\s*(\d{1,2}:\d{2})(?:\s*\(([^)]+)\))?",
        re.IGNORECASE,
    )

    async def fetch_shows(self, venue: Venue) -> list[ShowRecord]:
        """Fetch the listing page, then every film's detail page concurrently."""
        async with self.client() as client:
            response = await self.get(client, venue.source)
            detail_urls = self._parse_index(response.text, venue.source)
            if not detail_urls:
                raise ParseError(f"No films listed on {venue.source}")

            results = await asyncio.gather(
                *(self._fetch_detail(client, url) for url in detail_urls)
            )

        shows = [show for show in results if show is not None]
        logger.info(f"{venue.name}: Found {len(shows)} shows")
        return shows

    def _parse_index(self, html: str, base_url: str) -> list[str]:
        """Return the detail page URLs in listing order, without duplicates."""
        soup = self.soup(html)
        urls = [
            urljoin(base_url, link["href"])
            for link in soup.select(".views-field-nothing a[href]")
        ]
        return list(dict.fromkeys(urls))

    async def _fetch_detail(self, client: httpx.AsyncClient, url: str) -> ShowRecord | None:
        """Fetch and parse one detail page; failures drop only this film."""
        try:
            response = await self.get(client, url)
            return self._parse_detail(response.text, url)
        except ParseError as e:
            logger.warning(f"Parse error, skipping film: {e}")
        except Exception as e:
            logger.warning(f"Failed to scrape film page {url}: {e}")
        return None

    def _parse_detail(self, html: str, url: str) -> ShowRecord:
        """Parse a film detail page into a ShowRecord."""
        soup = self.soup(html)

        title_elem = soup.find("h1")
        name = clean_text(title_elem.get_text()) if title_elem else ""
        if not name:
            raise ParseError(f"No title found on {url}")

        poster_elem = soup.select_one(".imagecache-cartelDetalle")
        poster = poster_elem.get("src") if poster_elem else None
        trailer_elem = soup.select_one("#urlvideo")
        synopsis_elem = soup.select_one(".sinopsis p")

        # Genres first; duration, director and cast are always the last three.
        details = [clean_text(span.get_text()) for span in soup.select(".datos span")]
        genres = director = actors = duration = None
        if len(details) >= 4:
            genres = details[0].split(", ")
        if len(details) >= 3:
            duration = parse_minutes(details[-3])
            director = details[-2]
            actors = details[-1].split(", ")

        items = soup.select(".horarios ul li")
        session_date = parse_local_date(items[0].get_text()) if items else None
        links = items[1].find_all("a") if len(items) > 1 else []
        sessions = tuple(
            session
            for session in (self._parse_session(link, session_date, url) for link in links)
            if session is not None
        )

        return self.build_show(
            name,
            sessions,
            synopsis=synopsis_elem.get_text() if synopsis_elem else None,
            duration=duration,
            poster=urljoin(url, poster) if poster else None,
            trailer=trailer_elem.get_text() if trailer_elem else None,
            genres=genres,
            director=director,
            actors=actors,
            source=url,
        )

    def _parse_session(self, link: Tag, session_date: str | None, page_url: str) -> Session | None:
        """Parse a "Sala 3 - 20:30 (VOSE)" link; the type group is optional."""
        text = clean_text(link.get_text())
        match = self.SESSION_RE.search(text)
        time = normalise_time(match.group(2)) if match else None
        if not match or not time:
            logger.warning(f"Unrecognised session '{text}' on {page_url}")
            return None

        href = link.get("href")
        return Session(
            time=time,
            room=match.group(1),
            date=session_date,
            type=match.group(3),
            url=urljoin(page_url, href) if href else None,
        )
