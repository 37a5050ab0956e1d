"""Cinesa scraper using their JSON listings feed."""

import logging
from typing import Any

from cartelera.errors import ParseError
from cartelera.scrapers.base import BaseScraper
from cartelera.scrapers.models import Session, ShowRecord, Venue
from cartelera.utils.text import clean_text, normalise_time, parse_local_date

logger = logging.getLogger(__name__)


class CinesaScraper(BaseScraper):
    """
    Scraper for Cinesa cinemas (GranCasa, Puerto Venecia).

    The feed is nested as day → film → cinema → format → room → session and
    covers a single day, given once at the root as "dia".
    """

    FILM_URL = "https://www.cinesa.es/Peliculas/{slug}"

    async def fetch_shows(self, venue: Venue) -> list[ShowRecord]:
        """Fetch the venue's feed and flatten it into one show per film."""
        async with self.client() as client:
            response = await self.get(client, venue.source)

        try:
            payload = response.json()
        except ValueError as e:
            raise ParseError(f"Invalid JSON from {venue.source}: {e}") from e

        shows = self._parse_feed(payload, venue.source)
        logger.info(f"{venue.name}: Found {len(shows)} shows")
        return shows

    def _parse_feed(self, payload: dict[str, Any], url: str) -> list[ShowRecord]:
        """Parse the feed payload."""
        try:
            day = payload["cartelera"][0]
        except (KeyError, IndexError, TypeError) as e:
            raise ParseError(f"Missing 'cartelera' in feed from {url}") from e

        raw_day = str(day.get("dia") or "")
        session_date = parse_local_date(raw_day) or raw_day or None

        shows: list[ShowRecord] = []
        for film in day.get("peliculas", []):
            try:
                show = self._parse_film(film, session_date)
            except Exception as e:
                logger.warning(f"Failed to parse film in {url}: {e}")
                continue
            if show is not None:
                shows.append(show)
        return shows

    def _parse_film(self, film: dict[str, Any], session_date: str | None) -> ShowRecord | None:
        """Flatten one film's cinemas/formats/rooms into its sessions."""
        name = clean_text(film.get("titulo"))
        if not name:
            return None

        parsed = (
            self._parse_session(sesion, sala, session_date)
            for cine in film.get("cines", [])
            for tipo in cine.get("tipos", [])
            for sala in tipo.get("salas", [])
            for sesion in sala.get("sesiones", [])
        )
        sessions = tuple(session for session in parsed if session is not None)

        duration = film.get("duracion")
        slug = film.get("url")
        return self.build_show(
            name,
            sessions,
            duration=int(duration) if duration else None,
            poster=film.get("cartel"),
            genres=(film.get("genero") or "").split(" - "),
            director=film.get("directores"),
            actors=(film.get("actores") or "").split(", "),
            source=self.FILM_URL.format(slug=slug) if slug else None,
        )

    def _parse_session(
        self,
        sesion: dict[str, Any],
        sala: dict[str, Any],
        session_date: str | None,
    ) -> Session | None:
        time = normalise_time(str(sesion.get("hora") or ""))
        if not time:
            logger.debug(f"Skipping session without time: {sesion}")
            return None

        room = sala.get("sala")
        return Session(
            time=time,
            room=str(room) if room is not None else None,
            date=session_date,
            type=sesion.get("tipo") or None,
            url=sesion.get("ao") or None,
        )
