"""Matching of scraped shows to TMDb films."""

import asyncio
import logging
from collections.abc import Callable
from dataclasses import dataclass, fields
from datetime import date
from enum import Enum
from typing import Any

from rapidfuzz import fuzz, process

from cartelera.scrapers.models import EnrichedShow, Person, ShowRecord
from cartelera.services.tmdb_client import TMDbClient
from cartelera.utils.text import format_duration, sanitize_title

logger = logging.getLogger(__name__)


class MatchStatus(str, Enum):
    MATCHED = "matched"
    MISS = "miss"
    FAILED = "failed"


@dataclass
class ReconcileOutcome:
    """Result of reconciling one show; the show is unchanged unless MATCHED."""

    show: ShowRecord
    status: MatchStatus
    error: str | None = None


class Reconciler:
    """
    Service for matching scraped shows to TMDb films.

    Uses a multi-stage matching process:
    1. Search TMDb for the sanitized title
    2. Narrow the results by title: exact, then scraped-contains-candidate,
       then candidate-contains-scraped (a single search result always passes)
    3. Break ties between several candidates by runtime
    4. Reject matches whose runtime is far from the scraped duration
    5. Merge details, credits and trailer into an EnrichedShow
    """

    PROFILE_SIZE = "w185"
    POSTER_SIZE = "w342"
    TRAILER_URL = "https://www.youtube.com/watch?v={key}"

    def __init__(
        self,
        tmdb_client: TMDbClient,
        language: str = "es-ES",
        tolerance_minutes: int = 20,
        search_current_year: bool = True,
        today: Callable[[], date] = date.today,
    ) -> None:
        """
        Initialize reconciler.

        Args:
            tmdb_client: TMDb client
            language: Language for TMDb queries (scraped titles are Spanish)
            tolerance_minutes: Allowed runtime difference for a match
            search_current_year: Restrict searches to the current year
            today: Date provider used for the search year
        """
        self.tmdb = tmdb_client
        self.language = language
        self.tolerance = tolerance_minutes
        self.search_current_year = search_current_year
        self.today = today

    async def reconcile_all(self, shows: list[ShowRecord]) -> list[ReconcileOutcome]:
        """
        Reconcile every show concurrently.

        Outcomes are returned in the order of the input shows. A failure while
        reconciling one show only degrades that show.
        """
        if not shows:
            return []

        try:
            config = await self.tmdb.configuration()
        except Exception as e:
            logger.warning(f"TMDb configuration unavailable, images will be skipped: {e}")
            config = {}
        image_base = (config.get("images") or {}).get("secure_base_url")

        outcomes = await asyncio.gather(*(self._reconcile_one(show, image_base) for show in shows))

        matched = sum(1 for o in outcomes if o.status is MatchStatus.MATCHED)
        failed = sum(1 for o in outcomes if o.status is MatchStatus.FAILED)
        logger.info(f"Reconciled {len(shows)} shows: {matched} matched, {failed} failed")
        return list(outcomes)

    async def _reconcile_one(self, show: ShowRecord, image_base: str | None) -> ReconcileOutcome:
        try:
            result = await self.reconcile(show, image_base)
        except Exception as e:
            logger.warning(f"Reconciliation failed for '{show.name}': {e}", exc_info=True)
            return ReconcileOutcome(show=show, status=MatchStatus.FAILED, error=str(e))

        if isinstance(result, EnrichedShow):
            return ReconcileOutcome(show=result, status=MatchStatus.MATCHED)
        return ReconcileOutcome(show=result, status=MatchStatus.MISS)

    async def reconcile(self, show: ShowRecord, image_base: str | None = None) -> ShowRecord:
        """
        Match a show to a TMDb film.

        Args:
            show: Scraped show
            image_base: TMDb secure image base URL

        Returns:
            EnrichedShow on a match, otherwise the input show unchanged
        """
        query = sanitize_title(show.name)
        year = self.today().year if self.search_current_year else None

        search = await self.tmdb.search(query, self.language, year)
        results = search.get("results") or []
        if not results:
            logger.warning(f"'{query}' not found on TMDb")
            return show

        candidates = self.find_candidates(show.name, results)
        if not candidates:
            self._log_miss(query, results)
            return show

        if len(candidates) == 1:
            movie = await self.tmdb.movie(candidates[0]["id"], self.language)
        else:
            movie = await self._pick_by_runtime(show, candidates)
            if movie is None:
                logger.warning(
                    f"'{show.name}' not matched with any of {len(candidates)} candidates"
                )
                return show

        if not self.runtime_agrees(show.duration, movie.get("runtime")):
            logger.warning(
                f"'{show.name}' and '{movie.get('title')}' duration doesn't match: "
                f"{show.duration} & {movie.get('runtime')}"
            )
            return show

        credits, videos = await asyncio.gather(
            self.tmdb.movie_credits(movie["id"], self.language),
            self.tmdb.movie_videos(movie["id"], self.language),
        )
        logger.info(f"Matched '{show.name}' -> '{movie.get('title')}' ({movie['id']})")
        return self._merge(show, movie, credits, videos, image_base)

    @staticmethod
    def find_candidates(name: str, results: list[dict[str, Any]]) -> list[dict[str, Any]]:
        """
        Narrow search results to the films whose title fits the scraped one.

        Tiers are tried in order and the first non-empty one wins.
        """
        if len(results) == 1:
            return list(results)

        key = sanitize_title(name)
        titled = [(sanitize_title(r.get("title") or ""), r) for r in results]
        titled = [(title, r) for title, r in titled if title]

        tiers: list[Callable[[str], bool]] = [
            lambda title: title == key,
            lambda title: title in key,
            lambda title: key in title,
        ]
        for tier in tiers:
            matches = [r for title, r in titled if tier(title)]
            if matches:
                return matches
        return []

    def within_tolerance(self, duration: int | None, runtime: Any) -> bool:
        """True when both runtimes are known and at most the tolerance apart."""
        if not duration or not isinstance(runtime, (int, float)) or runtime <= 0:
            return False
        return abs(duration - runtime) <= self.tolerance

    def runtime_agrees(self, duration: int | None, runtime: Any) -> bool:
        """False only when both runtimes are known and further apart than the tolerance."""
        if not duration or not isinstance(runtime, (int, float)) or runtime <= 0:
            return True
        return abs(duration - runtime) <= self.tolerance

    async def _pick_by_runtime(
        self,
        show: ShowRecord,
        candidates: list[dict[str, Any]],
    ) -> dict[str, Any] | None:
        """
        Fetch every candidate's details and choose one by runtime.

        Waits for all fetches, then keeps the last candidate in search order
        whose runtime is within tolerance.
        """
        details = await asyncio.gather(
            *(self.tmdb.movie(c["id"], self.language) for c in candidates),
            return_exceptions=True,
        )

        chosen: dict[str, Any] | None = None
        for candidate, movie in zip(candidates, details):
            if isinstance(movie, Exception):
                logger.warning(f"TMDb details failed for candidate {candidate.get('id')}: {movie}")
                continue
            if self.within_tolerance(show.duration, movie.get("runtime")):
                logger.info(
                    f"Should match '{show.name}' duration: {show.duration} & {movie.get('runtime')}"
                )
                chosen = movie
        return chosen

    def _merge(
        self,
        show: ShowRecord,
        movie: dict[str, Any],
        credits: dict[str, Any],
        videos: dict[str, Any],
        image_base: str | None,
    ) -> EnrichedShow:
        """Overlay TMDb data on the scraped show."""

        def person(entry: dict[str, Any], character: bool = False) -> Person:
            return Person(
                name=entry.get("name") or "",
                picture=TMDbClient.image_url(image_base, self.PROFILE_SIZE, entry.get("profile_path")),
                character=entry.get("character") if character else None,
            )

        crew = credits.get("crew") or []
        director = next((person(c) for c in crew if c.get("job") == "Director"), None)
        writers = [person(c) for c in crew if c.get("job") in ("Screenplay", "Writer")]
        actors = [
            person(c, character=True)
            for c in credits.get("cast") or []
            if c.get("known_for_department") == "Acting"
        ]

        video_keys = [v.get("key") for v in videos.get("results") or [] if v.get("key")]
        trailer = self.TRAILER_URL.format(key=video_keys[0]) if video_keys else show.trailer

        runtime = movie.get("runtime")
        duration = runtime if isinstance(runtime, int) and runtime > 0 else show.duration
        release_date = movie.get("release_date") or None
        year = release_date[:4] if release_date else ""
        genres = [g["name"] for g in movie.get("genres") or [] if g.get("name")]

        values = {f.name: getattr(show, f.name) for f in fields(show)}
        values.update(
            name=movie.get("title") or show.name,
            original_name=movie.get("original_title"),
            duration=duration,
            duration_readable=format_duration(duration) if duration else None,
            poster=TMDbClient.image_url(image_base, self.POSTER_SIZE, movie.get("poster_path"))
            or show.poster,
            synopsis=movie.get("overview") or show.synopsis,
            trailer=trailer or None,
            genres=genres or show.genres,
            director=director,
            writers=writers or None,
            actors=actors,
            tmdb_id=movie.get("id"),
            imdb_id=movie.get("imdb_id"),
            tagline=movie.get("tagline") or None,
            budget=movie.get("budget"),
            revenue=movie.get("revenue"),
            year=int(year) if year.isdigit() else None,
            release_date=release_date,
            original_language=movie.get("original_language"),
            popularity=movie.get("popularity"),
            vote_average=movie.get("vote_average"),
            vote_count=movie.get("vote_count"),
        )
        return EnrichedShow(**values)

    def _log_miss(self, query: str, results: list[dict[str, Any]]) -> None:
        """Log a miss together with the closest rejected title."""
        titles = [sanitize_title(r.get("title") or "") for r in results]
        closest = process.extractOne(query, titles, scorer=fuzz.ratio)
        if closest:
            logger.warning(
                f"'{query}' got no title match; closest was '{closest[0]}' ({closest[1]:.1f}%)"
            )
        else:
            logger.warning(f"'{query}' got no title match")
