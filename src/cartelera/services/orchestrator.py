"""Cached venue listings and the bulk refresh job."""

import asyncio
import logging
from collections.abc import Callable
from dataclasses import asdict
from datetime import datetime, timezone

from cartelera.data.venues import VenueRegistry
from cartelera.errors import NotFoundError, ParseError, UpstreamFetchError
from cartelera.schemas import (
    CacheStatusResponse,
    RefreshResponse,
    ShowResponse,
    VenueRefreshResult,
    VenueResponse,
    VenueShowsResponse,
)
from cartelera.scrapers import get_scraper
from cartelera.scrapers.base import BaseScraper
from cartelera.scrapers.directory import DirectoryScraper
from cartelera.scrapers.models import Person, Session, ShowRecord, Venue
from cartelera.services.cache import ResponseCache
from cartelera.services.catalog_store import CatalogStore
from cartelera.services.reconciler import MatchStatus, Reconciler

logger = logging.getLogger(__name__)


class CarteleraService:
    """
    Serves venue listings through the response cache.

    A cache miss runs the venue's scraper (and the reconciler for enriched
    listings), persists the result to the catalog store, then caches it with
    the short TTL. Concurrent misses for the same key each do the work.
    """

    def __init__(
        self,
        registry: VenueRegistry,
        cache: ResponseCache,
        store: CatalogStore,
        reconciler: Reconciler,
        directory: DirectoryScraper,
        short_ttl: int = 3600,
        refresh_concurrency: int = 4,
        scraper_factory: Callable[[str], BaseScraper | None] = get_scraper,
    ) -> None:
        """
        Initialize service.

        Args:
            registry: Known venues
            cache: Shared response cache
            store: Persistence for venues and shows
            reconciler: TMDb matcher for enriched listings
            directory: Scraper for the provider-wide venue directory
            short_ttl: TTL for venue lists and listings, in seconds
            refresh_concurrency: Venues refreshed in parallel by refresh_all
            scraper_factory: Maps a venue family to a scraper
        """
        self.registry = registry
        self.cache = cache
        self.store = store
        self.reconciler = reconciler
        self.directory = directory
        self.short_ttl = short_ttl
        self.refresh_concurrency = refresh_concurrency
        self.scraper_factory = scraper_factory

    async def list_venues(self, location: str | None = None) -> list[VenueResponse]:
        """
        All venues, or those in any of the comma-separated locations.

        Location matching ignores case and surrounding whitespace.
        """
        locations = sorted(
            {part.strip().casefold() for part in (location or "").split(",") if part.strip()}
        )
        key = f"cinemas/{','.join(locations)}" if locations else "cinemas"

        cached = self.cache.get(key)
        if cached is not None:
            return [VenueResponse.model_validate(v) for v in cached]

        venues = [
            VenueResponse.model_validate(venue, from_attributes=True)
            for venue in self.registry.all()
            if not locations or (venue.location or "").casefold() in locations
        ]
        self.cache.set(key, [v.model_dump(mode="json") for v in venues], self.short_ttl)
        return venues

    async def get_venue(self, venue_id: str) -> VenueResponse:
        """Venue metadata, without listings."""
        return VenueResponse.model_validate(self._require(venue_id), from_attributes=True)

    async def get_shows(self, venue_id: str) -> VenueShowsResponse:
        """
        Scraped listing for a venue.

        Raises:
            NotFoundError: Unknown venue id
            UpstreamFetchError: The source failed or listed nothing
        """
        venue = self._require(venue_id)
        key = f"cinema/{venue_id}/basic"

        cached = self.cache.get(key)
        if cached is not None:
            return VenueShowsResponse.model_validate(cached)

        shows = await self._scrape(venue)
        last_updated = datetime.now(timezone.utc).isoformat()

        await self.store.upsert_shows(shows)
        await self.store.upsert_venue(venue, last_updated, shows)

        response = _venue_shows(venue, last_updated, shows)
        self.cache.set(key, response.model_dump(mode="json"), self.short_ttl)
        return response

    async def get_enriched_shows(self, venue_id: str) -> VenueShowsResponse:
        """
        Listing for a venue with every show reconciled against TMDb.

        Shows that cannot be matched are returned as scraped.
        """
        venue = self._require(venue_id)
        key = f"cinema/{venue_id}/pro"

        cached = self.cache.get(key)
        if cached is not None:
            return VenueShowsResponse.model_validate(cached)

        listing = await self.get_shows(venue_id)
        outcomes = await self.reconciler.reconcile_all([_record(s) for s in listing.shows])
        shows = [outcome.show for outcome in outcomes]

        matched = [o.show for o in outcomes if o.status is MatchStatus.MATCHED]
        await self.store.upsert_shows(matched)

        response = _venue_shows(venue, listing.last_updated, shows)
        self.cache.set(key, response.model_dump(mode="json"), self.short_ttl)
        return response

    def cache_status(self) -> CacheStatusResponse:
        return CacheStatusResponse(**self.cache.status())

    async def refresh_all(self) -> RefreshResponse:
        """
        Rebuild the cache for every venue.

        Clears the cache, refreshes the registry from the venue directory,
        then fetches the enriched listing of each venue with bounded
        parallelism. A failing venue is reported in the results and does not
        stop the others.
        """
        logger.info("Starting refresh of all venues")
        self.cache.clear()

        try:
            discovered = await self.directory.fetch_venues()
        except UpstreamFetchError as e:
            logger.error(f"Venue directory refresh failed, keeping registry: {e}")
        else:
            self.registry.merge(discovered)

        venues = self.registry.all()
        try:
            await self.store.upsert_venues(venues)
        except Exception as e:
            logger.error(f"Could not persist venue registry: {e}", exc_info=True)

        sem = asyncio.Semaphore(self.refresh_concurrency)

        async def refresh_one(venue: Venue) -> VenueRefreshResult:
            async with sem:
                try:
                    await self.get_enriched_shows(venue.id)
                except ParseError as e:
                    logger.error(f"Layout changed for {venue.name}: {e}")
                    return VenueRefreshResult(venue_id=venue.id, success=False, error=str(e))
                except Exception as e:
                    logger.error(f"Error refreshing {venue.name}: {e}", exc_info=True)
                    return VenueRefreshResult(venue_id=venue.id, success=False, error=str(e))
                return VenueRefreshResult(venue_id=venue.id, success=True)

        results = await asyncio.gather(*(refresh_one(v) for v in venues))

        failures = sum(1 for r in results if not r.success)
        logger.info(
            f"Refresh complete: {len(results) - failures} succeeded, {failures} failed"
        )
        return RefreshResponse(**self.cache.status(), results=list(results))

    async def load_registry(self) -> None:
        """Add venues found by earlier directory refreshes to the registry."""
        venues = await self.store.get_venues()
        self.registry.merge(venues)

    def _require(self, venue_id: str) -> Venue:
        venue = self.registry.get(venue_id)
        if venue is None:
            raise NotFoundError(venue_id)
        return venue

    async def _scrape(self, venue: Venue) -> list[ShowRecord]:
        scraper = self.scraper_factory(venue.family)
        if scraper is None:
            raise UpstreamFetchError(f"No scraper for {venue.name} (family: {venue.family})")

        shows = await scraper.fetch_shows(venue)
        if not shows:
            raise UpstreamFetchError(f"No shows found for {venue.name}")

        logger.info(f"Found {len(shows)} shows for {venue.name}")
        return shows


def _venue_shows(venue: Venue, last_updated: str, shows: list[ShowRecord]) -> VenueShowsResponse:
    return VenueShowsResponse(
        **asdict(venue),
        last_updated=last_updated,
        shows=[ShowResponse.model_validate(asdict(show)) for show in shows],
    )


def _record(show: ShowResponse) -> ShowRecord:
    """Rebuild the scraped record from a cached listing entry."""
    return ShowRecord(
        id=show.id,
        name=show.name,
        sessions=tuple(Session(**s.model_dump()) for s in show.sessions),
        special_edition=show.special_edition,
        synopsis=show.synopsis,
        duration=show.duration,
        duration_readable=show.duration_readable,
        poster=show.poster,
        trailer=show.trailer,
        genres=show.genres,
        director=Person(**show.director.model_dump()) if show.director else None,
        actors=None if show.actors is None else [Person(**a.model_dump()) for a in show.actors],
        source=show.source,
    )
