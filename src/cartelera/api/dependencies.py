"""Service construction for the API and the scheduled refresh."""

from functools import lru_cache

from cartelera.config import Settings, settings
from cartelera.data.venues import VenueRegistry
from cartelera.database import AsyncSessionLocal
from cartelera.scrapers.directory import DirectoryScraper
from cartelera.services.cache import ResponseCache
from cartelera.services.catalog_store import CatalogStore
from cartelera.services.orchestrator import CarteleraService
from cartelera.services.reconciler import Reconciler
from cartelera.services.tmdb_client import TMDbClient


def build_service(config: Settings = settings) -> CarteleraService:
    """Wire a CarteleraService from configuration."""
    cache = ResponseCache(max_size=config.cache_max_size)
    tmdb_client = TMDbClient(
        api_key=config.tmdb_api_key,
        base_url=config.tmdb_base_url,
        timeout=config.scrape_timeout,
        cache=cache,
        cache_ttl=config.cache_long_ttl,
    )
    reconciler = Reconciler(
        tmdb_client,
        language=config.tmdb_language,
        tolerance_minutes=config.match_tolerance_minutes,
        search_current_year=config.tmdb_search_current_year,
    )
    directory = DirectoryScraper(
        url=config.directory_url,
        timeout=config.scrape_timeout,
        user_agent=config.user_agent,
    )
    return CarteleraService(
        registry=VenueRegistry(),
        cache=cache,
        store=CatalogStore(AsyncSessionLocal),
        reconciler=reconciler,
        directory=directory,
        short_ttl=config.cache_short_ttl,
        refresh_concurrency=config.refresh_concurrency,
    )


@lru_cache
def get_service() -> CarteleraService:
    """Process-wide service shared by requests and the scheduler."""
    return build_service()
