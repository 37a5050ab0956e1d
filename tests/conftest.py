"""Shared test fixtures."""

from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi import FastAPI

from cartelera.api.routes import cinemas, health
from cartelera.data.venues import VenueRegistry
from cartelera.errors import CarteleraError
from cartelera.main import cartelera_error_handler, unexpected_error_handler
from cartelera.services.cache import ResponseCache
from cartelera.services.orchestrator import CarteleraService
from cartelera.services.reconciler import MatchStatus, ReconcileOutcome
from helpers import FakeClock, make_show, make_venue


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def cache(clock: FakeClock) -> ResponseCache:
    return ResponseCache(max_size=50, clock=clock)


@pytest.fixture
def store() -> MagicMock:
    store = MagicMock()
    store.upsert_shows = AsyncMock()
    store.upsert_venue = AsyncMock()
    store.upsert_venues = AsyncMock()
    store.get_venues = AsyncMock(return_value=[])
    return store


@pytest.fixture
def reconciler() -> MagicMock:
    """Reconciler double that reports every show as a miss."""
    reconciler = MagicMock()

    async def reconcile_all(shows):
        return [ReconcileOutcome(show=s, status=MatchStatus.MISS) for s in shows]

    reconciler.reconcile_all = AsyncMock(side_effect=reconcile_all)
    return reconciler


@pytest.fixture
def directory() -> MagicMock:
    directory = MagicMock()
    directory.fetch_venues = AsyncMock(return_value=[])
    return directory


@pytest.fixture
def scraper() -> MagicMock:
    scraper = MagicMock()
    scraper.fetch_shows = AsyncMock(return_value=[make_show()])
    return scraper


@pytest.fixture
def service(
    cache: ResponseCache,
    store: MagicMock,
    reconciler: MagicMock,
    directory: MagicMock,
    scraper: MagicMock,
) -> CarteleraService:
    registry = VenueRegistry(
        [
            make_venue("palafox"),
            make_venue("grancasa", family="json-feed"),
            make_venue("lys", family="card-grid", location="Valencia"),
        ]
    )
    return CarteleraService(
        registry=registry,
        cache=cache,
        store=store,
        reconciler=reconciler,
        directory=directory,
        short_ttl=3600,
        refresh_concurrency=2,
        scraper_factory=lambda family: scraper,
    )


@pytest.fixture
def test_app() -> FastAPI:
    """Minimal FastAPI app without the APScheduler lifespan, for API tests."""
    app = FastAPI()
    app.add_exception_handler(CarteleraError, cartelera_error_handler)
    app.add_exception_handler(Exception, unexpected_error_handler)
    app.include_router(health.router)
    app.include_router(cinemas.router, prefix="/api")
    return app
