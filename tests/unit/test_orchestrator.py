"""Tests for cached listings and the bulk refresh."""

from unittest.mock import AsyncMock, MagicMock

import pytest
from helpers import FakeClock, make_show, make_venue

from cartelera.data.venues import VenueRegistry
from cartelera.errors import FetchError, NotFoundError, ParseError, UpstreamFetchError
from cartelera.scrapers.models import EnrichedShow
from cartelera.services.cache import ResponseCache
from cartelera.services.orchestrator import CarteleraService
from cartelera.services.reconciler import MatchStatus, ReconcileOutcome


# ---------------------------------------------------------------------------
# list_venues / get_venue
# ---------------------------------------------------------------------------


class TestListVenues:
    async def test_returns_all_venues(self, service: CarteleraService) -> None:
        venues = await service.list_venues()
        assert [v.id for v in venues] == ["palafox", "grancasa", "lys"]
        assert service.cache.keys() == ["cinemas"]

    async def test_filters_by_location_ignoring_case(self, service: CarteleraService) -> None:
        venues = await service.list_venues(" valencia ")
        assert [v.id for v in venues] == ["lys"]

    async def test_filters_by_several_locations(self, service: CarteleraService) -> None:
        venues = await service.list_venues("Zaragoza,Valencia")
        assert [v.id for v in venues] == ["palafox", "grancasa", "lys"]

    async def test_location_cache_key_is_normalised(self, service: CarteleraService) -> None:
        await service.list_venues("Zaragoza, VALENCIA")
        await service.list_venues("valencia,zaragoza")
        assert service.cache.keys() == ["cinemas/valencia,zaragoza"]

    async def test_serves_from_cache(self, service: CarteleraService) -> None:
        service.cache.set("cinemas", [make_venue("cached").__dict__], ttl=60)
        venues = await service.list_venues()
        assert [v.id for v in venues] == ["cached"]


class TestGetVenue:
    async def test_returns_venue(self, service: CarteleraService) -> None:
        venue = await service.get_venue("lys")
        assert venue.location == "Valencia"
        assert venue.family == "card-grid"

    async def test_unknown_id_raises_not_found(self, service: CarteleraService) -> None:
        with pytest.raises(NotFoundError, match="Resource with ID 'nowhere' was not found"):
            await service.get_venue("nowhere")


# ---------------------------------------------------------------------------
# get_shows
# ---------------------------------------------------------------------------


class TestGetShows:
    async def test_scrapes_persists_and_caches(
        self,
        service: CarteleraService,
        store: MagicMock,
        scraper: MagicMock,
    ) -> None:
        response = await service.get_shows("palafox")

        assert response.id == "palafox"
        assert [s.id for s in response.shows] == ["dune"]
        assert [s.time for s in response.shows[0].sessions] == ["18:00", "20:30"]
        assert response.last_updated

        store.upsert_shows.assert_awaited_once()
        venue, last_updated, shows = store.upsert_venue.await_args.args
        assert venue.id == "palafox"
        assert last_updated == response.last_updated
        assert [s.id for s in shows] == ["dune"]
        assert service.cache.keys() == ["cinema/palafox/basic"]

    async def test_second_call_hits_cache(
        self, service: CarteleraService, scraper: MagicMock
    ) -> None:
        first = await service.get_shows("palafox")
        second = await service.get_shows("palafox")
        assert first == second
        scraper.fetch_shows.assert_awaited_once()

    async def test_expired_listing_is_scraped_again(
        self, service: CarteleraService, scraper: MagicMock, clock: FakeClock
    ) -> None:
        await service.get_shows("palafox")
        clock.advance(3601)
        await service.get_shows("palafox")
        assert scraper.fetch_shows.await_count == 2

    async def test_unknown_venue(self, service: CarteleraService, scraper: MagicMock) -> None:
        with pytest.raises(NotFoundError):
            await service.get_shows("nowhere")
        scraper.fetch_shows.assert_not_awaited()

    async def test_empty_listing_is_an_error(
        self, service: CarteleraService, scraper: MagicMock, store: MagicMock
    ) -> None:
        scraper.fetch_shows.return_value = []
        with pytest.raises(UpstreamFetchError, match="No shows found"):
            await service.get_shows("palafox")
        store.upsert_venue.assert_not_awaited()
        assert service.cache.keys() == []

    async def test_scraper_error_propagates(
        self, service: CarteleraService, scraper: MagicMock
    ) -> None:
        scraper.fetch_shows.side_effect = FetchError("boom")
        with pytest.raises(FetchError):
            await service.get_shows("palafox")
        assert service.cache.keys() == []

    async def test_unregistered_family(self, service: CarteleraService) -> None:
        service.scraper_factory = lambda family: None
        with pytest.raises(UpstreamFetchError, match="No scraper"):
            await service.get_shows("palafox")


# ---------------------------------------------------------------------------
# get_enriched_shows
# ---------------------------------------------------------------------------


class TestGetEnrichedShows:
    async def test_reconciles_and_caches_both_listings(
        self,
        service: CarteleraService,
        reconciler: MagicMock,
        store: MagicMock,
    ) -> None:
        show = make_show("Dune")
        enriched = EnrichedShow(**{**show.__dict__, "tmdb_id": 438631, "year": 2021})

        async def reconcile_all(shows):
            return [ReconcileOutcome(show=enriched, status=MatchStatus.MATCHED)]

        reconciler.reconcile_all.side_effect = reconcile_all

        response = await service.get_enriched_shows("palafox")

        assert response.shows[0].tmdb_id == 438631
        assert response.shows[0].year == 2021
        assert service.cache.keys() == ["cinema/palafox/basic", "cinema/palafox/pro"]
        assert store.upsert_shows.await_args_list[-1].args[0] == [enriched]

    async def test_passes_scraped_records_to_reconciler(
        self, service: CarteleraService, reconciler: MagicMock
    ) -> None:
        await service.get_enriched_shows("palafox")
        (shows,) = reconciler.reconcile_all.await_args.args
        assert shows == [make_show("Dune")]

    async def test_misses_are_returned_as_scraped(self, service: CarteleraService) -> None:
        response = await service.get_enriched_shows("palafox")
        assert response.shows[0].name == "Dune"
        assert response.shows[0].tmdb_id is None

    async def test_reuses_cached_basic_listing(
        self, service: CarteleraService, scraper: MagicMock
    ) -> None:
        await service.get_shows("palafox")
        await service.get_enriched_shows("palafox")
        scraper.fetch_shows.assert_awaited_once()

    async def test_serves_from_cache(
        self, service: CarteleraService, reconciler: MagicMock
    ) -> None:
        await service.get_enriched_shows("palafox")
        await service.get_enriched_shows("palafox")
        reconciler.reconcile_all.assert_awaited_once()


# ---------------------------------------------------------------------------
# refresh_all
# ---------------------------------------------------------------------------


class TestRefreshAll:
    @pytest.fixture
    def five_venue_service(
        self,
        cache: ResponseCache,
        store: MagicMock,
        reconciler: MagicMock,
        directory: MagicMock,
    ) -> CarteleraService:
        failing = MagicMock()
        failing.fetch_shows = AsyncMock(side_effect=FetchError("Failed to fetch"))
        working = MagicMock()
        working.fetch_shows = AsyncMock(return_value=[make_show()])

        registry = VenueRegistry(
            [
                make_venue("v1"),
                make_venue("v2"),
                make_venue("broken", family="broken"),
                make_venue("v4"),
                make_venue("v5"),
            ]
        )
        return CarteleraService(
            registry=registry,
            cache=cache,
            store=store,
            reconciler=reconciler,
            directory=directory,
            refresh_concurrency=2,
            scraper_factory=lambda family: failing if family == "broken" else working,
        )

    async def test_one_failing_venue_does_not_stop_the_others(
        self, five_venue_service: CarteleraService, store: MagicMock
    ) -> None:
        response = await five_venue_service.refresh_all()

        results = {r.venue_id: r for r in response.results}
        assert len(results) == 5
        assert results["broken"].success is False
        assert "Failed to fetch" in results["broken"].error
        assert all(results[v].success for v in ("v1", "v2", "v4", "v5"))

        persisted = {call.args[0].id for call in store.upsert_venue.await_args_list}
        assert persisted == {"v1", "v2", "v4", "v5"}
        assert response.keys == sorted(
            f"cinema/{v}/{kind}" for v in ("v1", "v2", "v4", "v5") for kind in ("basic", "pro")
        )
        assert response.size == "8/50"

    async def test_clears_cache_first(
        self, service: CarteleraService, cache: ResponseCache
    ) -> None:
        cache.set("cinemas", [], ttl=3600)
        response = await service.refresh_all()
        assert "cinemas" not in response.keys

    async def test_merges_directory_venues(
        self, service: CarteleraService, directory: MagicMock, store: MagicMock
    ) -> None:
        directory.fetch_venues.return_value = [
            make_venue("nuevo", family="card-grid", location="Teruel"),
            make_venue("palafox", family="card-grid"),
        ]

        response = await service.refresh_all()

        assert service.registry.get("nuevo") is not None
        assert service.registry.get("palafox").family == "listing"
        assert "nuevo" in {r.venue_id for r in response.results}
        (venues,) = store.upsert_venues.await_args.args
        assert {v.id for v in venues} == {"palafox", "grancasa", "lys", "nuevo"}

    async def test_directory_failure_keeps_registry(
        self, service: CarteleraService, directory: MagicMock
    ) -> None:
        directory.fetch_venues.side_effect = ParseError("No cinemas found in directory")
        response = await service.refresh_all()
        assert [r.venue_id for r in response.results] == ["palafox", "grancasa", "lys"]
        assert all(r.success for r in response.results)

    async def test_store_failure_on_registry_still_refreshes(
        self, service: CarteleraService, store: MagicMock
    ) -> None:
        store.upsert_venues.side_effect = RuntimeError("db down")

        response = await service.refresh_all()

        assert [r.venue_id for r in response.results] == ["palafox", "grancasa", "lys"]
        assert all(r.success for r in response.results)
        assert response.size == "6/50"


class TestLoadRegistry:
    async def test_merges_persisted_venues(
        self, service: CarteleraService, store: MagicMock
    ) -> None:
        store.get_venues.return_value = [make_venue("maravillas", family="card-grid")]
        await service.load_registry()
        assert service.registry.get("maravillas") is not None
