"""Unit tests for the reservaentradas.com cinema directory scraper."""

from unittest.mock import patch

import pytest
from helpers import make_async_client_ctx, make_http_response, read_fixture

from cartelera.errors import FetchError, ParseError
from cartelera.scrapers.directory import DirectoryScraper

DIRECTORY_URL = "https://www.reservaentradas.com/cines"


@pytest.fixture
def scraper() -> DirectoryScraper:
    return DirectoryScraper(url=DIRECTORY_URL)


class TestDirectoryParseHtml:
    def test_extracts_unique_venues(self, scraper: DirectoryScraper) -> None:
        venues = scraper._parse_html(read_fixture("directory", "cines.html"))
        assert [v.id for v in venues] == ["multicinesvictoria", "cineolimpia", "cinemaravillas"]

    def test_venue_fields(self, scraper: DirectoryScraper) -> None:
        victoria = scraper._parse_html(read_fixture("directory", "cines.html"))[0]
        assert victoria.name == "Multicines Victoria"
        assert victoria.family == "card-grid"
        assert victoria.location == "Huesca"
        assert victoria.address == "Calle Santa Barbara, 27, Monzón"
        assert victoria.source == (
            "https://www.reservaentradas.com/cine/huesca/multicinesvictoria/"
        )

    def test_address_is_optional(self, scraper: DirectoryScraper) -> None:
        venues = {v.id: v for v in scraper._parse_html(read_fixture("directory", "cines.html"))}
        assert venues["cineolimpia"].address is None
        assert venues["cinemaravillas"].location == "Teruel"

    @pytest.mark.parametrize(
        "url, expected",
        [
            ("https://www.reservaentradas.com/cine/valencia/cineslys/", "cineslys"),
            ("https://www.reservaentradas.com/cine/huesca/Olimpia", "olimpia"),
            ("https://www.reservaentradas.com/ayuda/", None),
            ("https://www.reservaentradas.com/cine", None),
        ],
    )
    def test_venue_id(self, scraper: DirectoryScraper, url: str, expected: str | None) -> None:
        assert scraper._venue_id(url) == expected


class TestDirectoryFetchVenues:
    async def test_fetches_directory(self, scraper: DirectoryScraper) -> None:
        ctx = make_async_client_ctx(
            {DIRECTORY_URL: make_http_response(read_fixture("directory", "cines.html"))}
        )
        with patch("httpx.AsyncClient", return_value=ctx):
            venues = await scraper.fetch_venues()
        assert len(venues) == 3

    async def test_empty_directory_raises_parse_error(self, scraper: DirectoryScraper) -> None:
        ctx = make_async_client_ctx({DIRECTORY_URL: make_http_response("<html></html>")})
        with patch("httpx.AsyncClient", return_value=ctx):
            with pytest.raises(ParseError):
                await scraper.fetch_venues()

    async def test_unreachable_directory_raises_fetch_error(
        self, scraper: DirectoryScraper
    ) -> None:
        ctx = make_async_client_ctx({DIRECTORY_URL: make_http_response(status_code=502)})
        with patch("httpx.AsyncClient", return_value=ctx):
            with pytest.raises(FetchError):
                await scraper.fetch_venues()
