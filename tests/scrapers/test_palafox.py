"""Unit tests for the Cines Palafox scraper."""

from unittest.mock import patch

import pytest
from helpers import make_async_client_ctx, make_http_response, read_fixture

from cartelera.errors import FetchError, ParseError
from cartelera.scrapers.models import Person, Session, Venue
from cartelera.scrapers.palafox import PalafoxScraper
from cartelera.utils.text import slugify

INDEX_URL = "https://www.cinespalafox.com/cartelera-cines-palafox.html"
DETAIL_URL = "https://www.cinespalafox.com/pelicula/la-sociedad-de-la-nieve"
UNTITLED_URL = "https://www.cinespalafox.com/pelicula/sin-titulo"

VENUE = Venue(id="palafox", name="Cines Palafox", family="listing", source=INDEX_URL)


@pytest.fixture
def scraper() -> PalafoxScraper:
    return PalafoxScraper()


@pytest.fixture
def detail_html() -> str:
    return read_fixture("palafox", "pelicula.html")


# ---------------------------------------------------------------------------
# _parse_detail: pure parsing, no HTTP
# ---------------------------------------------------------------------------


class TestPalafoxParseDetail:
    def test_builds_one_show_with_two_sessions(
        self, scraper: PalafoxScraper, detail_html: str
    ) -> None:
        show = scraper._parse_detail(detail_html, DETAIL_URL)
        assert show.name == "La sociedad de la nieve"
        assert show.id == slugify("La sociedad de la nieve")
        assert show.sessions == (
            Session(
                time="18:00",
                room="3",
                date="2024-06-05",
                url="https://www.cinespalafox.com/compra/1001",
            ),
            Session(
                time="20:30",
                room="3",
                date="2024-06-05",
                url="https://www.cinespalafox.com/compra/1002",
            ),
        )

    def test_parses_details(self, scraper: PalafoxScraper, detail_html: str) -> None:
        show = scraper._parse_detail(detail_html, DETAIL_URL)
        assert show.genres == ["Drama", "Aventura"]
        assert show.duration == 144
        assert show.duration_readable == "2h 24m"
        assert show.director == Person(name="J.A. Bayona")
        assert [a.name for a in show.actors] == [
            "Enzo Vogrincic",
            "Agustín Pardella",
            "Matías Recalt",
        ]

    def test_parses_media_and_synopsis(self, scraper: PalafoxScraper, detail_html: str) -> None:
        show = scraper._parse_detail(detail_html, DETAIL_URL)
        assert show.poster == (
            "https://www.cinespalafox.com/files/imagecache/cartelDetalle/nieve.jpg"
        )
        assert show.trailer == "https://www.youtube.com/watch?v=xyz789"
        assert show.synopsis.startswith("En 1972, el vuelo 571")
        assert "\n" not in show.synopsis
        assert show.source == DETAIL_URL

    def test_missing_title_raises_parse_error(self, scraper: PalafoxScraper) -> None:
        with pytest.raises(ParseError):
            scraper._parse_detail(read_fixture("palafox", "sin_titulo.html"), UNTITLED_URL)

    def test_session_type_is_optional(self, scraper: PalafoxScraper) -> None:
        html = """
            <h1>Dune</h1>
            <div class="horarios"><ul>
              <li>05/06/2024</li>
              <li><a href="#">Sala 1 - 17:00 (VOSE)</a><a href="#">Sala 2 - 9:15</a></li>
            </ul></div>
        """
        show = scraper._parse_detail(html, DETAIL_URL)
        assert [(s.room, s.time, s.type) for s in show.sessions] == [
            ("1", "17:00", "VOSE"),
            ("2", "09:15", None),
        ]

    def test_three_datos_spans_have_no_genre(self, scraper: PalafoxScraper) -> None:
        html = """
            <h1>Dune</h1>
            <div class="datos">
              <span>155 min.</span>
              <span>Denis Villeneuve</span>
              <span>Timothée Chalamet, Zendaya</span>
            </div>
        """
        show = scraper._parse_detail(html, DETAIL_URL)
        assert show.genres is None
        assert show.duration == 155
        assert show.director == Person(name="Denis Villeneuve")
        assert [a.name for a in show.actors] == ["Timothée Chalamet", "Zendaya"]

    def test_without_datos_leaves_details_empty(self, scraper: PalafoxScraper) -> None:
        show = scraper._parse_detail("<h1>Dune</h1>", DETAIL_URL)
        assert show.sessions == ()
        assert show.duration is None
        assert show.director is None


# ---------------------------------------------------------------------------
# fetch_shows: HTTP mocked
# ---------------------------------------------------------------------------


class TestPalafoxFetchShows:
    async def test_fetches_detail_pages_and_drops_failures(self, scraper: PalafoxScraper) -> None:
        ctx = make_async_client_ctx(
            {
                INDEX_URL: make_http_response(read_fixture("palafox", "cartelera.html")),
                DETAIL_URL: make_http_response(read_fixture("palafox", "pelicula.html")),
                UNTITLED_URL: make_http_response(read_fixture("palafox", "sin_titulo.html")),
            }
        )
        with patch("httpx.AsyncClient", return_value=ctx):
            shows = await scraper.fetch_shows(VENUE)

        assert [s.id for s in shows] == ["la-sociedad-de-la-nieve"]
        requested = [call.args[0] for call in ctx.__aenter__.return_value.get.call_args_list]
        assert requested[0] == INDEX_URL
        assert sorted(requested[1:]) == [DETAIL_URL, UNTITLED_URL]

    async def test_unreachable_detail_page_is_skipped(self, scraper: PalafoxScraper) -> None:
        ctx = make_async_client_ctx(
            {
                INDEX_URL: make_http_response(read_fixture("palafox", "cartelera.html")),
                DETAIL_URL: make_http_response(read_fixture("palafox", "pelicula.html")),
            }
        )
        with patch("httpx.AsyncClient", return_value=ctx):
            shows = await scraper.fetch_shows(VENUE)
        assert len(shows) == 1

    async def test_empty_index_raises_parse_error(self, scraper: PalafoxScraper) -> None:
        ctx = make_async_client_ctx({INDEX_URL: make_http_response("<html><body></body></html>")})
        with patch("httpx.AsyncClient", return_value=ctx):
            with pytest.raises(ParseError):
                await scraper.fetch_shows(VENUE)

    async def test_unreachable_index_raises_fetch_error(self, scraper: PalafoxScraper) -> None:
        ctx = make_async_client_ctx({INDEX_URL: make_http_response(status_code=503)})
        with patch("httpx.AsyncClient", return_value=ctx):
            with pytest.raises(FetchError):
                await scraper.fetch_shows(VENUE)
