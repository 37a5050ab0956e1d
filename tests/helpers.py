"""Factories and HTTP doubles shared by the tests."""

from collections.abc import Callable
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock

import httpx

from cartelera.scrapers.models import Person, Session, ShowRecord, Venue
from cartelera.utils.text import slugify

FIXTURE_DIR = Path(__file__).parent / "scrapers" / "fixtures"


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, now: float = 1000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


def make_venue(
    id: str = "palafox",
    family: str = "listing",
    location: str = "Zaragoza",
) -> Venue:
    return Venue(
        id=id,
        name=f"Cines {id.title()}",
        family=family,
        source=f"https://example.com/{id}",
        address="Calle Falsa, 123",
        location=location,
        website=f"https://example.com/{id}/home",
    )


def make_show(name: str = "Dune", duration: int | None = 155) -> ShowRecord:
    return ShowRecord(
        id=slugify(name),
        name=name,
        sessions=(
            Session(time="18:00", room="3", date="2024-06-05"),
            Session(time="20:30", room="3", date="2024-06-05", type="VOSE"),
        ),
        synopsis="Scraped synopsis",
        duration=duration,
        genres=["Ciencia ficción"],
        director=Person(name="Denis Villeneuve"),
        actors=[Person(name="Timothée Chalamet")],
        source="https://example.com/film",
    )


def read_fixture(family: str, name: str) -> str:
    return (FIXTURE_DIR / family / name).read_text(encoding="utf-8")


def make_http_response(
    text: str = "",
    status_code: int = 200,
    url: str = "https://test",
) -> MagicMock:
    response = MagicMock()
    response.status_code = status_code
    response.text = text
    if status_code >= 400:
        request = httpx.Request("GET", url)
        response.raise_for_status.side_effect = httpx.HTTPStatusError(
            f"HTTP {status_code}",
            request=request,
            response=httpx.Response(status_code, request=request),
        )
    else:
        response.raise_for_status = MagicMock()
    return response


def make_async_client_ctx(pages: dict[str, MagicMock] | Callable[[str], MagicMock]) -> AsyncMock:
    """Async context manager whose client answers GETs from *pages* (404 otherwise)."""

    async def get(url: str) -> MagicMock:
        if callable(pages):
            return pages(url)
        return pages.get(url) or make_http_response(status_code=404, url=url)

    inner = AsyncMock()
    inner.get = AsyncMock(side_effect=get)
    ctx = AsyncMock()
    ctx.__aenter__ = AsyncMock(return_value=inner)
    ctx.__aexit__ = AsyncMock(return_value=False)
    return ctx
