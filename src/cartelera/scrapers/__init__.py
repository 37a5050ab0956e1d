"""Scraper registry for mapping venue families to scraper classes."""

from typing import Type

from cartelera.scrapers.base import BaseScraper, PageFetcher
from cartelera.scrapers.cinesa import CinesaScraper
from cartelera.scrapers.directory import DirectoryScraper
from cartelera.scrapers.palafox import PalafoxScraper
from cartelera.scrapers.reservaentradas import ReservaEntradasScraper

# Registry mapping venue family tags to scraper classes
SCRAPER_REGISTRY: dict[str, Type[BaseScraper]] = {
    "listing": PalafoxScraper,
    "json-feed": CinesaScraper,
    "card-grid": ReservaEntradasScraper,
}


def get_scraper(family: str) -> BaseScraper | None:
    """
    Get a scraper instance by venue family.

    Args:
        family: The family tag (e.g., "listing", "json-feed")

    Returns:
        Scraper instance or None if the family is not registered
    """
    scraper_class = SCRAPER_REGISTRY.get(family)
    if scraper_class:
        return scraper_class()
    return None


__all__ = [
    "SCRAPER_REGISTRY",
    "get_scraper",
    "BaseScraper",
    "PageFetcher",
    "CinesaScraper",
    "DirectoryScraper",
    "PalafoxScraper",
    "ReservaEntradasScraper",
]
