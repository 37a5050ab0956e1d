"""TMDb API client for fetching film metadata."""

import logging
from typing import Any

import httpx

from cartelera.config import settings
from cartelera.errors import UpstreamFetchError
from cartelera.services.cache import ResponseCache

logger = logging.getLogger(__name__)


class TMDbClient:
    """
    Client for The Movie Database (TMDb) API.

    Responses are memoized in the shared ResponseCache under "themoviedb/"
    keys. Network and HTTP errors raise UpstreamFetchError.
    """

    def __init__(
        self,
        api_key: str | None = None,
        base_url: str | None = None,
        timeout: float | None = None,
        cache: ResponseCache | None = None,
        cache_ttl: int | None = None,
    ) -> None:
        """
        Initialize TMDb client.

        Args:
            api_key: TMDb API key (uses settings if not provided)
            base_url: API root URL
            timeout: Request timeout in seconds
            cache: Cache for responses; no caching when omitted
            cache_ttl: TTL for cached responses (long TTL class)
        """
        self.api_key = api_key or settings.tmdb_api_key
        self.base_url = (base_url or settings.tmdb_base_url).rstrip("/")
        self.timeout = timeout or settings.scrape_timeout
        self.cache = cache
        self.cache_ttl = cache_ttl or settings.cache_long_ttl
        if not self.api_key:
            logger.warning("TMDb API key not configured")

    async def configuration(self) -> dict[str, Any]:
        """API configuration, including the image base URLs."""
        return await self._get("themoviedb/configuration", "/configuration", {})

    async def search(
        self,
        query: str,
        language: str = "es-ES",
        year: int | None = None,
    ) -> dict[str, Any]:
        """
        Search films by title.

        Args:
            query: Film title
            language: Language of returned titles
            year: Release year (optional, narrows results)

        Returns:
            Search payload; matches are under "results"
        """
        params: dict[str, Any] = {
            "query": query,
            "language": language,
            "page": 1,
            "include_adult": "true",
        }
        if year:
            params["year"] = year

        key = f"themoviedb/search/{language}/{year or 'any'}/{'-'.join(query.split())}"
        return await self._get(key, "/search/movie", params)

    async def movie(self, tmdb_id: int, language: str = "es-ES") -> dict[str, Any]:
        """Full details for one film."""
        return await self._get(
            f"themoviedb/movie/{tmdb_id}/{language}",
            f"/movie/{tmdb_id}",
            {"language": language},
        )

    async def movie_credits(self, tmdb_id: int, language: str = "es-ES") -> dict[str, Any]:
        """Cast and crew for one film."""
        return await self._get(
            f"themoviedb/movie/{tmdb_id}/credits/{language}",
            f"/movie/{tmdb_id}/credits",
            {"language": language},
        )

    async def movie_videos(self, tmdb_id: int, language: str = "es-ES") -> dict[str, Any]:
        """Trailers and other videos for one film."""
        return await self._get(
            f"themoviedb/movie/{tmdb_id}/videos/{language}",
            f"/movie/{tmdb_id}/videos",
            {"language": language},
        )

    @staticmethod
    def image_url(base_url: str | None, size: str, path: str | None) -> str | None:
        """
        Build an image URL such as "https://image.tmdb.org/t/p/w342/abc.jpg".

        Returns None when TMDb has no image for the path.
        """
        if not base_url or not path:
            return None
        return f"{base_url}{size}{path}"

    async def _get(self, cache_key: str, path: str, params: dict[str, Any]) -> dict[str, Any]:
        """GET an endpoint, serving and storing the response through the cache."""
        if self.cache is not None:
            cached = self.cache.get(cache_key)
            if cached is not None:
                logger.debug(f"TMDb cache hit for {cache_key}")
                return cached

        if not self.api_key:
            raise UpstreamFetchError("TMDb API key not configured")

        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.get(
                    f"{self.base_url}{path}",
                    params={"api_key": self.api_key, **params},
                )
                response.raise_for_status()
                data = response.json()
        except httpx.HTTPError as e:
            raise UpstreamFetchError(f"TMDb request {path} failed: {e}") from e

        if self.cache is not None:
            self.cache.set(cache_key, data, self.cache_ttl)
        return data
