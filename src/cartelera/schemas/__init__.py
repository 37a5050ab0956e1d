"""Pydantic schemas for API requests and responses."""

from cartelera.schemas.cache import CacheStatusResponse, RefreshResponse, VenueRefreshResult
from cartelera.schemas.cinema import VenueResponse
from cartelera.schemas.show import (
    PersonResponse,
    SessionResponse,
    ShowResponse,
    VenueShowsResponse,
)

__all__ = [
    "VenueResponse",
    "SessionResponse",
    "PersonResponse",
    "ShowResponse",
    "VenueShowsResponse",
    "CacheStatusResponse",
    "VenueRefreshResult",
    "RefreshResponse",
]
