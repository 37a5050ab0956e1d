"""Pydantic schemas for cache and refresh operations."""

from pydantic import BaseModel


class CacheStatusResponse(BaseModel):
    """Live cache keys and a "count/max" size string."""

    keys: list[str]
    size: str


class VenueRefreshResult(BaseModel):
    """Result for a single venue refresh."""

    venue_id: str
    success: bool
    error: str | None = None


class RefreshResponse(CacheStatusResponse):
    """Response for a full refresh."""

    results: list[VenueRefreshResult]
