"""Cinema API endpoints."""

from fastapi import APIRouter, Depends, Query

from cartelera.api.dependencies import get_service
from cartelera.schemas import (
    CacheStatusResponse,
    RefreshResponse,
    VenueResponse,
    VenueShowsResponse,
)
from cartelera.services.orchestrator import CarteleraService

router = APIRouter()


@router.get("/cinemas", response_model=list[VenueResponse])
async def get_cinemas(
    location: str | None = Query(
        default=None,
        description="Comma-separated locations to filter cinemas, e.g. Zaragoza,Valencia",
    ),
    service: CarteleraService = Depends(get_service),
) -> list[VenueResponse]:
    """
    Get list of cinemas.

    Args:
        location: Locations to filter cinemas (default: all)
        service: Listing service

    Returns:
        List of venue objects
    """
    return await service.list_venues(location)


@router.get("/cinemas/{cinema_id}", response_model=VenueResponse)
async def get_cinema(
    cinema_id: str,
    service: CarteleraService = Depends(get_service),
) -> VenueResponse:
    """Get a single cinema by id."""
    return await service.get_venue(cinema_id)


@router.get("/cinemas/{cinema_id}/basic", response_model=VenueShowsResponse)
async def get_cinema_shows(
    cinema_id: str,
    service: CarteleraService = Depends(get_service),
) -> VenueShowsResponse:
    """Get a cinema with the shows scraped from its website."""
    return await service.get_shows(cinema_id)


@router.get("/cinemas/{cinema_id}/pro", response_model=VenueShowsResponse)
async def get_cinema_shows_enriched(
    cinema_id: str,
    service: CarteleraService = Depends(get_service),
) -> VenueShowsResponse:
    """
    Get a cinema with its shows enriched from TMDb.

    Shows without a TMDb match are returned as scraped.
    """
    return await service.get_enriched_shows(cinema_id)


@router.get("/cached", response_model=CacheStatusResponse)
async def get_cached(service: CarteleraService = Depends(get_service)) -> CacheStatusResponse:
    """List the live cache keys."""
    return service.cache_status()


@router.post("/update-all", response_model=RefreshResponse)
async def update_all(service: CarteleraService = Depends(get_service)) -> RefreshResponse:
    """
    Refresh the venue registry and rebuild the cache for every cinema.

    Note: This is a synchronous operation that may take a minute or more.
    """
    return await service.refresh_all()
