"""Health check endpoint."""

from fastapi import APIRouter, Depends

from cartelera.api.dependencies import get_service
from cartelera.services.orchestrator import CarteleraService

router = APIRouter()


@router.get("/health", tags=["health"])
async def health_check(service: CarteleraService = Depends(get_service)) -> dict[str, str | int]:
    """
    Health check endpoint.

    Returns:
        Status message with the number of known venues and the cache fill
    """
    return {
        "status": "ok",
        "venues": len(service.registry.all()),
        "cache": service.cache.status()["size"],
    }
