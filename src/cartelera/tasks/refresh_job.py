"""Scheduled refresh job that rebuilds the listings of all venues."""

import logging

from cartelera.api.dependencies import get_service

logger = logging.getLogger(__name__)


async def run_refresh_all() -> None:
    """Refresh every venue through the shared service.

    Called by the scheduler outside any request context; failures are
    logged and never raised.
    """
    logger.info("Starting scheduled refresh for all venues")
    try:
        response = await get_service().refresh_all()
    except Exception as e:
        logger.error(f"Scheduled refresh failed: {e}", exc_info=True)
        return

    failures = [r.venue_id for r in response.results if not r.success]
    logger.info(
        f"Scheduled refresh complete: {len(response.results) - len(failures)} succeeded, "
        f"{len(failures)} failed {failures}, cache size {response.size}"
    )
