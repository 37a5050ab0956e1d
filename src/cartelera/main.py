"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.cron import CronTrigger
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from cartelera.api.dependencies import get_service
from cartelera.api.routes import cinemas, health
from cartelera.config import settings
from cartelera.errors import CarteleraError
from cartelera.tasks.refresh_job import run_refresh_all

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup: pick up venues found by earlier directory refreshes
    try:
        await get_service().load_registry()
    except Exception as e:
        logger.warning(f"Could not load persisted venues, using static registry: {e}")

    scheduler = AsyncIOScheduler()
    if settings.scheduler_enabled:
        scheduler.add_job(
            run_refresh_all,
            trigger=CronTrigger(hour=settings.refresh_hour, minute=0),
            id="daily_refresh",
            name="Daily refresh of all venues",
            replace_existing=True,
        )
        scheduler.start()
        logger.info(f"Scheduler started, daily refresh registered at {settings.refresh_hour:02d}:00")

    yield

    # Shutdown: stop the scheduler gracefully
    if scheduler.running:
        scheduler.shutdown(wait=False)
        logger.info("Scheduler shut down")


# Create FastAPI app
app = FastAPI(
    title="Cartelera API",
    description="Showtime aggregator for Spanish cinemas, enriched with TMDb metadata",
    version="0.1.0",
    lifespan=lifespan,
)


@app.exception_handler(CarteleraError)
async def cartelera_error_handler(request: Request, exc: CarteleraError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc}")
    return JSONResponse(
        status_code=exc.status_code,
        content={"statusCode": exc.status_code, "message": str(exc)},
    )


@app.exception_handler(Exception)
async def unexpected_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error(f"{request.method} {request.url.path} failed: {exc}", exc_info=exc)
    return JSONResponse(
        status_code=500,
        content={"statusCode": 500, "message": str(exc)},
    )


# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["GET", "POST"],
    allow_headers=["*"],
)

# Include routers
app.include_router(health.router)
app.include_router(cinemas.router, prefix="/api", tags=["cinemas"])
