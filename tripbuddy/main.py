"""
FastAPI application entry point.

Assembles the TripBuddy API: generation, trips and places routers.
Long-lived services are built once at startup and kept on ``app.state``.
"""

import logging
import sys
from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from tripbuddy import __version__
from tripbuddy.generation.generation_api import router as generation_router
from tripbuddy.generation.graph.config import get_config
from tripbuddy.generation.orchestrator import FallbackOrchestrator
from tripbuddy.places.client import PlacesClient
from tripbuddy.places.places_api import router as places_router
from tripbuddy.shared.errors import ConfigurationError
from tripbuddy.shared.llm.client import create_client
from tripbuddy.shared.logging.config import quiet_third_party_loggers, setup_logging
from tripbuddy.shared.settings import Settings
from tripbuddy.trips.store import TripStore
from tripbuddy.trips.trips_api import router as trips_router


# ============================================================================
# Logging configuration (single source of truth for all modules)
# ============================================================================
LOG_FORMAT = (
    "%(asctime)s | %(levelname)-8s | %(name)-35s | %(message)s"
)

settings = Settings.from_env()

if settings.log_format == "json":
    setup_logging(level=logging.INFO)
else:
    logging.basicConfig(
        level=logging.INFO,
        format=LOG_FORMAT,
        datefmt="%Y-%m-%d %H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )
    quiet_third_party_loggers()

logger = logging.getLogger(__name__)


def build_orchestrator(settings: Settings):
    """Fallback orchestrator, or None when the model gateway key is missing."""
    try:
        client = create_client(settings)
    except ConfigurationError as e:
        logger.warning(f"Generation disabled: {e}")
        return None
    return FallbackOrchestrator(
        client,
        get_config(models=settings.model_fallbacks),
        debug_logs_dir=settings.debug_log_dir,
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    http = httpx.AsyncClient()
    app.state.settings = settings
    app.state.orchestrator = build_orchestrator(settings)
    app.state.places = PlacesClient(http, settings.google_maps_api_key)
    app.state.trip_store = TripStore()
    logger.info(
        f"TripBuddy started | models={settings.model_fallbacks}, "
        f"places={'on' if settings.google_maps_api_key else 'off'}"
    )
    try:
        yield
    finally:
        await http.aclose()


# Create FastAPI app
app = FastAPI(
    title="TripBuddy",
    description="Conversational trip planning with model fallback and place enrichment",
    version=__version__,
    lifespan=lifespan,
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(generation_router)
app.include_router(trips_router)
app.include_router(places_router)


@app.get("/")
async def root():
    """Root endpoint with API information."""
    return {
        "name": "TripBuddy",
        "version": __version__,
        "endpoints": {
            "generation": "/api/aimodel",
            "trips": "/api/trips",
            "places": "/api/google/places",
        },
    }


@app.get("/health")
async def health():
    """Global health check endpoint."""
    return {"status": "healthy"}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=8000)
