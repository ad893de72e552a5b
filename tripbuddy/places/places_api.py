"""
FastAPI endpoints for the Google Places proxy.
"""

import logging
from typing import Any, Dict, Optional

import httpx
from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse, Response
from pydantic import BaseModel, Field

from tripbuddy.places.client import PlacesClient
from tripbuddy.places.enrichment import TripEnricher
from tripbuddy.shared.errors import PlacesProxyError


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/google/places", tags=["places"])


def get_places(request: Request) -> PlacesClient:
    return request.app.state.places


def _cache_header(seconds: int) -> dict:
    return {"Cache-Control": f"public, max-age={seconds}, s-maxage={seconds}"}


def _proxy_error(e: PlacesProxyError) -> JSONResponse:
    return JSONResponse(e.to_payload(), status_code=e.status_code)


def _upstream_unreachable(e: httpx.HTTPError) -> JSONResponse:
    logger.error(f"Places route error: {e!r}")
    return JSONResponse({"error": str(e) or "Server error"}, status_code=500)


@router.get("/search")
async def search_places(request: Request, query: Optional[str] = None):
    """Text search; an empty result is 200 with ``ZERO_RESULTS``."""
    if not query:
        return JSONResponse({"error": "Missing query"}, status_code=400)

    places = get_places(request)
    try:
        data = await places.search(query)
    except PlacesProxyError as e:
        return _proxy_error(e)
    except httpx.HTTPError as e:
        return _upstream_unreachable(e)

    return JSONResponse(data, headers=_cache_header(places.config.search_ttl))


@router.get("/details")
async def place_details(request: Request, place_id: Optional[str] = None):
    if not place_id:
        return JSONResponse({"error": "Missing place_id"}, status_code=400)

    places = get_places(request)
    try:
        data = await places.details(place_id)
    except PlacesProxyError as e:
        return _proxy_error(e)
    except httpx.HTTPError as e:
        return _upstream_unreachable(e)

    return JSONResponse(data, headers=_cache_header(places.config.details_ttl))


@router.get("/photo")
async def place_photo(
    request: Request,
    photo_reference: Optional[str] = None,
    maxwidth: Optional[int] = None,
):
    """Image bytes from the upstream photo service."""
    if not photo_reference:
        return JSONResponse({"error": "Missing photo_reference"}, status_code=400)

    places = get_places(request)
    try:
        content, content_type = await places.photo(photo_reference, maxwidth)
    except PlacesProxyError as e:
        return _proxy_error(e)
    except httpx.HTTPError as e:
        return _upstream_unreachable(e)

    logger.debug(f"Photo proxied | bytes={len(content)}, content_type={content_type}")
    return Response(
        content=content,
        media_type=content_type,
        headers={"Cache-Control": f"public, max-age={places.config.photo_ttl}"},
    )


class EnrichRequest(BaseModel):
    trip_detail: Dict[str, Any] = Field(alias="tripDetail", description="Final itinerary payload")
    destination: str = Field(default="", description="Context appended to place queries")


@router.post("/enrich")
async def enrich_trip(body: EnrichRequest, request: Request):
    """Trip detail with place data on the first days and a budget estimate."""
    enricher = TripEnricher(get_places(request))
    return await enricher.enrich_trip(body.trip_detail, body.destination)
