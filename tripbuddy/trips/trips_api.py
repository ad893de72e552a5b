"""
FastAPI endpoints for trip persistence.
"""

import logging
from typing import Any, Dict, List

from fastapi import APIRouter, HTTPException, Request, status
from pydantic import BaseModel, Field

from tripbuddy.shared.errors import PayloadTooLargeError, TripNotFoundError
from tripbuddy.trips.store import TripStore


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/trips", tags=["trips"])


# ============================================================================
# Request/Response Models
# ============================================================================


class CreateTripRequest(BaseModel):
    trip_id: str = Field(alias="tripId", description="Client-generated trip id")
    uid: str = Field(description="Owner user id")
    trip_detail: Any = Field(alias="tripDetail", description="Trip itinerary payload")


class UpdateTripRequest(BaseModel):
    trip_detail: Any = Field(alias="tripDetail", description="Trip itinerary payload")


class RecordIdResponse(BaseModel):
    id: str


def get_store(request: Request) -> TripStore:
    return request.app.state.trip_store


# ============================================================================
# Endpoints
# ============================================================================


@router.post("", response_model=RecordIdResponse, status_code=status.HTTP_201_CREATED)
async def create_trip(body: CreateTripRequest, request: Request):
    """Create a trip; refuses payloads above the size ceiling."""
    try:
        record_id = get_store(request).create(body.trip_id, body.uid, body.trip_detail)
    except PayloadTooLargeError as e:
        raise HTTPException(
            status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
            detail=str(e),
        )
    return RecordIdResponse(id=record_id)


@router.get("")
async def list_trips(uid: str, request: Request) -> List[Dict[str, Any]]:
    """All trips for a user, newest first."""
    records = get_store(request).list_by_user(uid)
    return [r.model_dump(by_alias=True) for r in records]


@router.get("/{record_id}")
async def get_trip(record_id: str, request: Request) -> Dict[str, Any]:
    record = get_store(request).get(record_id)
    if record is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Trip not found: {record_id}",
        )
    return record.model_dump(by_alias=True)


@router.put("/{record_id}", response_model=RecordIdResponse)
async def update_trip(record_id: str, body: UpdateTripRequest, request: Request):
    """Replace a trip's detail; oversized payloads are saved with a warning."""
    try:
        get_store(request).update(record_id, body.trip_detail)
    except TripNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    return RecordIdResponse(id=record_id)


@router.delete("/{record_id}", response_model=RecordIdResponse)
async def delete_trip(record_id: str, request: Request):
    try:
        get_store(request).delete(record_id)
    except TripNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    return RecordIdResponse(id=record_id)
