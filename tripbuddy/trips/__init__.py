"""Trip persistence: size guard, record store and HTTP endpoints."""

from tripbuddy.trips.size_guard import (
    PayloadSize,
    SizeLimits,
    check_create,
    check_update,
    measure_payload,
)
from tripbuddy.trips.store import TripRecord, TripStore, normalize_trip_detail

__all__ = [
    "PayloadSize",
    "SizeLimits",
    "check_create",
    "check_update",
    "measure_payload",
    "TripRecord",
    "TripStore",
    "normalize_trip_detail",
]
