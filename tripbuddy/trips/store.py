"""
Trip persistence.

Implements the trip record contract (create, list, get, update, delete)
over an in-process store. The trip detail is kept as a serialized JSON
blob; older records may hold the structured value directly, so every
read normalizes the detail back into a dict.
"""

import json
import logging
import threading
import time
import uuid
from typing import Any, Dict, Iterable, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from tripbuddy.shared.errors import TripNotFoundError
from tripbuddy.trips.size_guard import DEFAULT_LIMITS, SizeLimits, check_create, check_update


logger = logging.getLogger(__name__)


class TripRecord(BaseModel):
    """A stored trip as returned to readers (detail already normalized)."""

    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(alias="_id")
    trip_id: str = Field(alias="tripId")
    uid: str
    trip_detail: Any = Field(alias="tripDetail")
    creation_time: float = Field(alias="_creationTime")


def normalize_trip_detail(detail: Any) -> Any:
    """
    Parse a serialized detail; structured values pass through.

    Unparseable strings are logged and returned unchanged.
    """
    if not isinstance(detail, str):
        return detail
    try:
        return json.loads(detail)
    except json.JSONDecodeError as e:
        logger.error(f"Failed to parse tripDetail: {e}")
        return detail


def _day_numbers(detail: Any) -> List[Any]:
    if isinstance(detail, dict) and isinstance(detail.get("itinerary"), list):
        return [d.get("day") if isinstance(d, dict) else None for d in detail["itinerary"]]
    return []


class TripStore:
    """
    In-memory trip store.

    Documents are kept exactly as the store would hold them: ``tripDetail``
    is a JSON string for records written here, or any value for imported
    legacy documents.
    """

    def __init__(self, limits: SizeLimits = DEFAULT_LIMITS):
        self.limits = limits
        self._docs: Dict[str, Dict[str, Any]] = {}
        self._lock = threading.Lock()

    def _to_record(self, doc: Dict[str, Any]) -> TripRecord:
        return TripRecord.model_validate(
            {**doc, "tripDetail": normalize_trip_detail(doc["tripDetail"])}
        )

    def import_documents(self, documents: Iterable[Dict[str, Any]]) -> int:
        """
        Load raw documents (e.g. from an export), including legacy ones
        whose ``tripDetail`` is a structured value rather than a string.

        Returns:
            Number of documents loaded
        """
        count = 0
        with self._lock:
            for doc in documents:
                doc_id = doc.get("_id") or uuid.uuid4().hex
                self._docs[doc_id] = {
                    "_id": doc_id,
                    "tripId": str(doc["tripId"]),
                    "uid": str(doc["uid"]),
                    "tripDetail": doc["tripDetail"],
                    "_creationTime": float(doc.get("_creationTime") or time.time() * 1000),
                }
                count += 1
        return count

    def create(self, trip_id: str, uid: str, trip_detail: Any) -> str:
        """
        Store a new trip.

        Returns:
            The new record id

        Raises:
            PayloadTooLargeError: If the serialized detail exceeds the ceiling
        """
        size = check_create(trip_detail, self.limits)
        doc_id = uuid.uuid4().hex

        with self._lock:
            self._docs[doc_id] = {
                "_id": doc_id,
                "tripId": trip_id,
                "uid": uid,
                "tripDetail": size.serialized,
                "_creationTime": time.time() * 1000,
            }

        logger.info(
            f"[CreateTrip] Trip saved with ID: {doc_id} | days={_day_numbers(trip_detail)}"
        )
        return doc_id

    def list_by_user(self, uid: str) -> List[TripRecord]:
        """All trips of one user, newest first."""
        with self._lock:
            # Insertion order breaks creation-time ties
            docs = [doc for doc in self._docs.values() if doc["uid"] == uid]
        docs = list(reversed(docs))
        docs.sort(key=lambda d: d["_creationTime"], reverse=True)

        logger.info(f"[ListTrips] Found {len(docs)} trips for user")
        return [self._to_record(doc) for doc in docs]

    def get(self, record_id: str) -> Optional[TripRecord]:
        """A single trip, or None if it does not exist."""
        with self._lock:
            doc = self._docs.get(record_id)
        if doc is None:
            return None
        logger.debug(f"[GetTrip] Fetching trip ID: {record_id}")
        return self._to_record(doc)

    def update(self, record_id: str, trip_detail: Any) -> str:
        """
        Replace a trip's detail. Oversized payloads are only warned about.

        Raises:
            TripNotFoundError: If the record does not exist
        """
        size = check_update(trip_detail, self.limits)
        with self._lock:
            doc = self._docs.get(record_id)
            if doc is None:
                raise TripNotFoundError(f"Trip not found: {record_id}")
            doc["tripDetail"] = size.serialized
        return record_id

    def delete(self, record_id: str) -> str:
        """
        Remove a trip.

        Raises:
            TripNotFoundError: If the record does not exist
        """
        with self._lock:
            if self._docs.pop(record_id, None) is None:
                raise TripNotFoundError(f"Trip not found: {record_id}")
        return record_id
