"""
Payload size checks for trip persistence.

The document store caps a record at 1 MB. New trips above the ceiling
are refused; updates of existing trips only warn so that historical
records are never dropped.
"""

import json
import logging
from dataclasses import dataclass
from typing import Any

from tripbuddy.shared.errors import PayloadTooLargeError


logger = logging.getLogger(__name__)


BYTES_PER_MB = 1024 * 1024


@dataclass
class SizeLimits:
    """Hard ceiling and soft warning ratio, in megabytes."""

    max_mb: float = 1.0
    warn_ratio: float = 0.9

    @property
    def warn_mb(self) -> float:
        return self.max_mb * self.warn_ratio


DEFAULT_LIMITS = SizeLimits()


@dataclass(frozen=True)
class PayloadSize:
    serialized: str
    size_bytes: int

    @property
    def megabytes(self) -> float:
        return self.size_bytes / BYTES_PER_MB


def serialize_detail(detail: Any) -> str:
    """Compact JSON form stored in the ``tripDetail`` field."""
    return json.dumps(detail, ensure_ascii=False, separators=(",", ":"))


def measure_payload(detail: Any) -> PayloadSize:
    """Serialize a trip detail and measure its UTF-8 byte length."""
    serialized = serialize_detail(detail)
    return PayloadSize(serialized=serialized, size_bytes=len(serialized.encode("utf-8")))


def _day_count(detail: Any) -> int:
    if isinstance(detail, dict) and isinstance(detail.get("itinerary"), list):
        return len(detail["itinerary"])
    return 0


def check_create(detail: Any, limits: SizeLimits = DEFAULT_LIMITS) -> PayloadSize:
    """
    Size check before creating a trip.

    Args:
        detail: Trip detail to store
        limits: Ceiling and warning threshold

    Returns:
        The measured payload (reused as the stored blob)

    Raises:
        PayloadTooLargeError: If the payload exceeds the ceiling
    """
    size = measure_payload(detail)
    logger.info(
        f"[CreateTrip] Saving trip with {_day_count(detail)} days | "
        f"size={size.megabytes:.3f}MB ({size.size_bytes:,} bytes)"
    )

    if size.megabytes > limits.max_mb:
        logger.error(f"[CreateTrip] Rejected: {size.megabytes:.2f}MB exceeds {limits.max_mb:g}MB")
        raise PayloadTooLargeError(size.megabytes, limits.max_mb)

    if size.megabytes > limits.warn_mb:
        logger.warning(
            f"[CreateTrip] Trip data is {size.megabytes:.2f}MB, close to {limits.max_mb:g}MB limit"
        )

    return size


def check_update(detail: Any, limits: SizeLimits = DEFAULT_LIMITS) -> PayloadSize:
    """
    Size check before updating a trip; never fails.

    Args:
        detail: Trip detail to store
        limits: Ceiling and warning threshold

    Returns:
        The measured payload
    """
    size = measure_payload(detail)
    logger.info(
        f"[UpdateTrip] Updating trip: {_day_count(detail)} days, {size.megabytes:.2f}MB"
    )

    if size.megabytes > limits.max_mb:
        logger.warning(
            f"[UpdateTrip] Trip data is {size.megabytes:.2f}MB, above the "
            f"{limits.max_mb:g}MB limit; saving anyway"
        )
    elif size.megabytes > limits.warn_mb:
        logger.warning(
            f"[UpdateTrip] Trip data is {size.megabytes:.2f}MB, close to {limits.max_mb:g}MB limit"
        )

    return size
