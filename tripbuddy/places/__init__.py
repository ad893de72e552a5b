"""Google Places proxy and itinerary enrichment."""

from tripbuddy.places.client import PlacesClient, PlacesConfig, normalize_query
from tripbuddy.places.enrichment import (
    TripEnricher,
    calculate_comprehensive_budget,
    estimate_activity_price,
    estimate_cafe_price,
    estimate_hotel_price,
)

__all__ = [
    "PlacesClient",
    "PlacesConfig",
    "normalize_query",
    "TripEnricher",
    "calculate_comprehensive_budget",
    "estimate_activity_price",
    "estimate_cafe_price",
    "estimate_hotel_price",
]
