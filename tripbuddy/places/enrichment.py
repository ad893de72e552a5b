"""
Trip enrichment with place data.

Adds ratings, photo references, addresses and estimated prices to the
first few itinerary days, and computes a comprehensive budget estimate.
Lookups run concurrently inside a batch of days with a short pause
between batches to stay under upstream rate limits. A failed lookup
leaves the item as it was.
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence

import httpx

from tripbuddy.places.client import PlacesClient
from tripbuddy.shared.errors import PlacesProxyError


logger = logging.getLogger(__name__)


CAFE_PRICES = [5, 15, 30, 50, 100]
HOTEL_PRICES = [50, 100, 200, 350, 500]
ACTIVITY_PRICES = [10, 25, 50, 100, 200]


@dataclass
class EnrichmentConfig:
    """Batching and per-category limits for enrichment."""

    max_days: int = 3
    batch_size: int = 3
    batch_delay: float = 0.2
    max_cafes: int = 3
    max_hotels: int = 2
    max_adventures: int = 3
    max_hidden_gems: int = 1
    photos_per_place: int = 3

    # Comprehensive budget
    meal_costs: Sequence[int] = (15, 20, 30)
    default_cafe_cost: int = 10
    default_hotel_cost: int = 100
    default_activity_cost: int = 25
    local_transport_per_day: int = 20
    flight_estimate: int = 500


DEFAULT_ENRICHMENT_CONFIG = EnrichmentConfig()


def _price_from_level(table: List[int], default: int, price_level: Optional[int]) -> int:
    if not price_level:
        return default
    if 1 <= price_level <= len(table):
        return table[price_level - 1]
    return default


def estimate_cafe_price(price_level: Optional[int]) -> int:
    return _price_from_level(CAFE_PRICES, 15, price_level)


def estimate_hotel_price(price_level: Optional[int]) -> int:
    return _price_from_level(HOTEL_PRICES, 100, price_level)


def estimate_activity_price(price_level: Optional[int]) -> int:
    return _price_from_level(ACTIVITY_PRICES, 25, price_level)


class TripEnricher:
    """
    Enriches one trip. Holds a per-run lookup cache so the same place
    is only searched once per trip, including lookups that found nothing
    or failed and lookups still in flight.
    """

    def __init__(
        self,
        places: PlacesClient,
        config: EnrichmentConfig = DEFAULT_ENRICHMENT_CONFIG,
    ):
        self.places = places
        self.config = config
        self._cache: Dict[str, "asyncio.Future[Optional[Dict[str, Any]]]"] = {}

    async def lookup(self, name: str, context: str = "") -> Optional[Dict[str, Any]]:
        """First search hit for a place, reduced to the fields we display."""
        query = f"{name} {context}" if context else name
        if query not in self._cache:
            self._cache[query] = asyncio.ensure_future(self._search(name, query))
        return await self._cache[query]

    async def _search(self, name: str, query: str) -> Optional[Dict[str, Any]]:
        try:
            data = await self.places.search(query)
        except (PlacesProxyError, httpx.HTTPError) as e:
            logger.warning(f"Error fetching place data for {name!r}: {e}")
            return None

        results = data.get("results") or []
        if not results:
            return None

        place = results[0]
        return {
            "name": place.get("name") or name,
            "rating": place.get("rating"),
            "photos": [
                p.get("photo_reference")
                for p in (place.get("photos") or [])[: self.config.photos_per_place]
            ],
            "priceLevel": place.get("price_level"),
            "address": place.get("formatted_address"),
            "placeId": place.get("place_id"),
        }

    async def _enrich_details(
        self,
        details: List[Dict[str, Any]],
        limit: int,
        destination: str,
        price_key: str,
        estimate,
    ) -> List[Dict[str, Any]]:
        async def enrich(item: Dict[str, Any]) -> Dict[str, Any]:
            if item.get("photos") and item.get("rating"):
                return item
            data = await self.lookup(item.get("name", ""), destination) or {}
            return {
                **item,
                "rating": data.get("rating") or item.get("rating"),
                "photos": data.get("photos") or item.get("photos") or [],
                price_key: item.get(price_key) or estimate(data.get("priceLevel")),
                "address": data.get("address") or item.get("address"),
            }

        return list(await asyncio.gather(*(enrich(d) for d in details[:limit])))

    async def _details_from_names(
        self,
        names: List[str],
        limit: int,
        destination: str,
        price_key: str,
        estimate,
    ) -> List[Dict[str, Any]]:
        async def build(name: str) -> Dict[str, Any]:
            data = await self.lookup(name, destination) or {}
            return {
                "name": name,
                "rating": data.get("rating"),
                "photos": data.get("photos") or [],
                price_key: estimate(data.get("priceLevel")),
                "address": data.get("address"),
            }

        return list(await asyncio.gather(*(build(n) for n in names[:limit])))

    async def enrich_day(self, day: Dict[str, Any], destination: str) -> Dict[str, Any]:
        """Enrich one itinerary day; never raises for lookup failures."""
        enriched = dict(day)
        cfg = self.config

        if day.get("title") and not day.get("photos"):
            data = await self.lookup(day["title"], destination)
            if data and data.get("photos"):
                enriched["photos"] = data["photos"]

        categories = [
            ("cafeDetails", "cafes", cfg.max_cafes, "price", estimate_cafe_price),
            ("hotelDetails", "hotels", cfg.max_hotels, "price", estimate_hotel_price),
            ("adventureDetails", "adventures", cfg.max_adventures, "ticketPrice", estimate_activity_price),
        ]
        for details_key, names_key, limit, price_key, estimate in categories:
            details = [d for d in (day.get(details_key) or []) if isinstance(d, dict)]
            names = [n for n in (day.get(names_key) or []) if isinstance(n, str)]
            if details:
                enriched[details_key] = await self._enrich_details(
                    details, limit, destination, price_key, estimate
                )
            elif names:
                enriched[details_key] = await self._details_from_names(
                    names, limit, destination, price_key, estimate
                )

        gems = [g for g in (day.get("hiddenGems") or []) if isinstance(g, dict)]
        if gems:
            async def enrich_gem(gem: Dict[str, Any]) -> Dict[str, Any]:
                data = await self.lookup(gem.get("name", ""), destination) or {}
                return {
                    **gem,
                    "rating": data.get("rating"),
                    "photos": data.get("photos") or [],
                    "address": data.get("address"),
                }

            enriched["hiddenGems"] = list(
                await asyncio.gather(*(enrich_gem(g) for g in gems[: cfg.max_hidden_gems]))
            )

        return enriched

    async def enrich_trip(self, trip_detail: Dict[str, Any], destination: str = "") -> Dict[str, Any]:
        """
        Enrich the first ``max_days`` days and attach ``budgetEstimate``.

        Days beyond ``max_days`` are kept unchanged.

        Args:
            trip_detail: Final itinerary payload (not modified)
            destination: Context appended to place queries

        Returns:
            A new trip detail dict
        """
        itinerary = [d for d in (trip_detail.get("itinerary") or []) if isinstance(d, dict)]
        head = itinerary[: self.config.max_days]
        tail = itinerary[self.config.max_days :]

        enriched_days: List[Dict[str, Any]] = []
        batch_size = self.config.batch_size
        for start in range(0, len(head), batch_size):
            batch = head[start : start + batch_size]
            enriched_days.extend(
                await asyncio.gather(*(self.enrich_day(day, destination) for day in batch))
            )
            if start + batch_size < len(head):
                await asyncio.sleep(self.config.batch_delay)

        logger.info(
            f"Enriched {len(enriched_days)}/{len(itinerary)} days | "
            f"lookups={len(self._cache)}, destination={destination!r}"
        )

        full_itinerary = enriched_days + tail
        return {
            **trip_detail,
            "itinerary": full_itinerary,
            "budgetEstimate": calculate_comprehensive_budget(
                full_itinerary, trip_detail, self.config
            ),
            "destination": destination or trip_detail.get("destination"),
        }


def _number(value: Any, default: float) -> float:
    if isinstance(value, (int, float)) and not isinstance(value, bool) and value:
        return float(value)
    return float(default)


def calculate_comprehensive_budget(
    itinerary: List[Dict[str, Any]],
    trip_detail: Dict[str, Any],
    config: EnrichmentConfig = DEFAULT_ENRICHMENT_CONFIG,
) -> Dict[str, Any]:
    """
    Category budget estimate from enriched day details.

    Accommodation uses the mean hotel price per day; food adds fixed meal
    costs plus each cafe; transport adds a daily local fare and one
    flight estimate.
    """
    accommodation = food = activities = transport = 0.0

    for day in itinerary:
        hotels = [h for h in (day.get("hotelDetails") or []) if isinstance(h, dict)]
        if hotels:
            accommodation += sum(
                _number(h.get("price"), config.default_hotel_cost) for h in hotels
            ) / len(hotels)

        food += sum(config.meal_costs)
        for cafe in day.get("cafeDetails") or []:
            if isinstance(cafe, dict):
                food += _number(cafe.get("price"), config.default_cafe_cost)

        for activity in day.get("adventureDetails") or []:
            if isinstance(activity, dict):
                activities += _number(activity.get("ticketPrice"), config.default_activity_cost)

        transport += config.local_transport_per_day

    transport += config.flight_estimate
    total = accommodation + food + activities + transport

    previous = trip_detail.get("budgetEstimate")
    currency = previous.get("currency") if isinstance(previous, dict) else None

    return {
        "currency": currency or "USD",
        "total": round(total),
        "categories": [
            {
                "category": "Accommodation",
                "cost": round(accommodation),
                "notes": f"Hotels and lodging for {len(itinerary)} days",
            },
            {
                "category": "Food & Dining",
                "cost": round(food),
                "notes": "Meals, cafes, and restaurants",
            },
            {
                "category": "Activities & Entertainment",
                "cost": round(activities),
                "notes": "Tours, tickets, and experiences",
            },
            {
                "category": "Transportation",
                "cost": round(transport),
                "notes": "Flights and local transport",
            },
        ],
    }
