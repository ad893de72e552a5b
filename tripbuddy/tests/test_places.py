"""
Tests for the places proxy client, its HTTP routes, and trip enrichment.

Upstream responses come from ``httpx.MockTransport``.
"""

import asyncio

import httpx
import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from tripbuddy.places.client import PlacesClient, ZERO_RESULTS, normalize_query
from tripbuddy.places.enrichment import (
    TripEnricher,
    calculate_comprehensive_budget,
    estimate_activity_price,
    estimate_cafe_price,
    estimate_hotel_price,
)
from tripbuddy.places.places_api import router
from tripbuddy.shared.errors import PlacesProxyError


def _places(handler, api_key="test-key"):
    http = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return PlacesClient(http, api_key)


def _search_hit(name, rating=4.5, price_level=2):
    return {
        "status": "OK",
        "results": [
            {
                "name": name,
                "rating": rating,
                "price_level": price_level,
                "formatted_address": f"{name} street 1",
                "place_id": f"id-{name}",
                "photos": [{"photo_reference": f"ref-{i}"} for i in range(5)],
            }
        ],
    }


def _app(places):
    app = FastAPI()
    app.include_router(router)
    app.state.places = places
    return app


class TestNormalizeQuery:
    def test_trailing_day_and_whitespace(self):
        assert normalize_query("  Louvre   Museum Day ") == "Louvre Museum"
        assert normalize_query("Old Town day") == "Old Town"

    def test_only_suffix_removed(self):
        assert normalize_query("Day trip to Sintra") == "Day trip to Sintra"


class TestPlacesClient:
    """Tests for search, details and photo proxying."""

    def test_search_normalizes_and_caches(self):
        seen = []

        def handler(request):
            seen.append(request.url.params["query"])
            return httpx.Response(200, json=_search_hit("Louvre"))

        places = _places(handler)

        async def scenario():
            first = await places.search("Louvre  Day")
            second = await places.search("Louvre")
            return first, second

        first, second = asyncio.run(scenario())
        assert seen == ["Louvre"]
        assert first["results"][0]["name"] == "Louvre"
        assert second is first

    def test_empty_query_is_zero_results(self):
        places = _places(lambda request: pytest.fail("no upstream call expected"))
        assert asyncio.run(places.search("  Day ")) == ZERO_RESULTS

    def test_upstream_zero_results(self):
        places = _places(lambda request: httpx.Response(200, json={"status": "ZERO_RESULTS"}))
        assert asyncio.run(places.search("Atlantis")) == ZERO_RESULTS

    def test_non_ok_status_raises(self):
        body = {"status": "REQUEST_DENIED", "error_message": "bad key"}
        places = _places(lambda request: httpx.Response(200, json=body))
        with pytest.raises(PlacesProxyError) as exc:
            asyncio.run(places.search("Louvre"))
        assert exc.value.status_code == 502
        assert exc.value.to_payload()["status"] == "REQUEST_DENIED"

    def test_missing_key(self):
        places = _places(lambda request: httpx.Response(200), api_key=None)
        with pytest.raises(PlacesProxyError) as exc:
            asyncio.run(places.search("Louvre"))
        assert exc.value.status_code == 500

    def test_details_requests_fields(self):
        seen = []

        def handler(request):
            seen.append(request.url.params["fields"])
            return httpx.Response(200, json={"status": "OK", "result": {"name": "Louvre"}})

        data = asyncio.run(_places(handler).details("abc"))
        assert data["result"]["name"] == "Louvre"
        assert "editorial_summary" in seen[0]

    def test_photo_follows_redirect(self):
        def handler(request):
            if request.url.path.endswith("/photo"):
                assert request.url.params["maxwidth"] == "800"
                return httpx.Response(302, headers={"location": "https://cdn.test/img.jpg"})
            return httpx.Response(200, content=b"\xff\xd8jpeg", headers={"content-type": "image/jpeg"})

        content, content_type = asyncio.run(_places(handler).photo("ref-1"))
        assert content == b"\xff\xd8jpeg"
        assert content_type == "image/jpeg"

    def test_photo_non_image_rejected(self):
        places = _places(
            lambda request: httpx.Response(200, text="<html/>", headers={"content-type": "text/html"})
        )
        with pytest.raises(PlacesProxyError) as exc:
            asyncio.run(places.photo("ref-1"))
        assert str(exc.value) == "Response is not an image"

    def test_photo_upstream_error(self):
        places = _places(lambda request: httpx.Response(403, json={"error": "forbidden"}))
        with pytest.raises(PlacesProxyError) as exc:
            asyncio.run(places.photo("ref-1"))
        assert exc.value.detail["status"] == 403


class TestPlacesRoutes:
    """Tests for the proxy endpoints."""

    def test_search_requires_query(self):
        client = TestClient(_app(_places(lambda r: httpx.Response(200))))
        response = client.get("/api/google/places/search")
        assert response.status_code == 400
        assert response.json() == {"error": "Missing query"}

    def test_search_sets_cache_header(self):
        client = TestClient(_app(_places(lambda r: httpx.Response(200, json=_search_hit("Louvre")))))
        response = client.get("/api/google/places/search", params={"query": "Louvre"})
        assert response.status_code == 200
        assert "max-age=3600" in response.headers["cache-control"]

    def test_search_upstream_failure_is_502(self):
        body = {"status": "OVER_QUERY_LIMIT"}
        client = TestClient(_app(_places(lambda r: httpx.Response(200, json=body))))
        response = client.get("/api/google/places/search", params={"query": "Louvre"})
        assert response.status_code == 502
        assert response.json()["error"] == "Google Places search failed"

    def test_details_requires_place_id(self):
        client = TestClient(_app(_places(lambda r: httpx.Response(200))))
        assert client.get("/api/google/places/details").status_code == 400

    def test_photo_non_image_is_502(self):
        client = TestClient(
            _app(_places(lambda r: httpx.Response(200, text="x", headers={"content-type": "text/plain"})))
        )
        response = client.get("/api/google/places/photo", params={"photo_reference": "r"})
        assert response.status_code == 502
        assert response.json()["error"] == "Response is not an image"

    def test_photo_bytes(self):
        client = TestClient(
            _app(_places(lambda r: httpx.Response(200, content=b"png", headers={"content-type": "image/png"})))
        )
        response = client.get("/api/google/places/photo", params={"photo_reference": "r"})
        assert response.status_code == 200
        assert response.content == b"png"
        assert response.headers["content-type"] == "image/png"


class TestEnrichment:
    """Tests for price estimation, enrichment and the budget estimate."""

    @pytest.mark.parametrize(
        "estimate, level, expected",
        [
            (estimate_cafe_price, 1, 5),
            (estimate_cafe_price, None, 15),
            (estimate_hotel_price, 4, 350),
            (estimate_hotel_price, 9, 100),
            (estimate_activity_price, 5, 200),
            (estimate_activity_price, 0, 25),
        ],
    )
    def test_price_tables(self, estimate, level, expected):
        assert estimate(level) == expected

    def test_enriches_first_days_and_keeps_the_rest(self):
        queries = []

        def handler(request):
            query = request.url.params["query"]
            queries.append(query)
            return httpx.Response(200, json=_search_hit(query.split(" Kyoto")[0], price_level=1))

        days = [
            {
                "day": d,
                "title": f"Temple walk {d}",
                "morning": "m",
                "afternoon": "a",
                "evening": "e",
                "cafes": ["Cafe A", "Cafe B"],
                "hotels": ["Hotel K"],
            }
            for d in range(1, 6)
        ]
        trip = {"resp": "ok", "ui": "Final", "itinerary": days}

        enricher = TripEnricher(_places(handler))
        result = asyncio.run(enricher.enrich_trip(trip, "Kyoto"))

        itinerary = result["itinerary"]
        assert len(itinerary) == 5
        assert itinerary[0]["photos"] == ["ref-0", "ref-1", "ref-2"]
        assert [c["price"] for c in itinerary[0]["cafeDetails"]] == [5, 5]
        assert itinerary[0]["hotelDetails"][0]["price"] == 50
        assert "cafeDetails" not in itinerary[3]
        assert result["destination"] == "Kyoto"
        assert "budgetEstimate" not in trip
        assert queries.count("Cafe A Kyoto") == 1

    def test_failed_lookup_leaves_item(self):
        enricher = TripEnricher(_places(lambda r: httpx.Response(500, json={"status": "UNKNOWN_ERROR"})))
        day = {"day": 1, "title": "Beach", "morning": "m", "afternoon": "a", "evening": "e"}
        result = asyncio.run(enricher.enrich_day(day, "Bali"))
        assert result == day

    def test_failed_lookup_searched_once(self):
        calls = []

        def handler(request):
            calls.append(request.url.params["query"])
            return httpx.Response(500, json={"status": "UNKNOWN_ERROR"})

        enricher = TripEnricher(_places(handler))

        async def scenario():
            first = await enricher.lookup("Ghost Cafe", "Bali")
            concurrent = await asyncio.gather(
                enricher.lookup("Ghost Cafe", "Bali"), enricher.lookup("Ghost Cafe", "Bali")
            )
            return first, concurrent

        first, concurrent = asyncio.run(scenario())
        assert first is None
        assert concurrent == [None, None]
        assert calls == ["Ghost Cafe Bali"]

    def test_comprehensive_budget(self):
        itinerary = [
            {"hotelDetails": [{"price": 100}, {"price": 200}], "cafeDetails": [{"price": 5}]},
            {"adventureDetails": [{"ticketPrice": 40}, {"ticketPrice": None}]},
        ]
        budget = calculate_comprehensive_budget(itinerary, {})
        costs = {c["category"]: c["cost"] for c in budget["categories"]}

        assert costs["Accommodation"] == 150
        assert costs["Food & Dining"] == 65 * 2 + 5
        assert costs["Activities & Entertainment"] == 65
        assert costs["Transportation"] == 20 * 2 + 500
        assert budget["total"] == sum(costs.values())
        assert budget["currency"] == "USD"
