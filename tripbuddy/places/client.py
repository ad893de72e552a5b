"""
Google Places proxy client.

Thin async wrapper over the Places web service (text search, details,
photo) with in-process TTL caches. Upstream failures are raised as
PlacesProxyError carrying the status code and body the HTTP layer
returns to callers.
"""

import logging
import re
from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple

import httpx
from cachetools import TTLCache

from tripbuddy.shared.errors import PlacesProxyError


logger = logging.getLogger(__name__)


PLACES_BASE_URL = "https://maps.googleapis.com/maps/api/place"

DETAILS_FIELDS = (
    "name,formatted_address,geometry,rating,photos,price_level,"
    "editorial_summary,vicinity,url"
)

ZERO_RESULTS = {"results": [], "status": "ZERO_RESULTS"}

_TRAILING_DAY = re.compile(r"\s+Day\s*$", re.IGNORECASE)
_WHITESPACE = re.compile(r"\s+")


@dataclass
class PlacesConfig:
    """Cache lifetimes (seconds) and sizes for the proxy."""

    search_ttl: int = 3600
    details_ttl: int = 7200
    photo_ttl: int = 3600
    cache_size: int = 512
    photo_cache_size: int = 128
    default_photo_width: int = 800


DEFAULT_PLACES_CONFIG = PlacesConfig()


def normalize_query(raw: str) -> str:
    """Drop a trailing ' Day', collapse whitespace, trim."""
    return _WHITESPACE.sub(" ", _TRAILING_DAY.sub("", raw)).strip()


def _json_or_none(response: httpx.Response) -> Optional[Dict[str, Any]]:
    try:
        data = response.json()
    except ValueError:
        return None
    return data if isinstance(data, dict) else None


class PlacesClient:
    """
    Places proxy over an explicitly constructed ``httpx.AsyncClient``.

    Usage:
        async with httpx.AsyncClient(timeout=15) as http:
            places = PlacesClient(http, api_key)
            data = await places.search("Louvre Museum")
    """

    def __init__(
        self,
        http: httpx.AsyncClient,
        api_key: Optional[str],
        config: PlacesConfig = DEFAULT_PLACES_CONFIG,
        base_url: str = PLACES_BASE_URL,
    ):
        self.http = http
        self.api_key = api_key
        self.config = config
        self.base_url = base_url.rstrip("/")
        self._search_cache: TTLCache = TTLCache(maxsize=config.cache_size, ttl=config.search_ttl)
        self._details_cache: TTLCache = TTLCache(maxsize=config.cache_size, ttl=config.details_ttl)
        self._photo_cache: TTLCache = TTLCache(
            maxsize=config.photo_cache_size, ttl=config.photo_ttl
        )

    def _require_key(self) -> str:
        if not self.api_key:
            raise PlacesProxyError("Missing GOOGLE_MAPS_API_KEY", status_code=500)
        return self.api_key

    async def search(self, query: str) -> Dict[str, Any]:
        """
        Text search for places.

        An empty normalized query or an empty upstream result is a
        successful ``ZERO_RESULTS`` payload, not an error.

        Raises:
            PlacesProxyError: On missing key, HTTP failure or non-OK status
        """
        normalized = normalize_query(query)
        if not normalized:
            return dict(ZERO_RESULTS)

        cached = self._search_cache.get(normalized)
        if cached is not None:
            logger.debug(f"Places search cache hit | query={normalized!r}")
            return cached

        key = self._require_key()
        response = await self.http.get(
            f"{self.base_url}/textsearch/json",
            params={"query": normalized, "key": key},
        )
        data = _json_or_none(response) or {}
        upstream_status = data.get("status")

        if response.is_error:
            logger.error(
                f"Places search failed | http={response.status_code}, "
                f"status={upstream_status}, message={data.get('error_message')}"
            )
            raise PlacesProxyError(
                "Google Places search failed",
                detail={"status": upstream_status, "message": data.get("error_message")},
            )

        results = data.get("results")
        if upstream_status == "ZERO_RESULTS" or (isinstance(results, list) and not results):
            result = dict(ZERO_RESULTS)
        elif upstream_status and upstream_status != "OK":
            logger.error(
                f"Places search non-OK | status={upstream_status}, "
                f"message={data.get('error_message')}"
            )
            raise PlacesProxyError(
                "Google Places search failed",
                detail={"status": upstream_status, "message": data.get("error_message")},
            )
        else:
            result = data

        self._search_cache[normalized] = result
        return result

    async def details(self, place_id: str) -> Dict[str, Any]:
        """
        Extended place fields (summary, rating, price level, photos).

        Raises:
            PlacesProxyError: On missing key, HTTP failure or non-OK status
        """
        cached = self._details_cache.get(place_id)
        if cached is not None:
            logger.debug(f"Places details cache hit | place_id={place_id}")
            return cached

        key = self._require_key()
        response = await self.http.get(
            f"{self.base_url}/details/json",
            params={"place_id": place_id, "fields": DETAILS_FIELDS, "key": key},
        )
        data = _json_or_none(response) or {}
        upstream_status = data.get("status")

        if response.is_error or (upstream_status and upstream_status != "OK"):
            logger.error(
                f"Places details failed | http={response.status_code}, "
                f"status={upstream_status}, message={data.get('error_message')}"
            )
            raise PlacesProxyError(
                "Google Places details failed",
                detail={"status": upstream_status, "message": data.get("error_message")},
            )

        self._details_cache[place_id] = data
        return data

    async def photo(
        self,
        photo_reference: str,
        maxwidth: Optional[int] = None,
    ) -> Tuple[bytes, str]:
        """
        Fetch photo bytes, following the upstream redirect.

        Returns:
            Tuple of (image bytes, content type)

        Raises:
            PlacesProxyError: On missing key, HTTP failure, or a non-image body
        """
        width = maxwidth or self.config.default_photo_width
        cache_key = (photo_reference, width)
        cached = self._photo_cache.get(cache_key)
        if cached is not None:
            return cached

        key = self._require_key()
        response = await self.http.get(
            f"{self.base_url}/photo",
            params={"photo_reference": photo_reference, "maxwidth": width, "key": key},
            follow_redirects=True,
        )
        content_type = response.headers.get("content-type", "")

        if response.is_error:
            message: Any = _json_or_none(response)
            if message is None:
                message = response.text
            logger.error(
                f"Places photo fetch failed | http={response.status_code}, "
                f"content_type={content_type}"
            )
            raise PlacesProxyError(
                "Google Places photo failed",
                detail={
                    "status": response.status_code,
                    "statusText": response.reason_phrase,
                    "message": message,
                },
            )

        if not content_type.lower().startswith("image/"):
            logger.error(f"Response is not an image: {content_type}")
            raise PlacesProxyError(
                "Response is not an image",
                detail={"contentType": content_type},
            )

        result = (response.content, content_type or "image/jpeg")
        self._photo_cache[cache_key] = result
        return result
