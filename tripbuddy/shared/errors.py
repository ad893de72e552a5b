"""
Exception hierarchy for TripBuddy.

Per-attempt failures (empty output, unparseable JSON) are raised by the
generation pipeline and caught by the fallback graph; persistence and
proxy failures surface through the HTTP layer.
"""

from typing import Any, Dict, Optional


class TripBuddyError(Exception):
    """Base exception for all TripBuddy errors."""

    pass


class ConfigurationError(TripBuddyError):
    """Raised when required configuration (e.g. an API key) is missing."""

    pass


class EmptyResponseError(TripBuddyError):
    """Raised when the model returns blank content."""

    def __init__(self, message: str = "Empty response from model"):
        super().__init__(message)


class ParseError(TripBuddyError):
    """Raised when a JSON object cannot be recovered from model output."""

    pass


class NoJsonFoundError(ParseError):
    """Raised when the raw text contains no opening brace."""

    def __init__(self, message: str = "No JSON start found"):
        super().__init__(message)


class UnbalancedJsonError(ParseError):
    """Raised when brace depth never returns to zero."""

    def __init__(self, message: str = "No JSON end found"):
        super().__init__(message)


class JsonParseError(ParseError):
    """Raised when an extracted span is not valid JSON."""

    pass


class InvalidResponseObjectError(ParseError):
    """Raised when parsed JSON is not an object."""

    def __init__(self, message: str = "Invalid response object"):
        super().__init__(message)


class ResponseValidationError(TripBuddyError):
    """Raised when a parsed response fails structural validation."""

    def __init__(self, detail: Dict[str, Any]):
        super().__init__(detail.get("message") or detail.get("error", "validation_failed"))
        self.detail = detail


class InvalidApiResponseError(TripBuddyError):
    """Raised by the conversation client when the endpoint reply is unusable."""

    pass


class PayloadTooLargeError(TripBuddyError):
    """Raised when a trip payload exceeds the storage size ceiling."""

    def __init__(self, size_mb: float, limit_mb: float):
        super().__init__(
            f"Trip data too large: {size_mb:.2f}MB. Maximum is {limit_mb:g}MB."
        )
        self.size_mb = size_mb
        self.limit_mb = limit_mb


class TripNotFoundError(TripBuddyError):
    """Raised when a trip record id does not exist in the store."""

    pass


class PlacesProxyError(TripBuddyError):
    """Raised when the upstream places API returns an unusable response."""

    def __init__(
        self,
        message: str,
        status_code: int = 502,
        detail: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.status_code = status_code
        self.detail = detail or {}

    def to_payload(self) -> Dict[str, Any]:
        """Structured error body returned to proxy callers."""
        return {"error": str(self), **self.detail}
