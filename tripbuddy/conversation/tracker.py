"""
Client-side conversation session.

Owns the message history of one chat, posts it to the generation
endpoint, and turns the reply into the next assistant turn. Sends are
debounced and single-flight: a newer send cancels the one in progress,
whose caller then gets None. Transport failures are retried with a
bounded backoff; whatever still fails becomes a friendly assistant
message. Final itineraries are reconciled to the requested day count
and saved through the trip store.
"""

import asyncio
import inspect
import logging
import re
import time
import uuid
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, List, Optional

import httpx

from tripbuddy.conversation.reconcile import (
    enrich_with_duration,
    infer_desired_days,
    reconcile_day_count,
)
from tripbuddy.conversation.ui import WidgetPrompt, widget_for
from tripbuddy.shared.contracts.generation import ConversationTurn, UiTag
from tripbuddy.shared.errors import InvalidApiResponseError, TripBuddyError
from tripbuddy.shared.retry import RetryPolicy
from tripbuddy.trips.store import TripStore


logger = logging.getLogger(__name__)


class SessionState(str, Enum):
    IDLE = "idle"
    SENDING = "sending"
    RECONCILING = "reconciling"


@dataclass
class TrackerConfig:
    """Client-side send behaviour."""

    endpoint: str = "/api/aimodel"
    debounce_seconds: float = 0.5
    request_timeout: float = 90.0

    # Retry
    max_attempts: int = 2
    initial_backoff: float = 1.0
    backoff_jitter: float = 1.0

    # "Having trouble connecting" hint once retry_count exceeds this
    connection_hint_threshold: int = 2

    # Planning indicator heuristic
    final_prediction_min_turns: int = 10


DEFAULT_TRACKER_CONFIG = TrackerConfig()


NON_RETRYABLE_MESSAGES = ("Missing OPENROUTER_API_KEY", "Invalid request")
TIMEOUT_PATTERN = re.compile(r"timeout|ECONNABORTED", re.IGNORECASE)
NETWORK_PATTERN = re.compile(r"network|fetch", re.IGNORECASE)


def error_text(error: BaseException) -> str:
    """
    Human-readable error text.

    Prefers the ``error`` field of a JSON error body; timeouts and
    transport failures get a stable prefix so they can be classified.
    """
    if isinstance(error, httpx.HTTPStatusError):
        try:
            body = error.response.json()
        except ValueError:
            body = None
        if isinstance(body, dict) and isinstance(body.get("error"), str):
            return body["error"]
        return f"Request failed with status code {error.response.status_code}"
    if isinstance(error, httpx.TimeoutException):
        return f"Request timeout: {error}"
    if isinstance(error, httpx.TransportError):
        return f"Network error: {error}"
    return str(error) or "Server error"


def is_retryable_send_error(error: BaseException) -> bool:
    """Cancellation, bad credentials and rejected requests are never retried."""
    if isinstance(error, asyncio.CancelledError):
        return False
    if isinstance(error, httpx.HTTPStatusError) and error.response.status_code in (401, 403):
        return False
    message = error_text(error)
    return not any(marker in message for marker in NON_RETRYABLE_MESSAGES)


def friendly_error_message(message: str) -> str:
    """Map a raw error message to the text shown to the traveller."""
    if TIMEOUT_PATTERN.search(message):
        return "The AI took too long to respond. Please try again with a shorter message."
    if NETWORK_PATTERN.search(message):
        return "Network connection issue. Please check your internet and try again."
    if "Missing OPENROUTER_API_KEY" in message:
        return "API configuration error. Please contact support."
    if "All model fallbacks failed" in message:
        return "I'm having trouble connecting to our AI services. Please try again in a moment."
    return f"Sorry, I encountered an error: {message}. Please try again."


class ConversationSession:
    """
    One chat with the trip planner.

    Args:
        http: Client pointed at the API (base_url set by the caller)
        store: Trip store for saving final itineraries; None disables saving
        uid: Owner of created trips
        edit_trip_id: Record to update instead of creating a new trip
        on_final: Called with the reconciled final payload (may be async)
        config: Send behaviour
    """

    def __init__(
        self,
        http: httpx.AsyncClient,
        store: Optional[TripStore] = None,
        uid: Optional[str] = None,
        edit_trip_id: Optional[str] = None,
        on_final: Optional[Callable[[Dict[str, Any]], Any]] = None,
        config: TrackerConfig = DEFAULT_TRACKER_CONFIG,
        session_id: Optional[str] = None,
    ):
        self.http = http
        self.store = store
        self.uid = uid
        self.edit_trip_id = edit_trip_id
        self.on_final = on_final
        self.config = config
        self.session_id = session_id or uuid.uuid4().hex[:8]

        self.messages: List[ConversationTurn] = []
        self.state = SessionState.IDLE
        self.desired_days: Optional[int] = None
        self.retry_count = 0
        self.expecting_final = False
        self.widget: Optional[WidgetPrompt] = None
        self.last_payload: Optional[Dict[str, Any]] = None
        self.last_error: Optional[str] = None
        self.saved_trip_id: Optional[str] = None
        self.last_save_error: Optional[str] = None

        self.retry_policy = RetryPolicy(
            max_attempts=config.max_attempts,
            is_retryable=is_retryable_send_error,
            initial_wait=config.initial_backoff,
            jitter=config.backoff_jitter,
        )

        self._last_send_at: Optional[float] = None
        self._pending_content: Optional[str] = None
        self._inflight: Optional[asyncio.Task] = None

    @property
    def show_connection_hint(self) -> bool:
        return self.retry_count > self.config.connection_hint_threshold

    def predict_final(self) -> bool:
        """Guess whether the next reply is the final itinerary."""
        last_ui = next(
            (m.ui for m in reversed(self.messages) if m.role == "assistant" and m.ui),
            None,
        )
        text = " ".join(m.content.lower() for m in self.messages)
        return (
            last_ui == UiTag.TRAVEL_INTEREST.value
            or len(self.messages) > self.config.final_prediction_min_turns
            or ("budget" in text and "destination" in text and "group" in text)
        )

    async def send(self, content: str) -> Optional[ConversationTurn]:
        """
        Send one user message.

        Returns:
            The assistant turn appended for this send (a friendly error
            turn on failure), or None if the send was dropped as a
            duplicate or superseded by a newer send
        """
        content = (content or "").strip()
        if not content:
            return None

        now = time.monotonic()
        if self._last_send_at is not None and now - self._last_send_at < self.config.debounce_seconds:
            logger.debug(f"[session={self.session_id}] Dropped rapid send")
            return None
        self._last_send_at = now

        if self._pending_content == content:
            logger.debug(f"[session={self.session_id}] Dropped duplicate pending send")
            return None

        if self._inflight is not None and not self._inflight.done():
            logger.info(f"[session={self.session_id}] Cancelling in-flight request")
            self._inflight.cancel()

        self._pending_content = content
        task = asyncio.ensure_future(self._exchange(content))
        self._inflight = task
        try:
            return await task
        except asyncio.CancelledError:
            if self._inflight is task:
                raise
            logger.info(f"[session={self.session_id}] Request superseded by a newer send")
            return None

    async def _exchange(self, content: str) -> ConversationTurn:
        _log = f"[session={self.session_id}] "
        self.state = SessionState.SENDING
        self.expecting_final = self.predict_final()

        desired = infer_desired_days(content)
        if desired:
            self.desired_days = desired

        user_turn = ConversationTurn(
            role="user", content=enrich_with_duration(content, self.desired_days)
        )
        self.messages.append(user_turn)

        try:
            payload = await self._post_with_retry(content)
            turn = await self._accept(payload)
            self.retry_count = 0
            self.last_error = None
            return turn
        except asyncio.CancelledError:
            raise
        except (httpx.HTTPError, TripBuddyError, ValueError) as e:
            message = error_text(e)
            logger.error(f"{_log}Chat error: {message}")
            self.last_error = message
            self.retry_count += 1
            turn = ConversationTurn(role="assistant", content=friendly_error_message(message))
            self.messages.append(turn)
            self.widget = None
            return turn
        finally:
            if asyncio.current_task() is self._inflight:
                self.state = SessionState.IDLE
                self.expecting_final = False
                self._pending_content = None

    async def _post_with_retry(self, content: str) -> Dict[str, Any]:
        _log = f"[session={self.session_id}] "
        body = {"messages": [m.model_dump(exclude_none=True) for m in self.messages]}
        headers = {"x-session-id": self.session_id}

        async for attempt in self.retry_policy.async_retrying():
            with attempt:
                number = attempt.retry_state.attempt_number
                logger.info(
                    f"{_log}Attempt {number}/{self.retry_policy.max_attempts} for: {content[:50]!r}"
                )
                response = await self.http.post(
                    self.config.endpoint,
                    json=body,
                    headers=headers,
                    timeout=self.config.request_timeout,
                )
                response.raise_for_status()

        try:
            data = response.json()
        except ValueError:
            raise InvalidApiResponseError("Invalid response format from API")
        if not isinstance(data, dict):
            raise InvalidApiResponseError("Invalid response format from API")
        if not isinstance(data.get("resp"), str) or not data["resp"]:
            raise InvalidApiResponseError("Missing response text from API")
        return data

    async def _accept(self, payload: Dict[str, Any]) -> ConversationTurn:
        turn = ConversationTurn(role="assistant", content=payload["resp"], ui=payload.get("ui"))
        self.messages.append(turn)
        self.widget = widget_for(turn.ui)

        if turn.ui == UiTag.FINAL.value:
            self.state = SessionState.RECONCILING
            payload = reconcile_day_count(payload, self.desired_days)
            if self.on_final is not None:
                result = self.on_final(payload)
                if inspect.isawaitable(result):
                    await result
            self._save(payload)

        self.last_payload = payload
        return turn

    def _save(self, payload: Dict[str, Any]) -> None:
        """Persist a final itinerary; failures are recorded, not raised."""
        _log = f"[session={self.session_id}] "
        if self.store is None:
            return

        days = len(payload.get("itinerary") or [])
        try:
            if self.edit_trip_id:
                self.store.update(self.edit_trip_id, payload)
                self.saved_trip_id = self.edit_trip_id
                logger.info(f"{_log}Trip updated successfully | days={days}")
            elif self.uid:
                self.saved_trip_id = self.store.create(
                    trip_id=str(int(time.time() * 1000)),
                    uid=self.uid,
                    trip_detail=payload,
                )
                logger.info(f"{_log}Trip saved successfully | days={days}")
            self.last_save_error = None
        except TripBuddyError as e:
            logger.error(f"{_log}Failed to save trip: {e}")
            self.last_save_error = str(e)
