"""
Process settings loaded from the environment.

Values are read once at process start (``Settings.from_env``) and passed
explicitly to the objects that need them.
"""

import os
from dataclasses import dataclass, field
from typing import List, Optional

from dotenv import load_dotenv

load_dotenv()


DEFAULT_MODEL_FALLBACKS = [
    "x-ai/grok-4-fast",
    "google/gemini-2.0-flash-exp:free",
    "openai/gpt-4.1-mini",
]


@dataclass
class Settings:
    """
    Environment-backed settings.

    Attributes:
        openrouter_api_key: API key for the OpenAI-compatible model gateway
        openrouter_base_url: Base URL of the model gateway
        model_fallbacks: Ordered candidate models for the fallback graph
        llm_max_retries: SDK-level retries per model call
        llm_timeout: Hard timeout per model call, in seconds
        google_maps_api_key: Key for the places proxy
        log_format: "text" or "json"
        debug_log_dir: Directory for per-session debug logs (disabled if None)
    """

    openrouter_api_key: Optional[str] = None
    openrouter_base_url: str = "https://openrouter.ai/api/v1"
    model_fallbacks: List[str] = field(
        default_factory=lambda: list(DEFAULT_MODEL_FALLBACKS)
    )
    llm_max_retries: int = 2
    llm_timeout: float = 60.0
    google_maps_api_key: Optional[str] = None
    log_format: str = "text"
    debug_log_dir: Optional[str] = None

    @classmethod
    def from_env(cls) -> "Settings":
        """Build settings from environment variables (after .env is loaded)."""
        models_env = os.environ.get("TRIPBUDDY_MODELS", "")
        models = [m.strip() for m in models_env.split(",") if m.strip()]

        return cls(
            openrouter_api_key=os.environ.get("OPENROUTER_API_KEY") or None,
            openrouter_base_url=os.environ.get(
                "OPENROUTER_BASE_URL", "https://openrouter.ai/api/v1"
            ),
            model_fallbacks=models or list(DEFAULT_MODEL_FALLBACKS),
            llm_max_retries=int(os.environ.get("TRIPBUDDY_LLM_MAX_RETRIES", "2")),
            llm_timeout=float(os.environ.get("TRIPBUDDY_LLM_TIMEOUT", "60")),
            google_maps_api_key=(
                os.environ.get("GOOGLE_MAPS_API_KEY")
                or os.environ.get("NEXT_PUBLIC_GOOGLE_MAPS_API_KEY")
                or None
            ),
            log_format=os.environ.get("TRIPBUDDY_LOG_FORMAT", "text"),
            debug_log_dir=os.environ.get("TRIPBUDDY_DEBUG_LOG_DIR") or None,
        )
