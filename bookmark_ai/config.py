"""Settings for talking to the completion endpoint."""

import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

from .errors import ConfigurationError

DEFAULT_BASE_URL = "https://integrate.api.nvidia.com/v1"
DEFAULT_MODEL = "meta/llama-3.1-70b-instruct"  # can be swapped to 8b or 405b

# Bookmarks beyond these limits are never sent to the model.
ANALYZE_LIMIT = 100
QUERY_LIMIT = 200


@dataclass(frozen=True)
class AIConfig:
    api_key: Optional[str] = None
    base_url: str = DEFAULT_BASE_URL
    model: str = DEFAULT_MODEL
    analyze_limit: int = ANALYZE_LIMIT
    query_limit: int = QUERY_LIMIT
    analyze_temperature: float = 0.2
    analyze_max_tokens: int = 4000
    query_temperature: float = 0.1
    query_max_tokens: int = 1000
    timeout: Optional[float] = None  # None leaves the SDK default in place

    @classmethod
    def from_env(cls, **overrides) -> "AIConfig":
        """Build a config from the environment (and a .env file if present)."""
        load_dotenv()
        values = {
            "api_key": os.getenv("NVIDIA_NIM_API_KEY"),
            "base_url": os.getenv("BOOKMARK_AI_BASE_URL") or DEFAULT_BASE_URL,
            "model": os.getenv("BOOKMARK_AI_MODEL") or DEFAULT_MODEL,
        }
        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**values)

    def require_api_key(self) -> str:
        if not self.api_key or not self.api_key.strip():
            raise ConfigurationError(
                "NVIDIA_NIM_API_KEY is not configured. "
                "Please set NVIDIA_NIM_API_KEY in your .env file or environment."
            )
        return self.api_key
