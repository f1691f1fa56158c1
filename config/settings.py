"""Environment-level configuration for the interrogation game.

This module isolates things that depend on the deployment environment
(API keys, model choice, store location, timeouts) from pure game-domain
logic. Values are read once at process start and passed down explicitly.
"""

import os
from dataclasses import dataclass

from dotenv import load_dotenv

DEFAULT_MODEL = "gpt-4o"
DEFAULT_REDIS_URL = "redis://localhost:6379/0"
DEFAULT_APP_ID = "defendant-interrogation"


def _float_env(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError as e:
        raise ValueError(f"{name} must be a number, got {raw!r}") from e


@dataclass
class EnvironmentSettings:
    """Environment / deployment settings."""

    openai_api_key: str | None = None
    model: str = DEFAULT_MODEL
    temperature: float = 0.8
    redis_url: str = DEFAULT_REDIS_URL
    history_app_id: str = DEFAULT_APP_ID
    # Applied to every generation, history and store call
    upstream_timeout_seconds: float = 60.0

    @classmethod
    def from_env(cls) -> "EnvironmentSettings":
        """Build settings from environment variables (and a local .env file)."""
        load_dotenv()
        return cls(
            openai_api_key=os.getenv("OPENAI_API_KEY"),
            model=os.getenv("DEFENDANT_MODEL") or DEFAULT_MODEL,
            temperature=_float_env("DEFENDANT_TEMPERATURE", 0.8),
            redis_url=os.getenv("REDIS_URL") or DEFAULT_REDIS_URL,
            history_app_id=os.getenv("HISTORY_APP_ID") or DEFAULT_APP_ID,
            upstream_timeout_seconds=_float_env("UPSTREAM_TIMEOUT_SECONDS", 60.0),
        )


def get_env_settings() -> EnvironmentSettings:
    """Convenience accessor for environment settings."""
    return EnvironmentSettings.from_env()
