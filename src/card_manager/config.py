"""Runtime settings read from the process environment."""

import logging
import os
from dataclasses import dataclass, field
from typing import Mapping

from card_manager.errors import ConfigurationError

DEFAULT_MODEL = "ibm-granite/granite-3.3-8b-instruct"
DEFAULT_BASE_URL = "https://api.replicate.com/v1"


@dataclass(frozen=True)
class Settings:
    """Settings for the API server and the extraction gateway."""

    api_token: str | None = None
    """Bearer token for the prediction API."""

    model: str = DEFAULT_MODEL
    """Model identifier submitted with each prediction."""

    base_url: str = DEFAULT_BASE_URL
    """Root URL of the prediction API."""

    poll_interval: float = 1.0
    """Seconds to wait between job status polls."""

    max_poll_attempts: int = 120
    """Maximum number of polls per job; 0 means unbounded."""

    max_new_tokens: int = 256
    """Output length hint sent with each prediction."""

    cors_origins: list[str] = field(default_factory=lambda: ["*"])
    """Origins allowed by the CORS middleware."""

    log_level: str = "INFO"

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "Settings":
        """
        Build settings from environment variables.

        Args:
            environ: Mapping to read from. Defaults to ``os.environ``.

        Raises:
            ConfigurationError: If a numeric setting cannot be parsed.
        """
        env = os.environ if environ is None else environ

        origins = env.get("CARD_MANAGER_CORS_ORIGINS", "*")
        log_level = env.get("CARD_MANAGER_LOG_LEVEL", "INFO").upper()
        if not isinstance(logging.getLevelName(log_level), int):
            raise ConfigurationError(f"Unknown log level: {log_level}")

        return cls(
            api_token=env.get("REPLICATE_API_TOKEN") or None,
            model=env.get("REPLICATE_MODEL", DEFAULT_MODEL),
            base_url=env.get("REPLICATE_BASE_URL", DEFAULT_BASE_URL).rstrip("/"),
            poll_interval=_number(env, "CARD_MANAGER_POLL_INTERVAL", 1.0, float),
            max_poll_attempts=_number(env, "CARD_MANAGER_MAX_POLL_ATTEMPTS", 120, int),
            max_new_tokens=_number(env, "CARD_MANAGER_MAX_NEW_TOKENS", 256, int),
            cors_origins=[o.strip() for o in origins.split(",") if o.strip()],
            log_level=log_level,
        )


def _number(env: Mapping[str, str], key: str, default, cast):
    raw = env.get(key)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = cast(raw)
    except ValueError as e:
        raise ConfigurationError(f"{key} must be a number, got {raw!r}") from e
    if value < 0:
        raise ConfigurationError(f"{key} must not be negative, got {raw!r}")
    return value
