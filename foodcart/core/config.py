"""Environment-driven configuration objects for FoodCart."""
from __future__ import annotations

import os
from dataclasses import dataclass

from dotenv import load_dotenv

from foodcart.core.constants import REMOTE_API_TIMEOUT_SECONDS, TRACKING_INTERVAL_MS
from foodcart.core.exceptions import ConfigurationException


def _first_env(*names: str) -> str:
    for name in names:
        value = os.getenv(name)
        if value and value.strip():
            return value.strip()
    return ""


def _float_env(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return float(raw)
    except ValueError as exc:
        raise ConfigurationException(f"{name} must be a number, got {raw!r}") from exc


@dataclass(slots=True)
class RemoteConfig:
    api_base: str
    stream_url: str
    timeout: float


@dataclass(slots=True)
class Settings:
    remote: RemoteConfig
    redis_url: str | None
    tracking_interval_ms: int
    log_level: str

    @property
    def demo_mode(self) -> bool:
        """No remote API configured: orders are created locally only."""
        return not self.remote.api_base


def load_settings() -> Settings:
    """Load environment variables once and expose typed settings."""
    load_dotenv()

    remote = RemoteConfig(
        api_base=_first_env("FOODCART_API_BASE", "API_BASE", "BACKEND_URL"),
        stream_url=_first_env("FOODCART_WS_URL", "WS_URL"),
        timeout=_float_env("FOODCART_API_TIMEOUT", REMOTE_API_TIMEOUT_SECONDS),
    )

    interval = int(_float_env("FOODCART_TRACKING_INTERVAL_MS", TRACKING_INTERVAL_MS))
    if interval <= 0:
        raise ConfigurationException("FOODCART_TRACKING_INTERVAL_MS must be positive")

    return Settings(
        remote=remote,
        redis_url=os.getenv("REDIS_URL") or None,
        tracking_interval_ms=interval,
        log_level=os.getenv("LOG_LEVEL", "INFO"),
    )
