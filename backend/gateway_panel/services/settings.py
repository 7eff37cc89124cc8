"""Environment-driven settings for the gateway panel backend."""
from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from typing import List, Optional

logger = logging.getLogger("gateway_panel.settings")

DEFAULT_API_BASE_URL = "http://localhost:8080"
DEFAULT_HTTP_TIMEOUT = 15.0
DEFAULT_HISTORY_LIMIT = 200
MAX_HISTORY_LIMIT = 1000


@dataclass(frozen=True)
class PanelSettings:
    api_base_url: str = DEFAULT_API_BASE_URL
    instance_name: str = ""
    http_timeout: float = DEFAULT_HTTP_TIMEOUT
    history_limit: int = DEFAULT_HISTORY_LIMIT
    cors_origins: List[str] = field(default_factory=lambda: ["*"])


def _env_str(name: str) -> Optional[str]:
    value = os.getenv(name)
    if value is None:
        return None
    return value.strip()


def _env_float(name: str, default: float) -> float:
    raw = _env_str(name)
    if not raw:
        return default
    try:
        value = float(raw)
    except ValueError:
        logger.warning("Invalid %s=%s; using %.1f", name, raw, default)
        return default
    if value <= 0:
        logger.warning("Invalid %s=%s; must be positive, using %.1f", name, raw, default)
        return default
    return value


def _env_int(name: str, default: int) -> int:
    raw = _env_str(name)
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        logger.warning("Invalid %s=%s; using %s", name, raw, default)
        return default


def load_settings() -> PanelSettings:
    base_url = _env_str("GATEWAY_PANEL_API_BASE_URL")
    instance = _env_str("GATEWAY_PANEL_INSTANCE") or ""
    history_limit = _env_int("GATEWAY_PANEL_HISTORY_LIMIT", DEFAULT_HISTORY_LIMIT)
    history_limit = max(1, min(history_limit, MAX_HISTORY_LIMIT))

    origins_raw = _env_str("GATEWAY_PANEL_CORS_ORIGINS")
    origins = ["*"]
    if origins_raw:
        parsed = [item.strip() for item in origins_raw.split(",") if item.strip()]
        if parsed:
            origins = parsed

    return PanelSettings(
        api_base_url=base_url if base_url is not None else DEFAULT_API_BASE_URL,
        instance_name=instance,
        http_timeout=_env_float("GATEWAY_PANEL_HTTP_TIMEOUT", DEFAULT_HTTP_TIMEOUT),
        history_limit=history_limit,
        cors_origins=origins,
    )


__all__ = [
    "DEFAULT_API_BASE_URL",
    "DEFAULT_HISTORY_LIMIT",
    "DEFAULT_HTTP_TIMEOUT",
    "MAX_HISTORY_LIMIT",
    "PanelSettings",
    "load_settings",
]
