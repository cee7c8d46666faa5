"""Runtime settings read from the environment."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping, Optional

DEFAULT_API_BASE_URL = "http://localhost:3001"


def _positive_float(env: Mapping[str, str], name: str, default: float) -> float:
    raw = env.get(name)
    if raw is None or raw == "":
        return default
    try:
        value = float(raw)
    except ValueError as exc:
        raise ValueError(f"{name} must be a number, got {raw!r}") from exc
    if value <= 0:
        raise ValueError(f"{name} must be positive, got {raw!r}")
    return value


@dataclass(frozen=True)
class Settings:
    api_base_url: str = DEFAULT_API_BASE_URL
    poll_interval: float = 1.5
    request_timeout: float = 5.0
    host: str = "0.0.0.0"
    port: int = 8000
    log_level: str = "INFO"

    @classmethod
    def from_env(cls, env: Optional[Mapping[str, str]] = None) -> "Settings":
        """Build settings from ``TICTAC_*`` variables, falling back to defaults."""

        env = os.environ if env is None else env
        port_raw = env.get("TICTAC_PORT", "8000")
        try:
            port = int(port_raw)
        except ValueError as exc:
            raise ValueError(f"TICTAC_PORT must be an integer, got {port_raw!r}") from exc
        return cls(
            api_base_url=env.get("TICTAC_API_BASE_URL", DEFAULT_API_BASE_URL).rstrip("/"),
            poll_interval=_positive_float(env, "TICTAC_POLL_INTERVAL", 1.5),
            request_timeout=_positive_float(env, "TICTAC_REQUEST_TIMEOUT", 5.0),
            host=env.get("TICTAC_HOST", "0.0.0.0"),
            port=port,
            log_level=env.get("TICTAC_LOG_LEVEL", "INFO").upper(),
        )
