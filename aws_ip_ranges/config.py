"""Application configuration loader for aws_ip_ranges."""

from __future__ import annotations

import math
import os
from dataclasses import dataclass, replace
from typing import Mapping, Optional

from aws_ip_ranges.sources import DEFAULT_URL, DEFAULT_USER_AGENT

__all__ = [
    "AppConfig",
    "load_config",
]


@dataclass(frozen=True)
class AppConfig:
    """Settings for a single run.

    ``timeout`` of ``None`` means the HTTP request is not bounded.
    """

    url: str = DEFAULT_URL
    timeout: Optional[float] = None
    user_agent: str = DEFAULT_USER_AGENT
    log_level: str = "WARNING"

    def override(self, **changes: object) -> "AppConfig":
        return replace(self, **{k: v for k, v in changes.items() if v is not None})


def _parse_timeout(raw: Optional[str]) -> Optional[float]:
    if raw is None or not raw.strip():
        return None
    try:
        value = float(raw)
    except ValueError as exc:
        raise ValueError(f"invalid timeout: {raw!r}") from exc
    if not math.isfinite(value) or value <= 0:
        raise ValueError(f"timeout must be a positive number, got {raw!r}")
    return value


def load_config(env: Optional[Mapping[str, str]] = None) -> AppConfig:
    """Load configuration from environment variables."""

    env_map: Mapping[str, str]
    if env is None:
        env_map = os.environ
    else:
        env_map = env

    return AppConfig(
        url=env_map.get("AWS_IP_RANGES_URL") or DEFAULT_URL,
        timeout=_parse_timeout(env_map.get("AWS_IP_RANGES_TIMEOUT")),
        user_agent=env_map.get("AWS_IP_RANGES_USER_AGENT") or DEFAULT_USER_AGENT,
        log_level=(env_map.get("AWS_IP_RANGES_LOG_LEVEL") or "WARNING").upper(),
    )
