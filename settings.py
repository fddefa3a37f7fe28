"""Runtime configuration read from environment variables."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping

DEFAULT_DATA_PATH = "data/tracker.json"


@dataclass(frozen=True)
class Settings:
    data_path: str = DEFAULT_DATA_PATH
    anomaly_threshold: float = 2.0
    forecast_window: int = 7
    forecast_horizon: int = 7
    runway_lookback_days: int = 30
    log_level: str = "INFO"


def _read_float(env: Mapping[str, str], name: str, default: float) -> float:
    raw = str(env.get(name, "") or "").strip()
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        raise ValueError(f"{name} must be a number, got {raw!r}") from None


def _read_int(env: Mapping[str, str], name: str, default: int, minimum: int) -> int:
    raw = str(env.get(name, "") or "").strip()
    if not raw:
        return default
    try:
        value = int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from None
    if value < minimum:
        raise ValueError(f"{name} must be >= {minimum}, got {value}")
    return value


def load_settings(environ: Mapping[str, str] | None = None) -> Settings:
    """Build settings from the environment, falling back to defaults."""
    env = os.environ if environ is None else environ
    return Settings(
        data_path=str(env.get("MONEY_TRACKER_DATA_PATH", "") or "").strip() or DEFAULT_DATA_PATH,
        anomaly_threshold=_read_float(env, "MONEY_TRACKER_ANOMALY_THRESHOLD", 2.0),
        forecast_window=_read_int(env, "MONEY_TRACKER_FORECAST_WINDOW", 7, minimum=1),
        forecast_horizon=_read_int(env, "MONEY_TRACKER_FORECAST_HORIZON", 7, minimum=0),
        runway_lookback_days=_read_int(env, "MONEY_TRACKER_RUNWAY_LOOKBACK_DAYS", 30, minimum=1),
        log_level=str(env.get("MONEY_TRACKER_LOG_LEVEL", "") or "").strip().upper() or "INFO",
    )
