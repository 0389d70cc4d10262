"""Runtime settings read from the process environment."""
from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Mapping, Optional

from dotenv import load_dotenv

from .classify import Parameter, as_parameter
from .data_ingest import OPENWEATHER_AIR_POLLUTION_URL
from .sampler import DEFAULT_ANGLES, DEFAULT_RINGS

log = logging.getLogger(__name__)

DEFAULT_RADIUS_KM = 10.0
DEFAULT_LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


@dataclass(frozen=True)
class Settings:
    api_key: Optional[str] = None
    base_url: str = OPENWEATHER_AIR_POLLUTION_URL
    radius_km: float = DEFAULT_RADIUS_KM
    rings: int = DEFAULT_RINGS
    angles: int = DEFAULT_ANGLES
    parameter: Parameter = Parameter.AQI
    request_timeout: Optional[float] = None
    log_level: str = "INFO"


def _float(env: Mapping[str, str], name: str, default: Optional[float]) -> Optional[float]:
    raw = env.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError as exc:
        raise ValueError(f"{name} must be a number, got {raw!r}") from exc


def _int(env: Mapping[str, str], name: str, default: int) -> int:
    raw = env.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError as exc:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from exc


def load_settings(env: Optional[Mapping[str, str]] = None) -> Settings:
    """Build :class:`Settings` from ``env`` (defaults to ``os.environ`` plus ``.env``)."""
    if env is None:
        load_dotenv()
        env = os.environ

    api_key = env.get("OPENWEATHER_API_KEY") or None
    if api_key is None:
        log.warning("Environment variable OPENWEATHER_API_KEY not set")

    radius_km = _float(env, "AQRING_RADIUS_KM", DEFAULT_RADIUS_KM)
    if radius_km is None or radius_km <= 0:
        raise ValueError(f"AQRING_RADIUS_KM must be > 0, got {radius_km}")
    rings = _int(env, "AQRING_RINGS", DEFAULT_RINGS)
    angles = _int(env, "AQRING_ANGLES", DEFAULT_ANGLES)
    if rings < 1 or angles < 1:
        raise ValueError("AQRING_RINGS and AQRING_ANGLES must be positive")

    timeout = _float(env, "AQRING_REQUEST_TIMEOUT", None)
    if timeout is not None and timeout <= 0:
        raise ValueError(f"AQRING_REQUEST_TIMEOUT must be > 0, got {timeout}")

    return Settings(
        api_key=api_key,
        base_url=env.get("OPENWEATHER_AIR_POLLUTION_URL") or OPENWEATHER_AIR_POLLUTION_URL,
        radius_km=radius_km,
        rings=rings,
        angles=angles,
        parameter=as_parameter(env.get("AQRING_PARAMETER") or Parameter.AQI),
        request_timeout=timeout,
        log_level=(env.get("AQRING_LOG_LEVEL") or "INFO").upper(),
    )


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(level=getattr(logging, level.upper(), logging.INFO), format=DEFAULT_LOG_FORMAT)


__all__ = ["DEFAULT_RADIUS_KM", "Settings", "load_settings", "configure_logging"]
