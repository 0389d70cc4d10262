"""Per-click state of the map layer.

Every click starts a new *generation*. Results that arrive for an older
generation are dropped, so a slow superseded click can never overwrite the
state of a newer one.
"""
from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import Optional, Tuple, Union

from .aggregate import AggregateResult, aggregate
from .area import fetch_area_readings
from .classify import Parameter, as_parameter
from .config import Settings, configure_logging, load_settings
from .data_ingest import AirQualityClient, Reading
from .utils_geo import GeoPoint

logger = logging.getLogger(__name__)

NO_DATA_REASON = "no data"


@dataclass(frozen=True)
class Idle:
    generation: int = 0


@dataclass(frozen=True)
class Loading:
    center: GeoPoint
    generation: int


@dataclass(frozen=True)
class Ready:
    center: GeoPoint
    result: AggregateResult
    readings: Tuple[Reading, ...]
    generation: int


@dataclass(frozen=True)
class Failed:
    center: GeoPoint
    reason: str
    generation: int


SessionState = Union[Idle, Loading, Ready, Failed]


class AreaSession:
    """State machine driven by clicks: Idle -> Loading -> Ready | Failed."""

    def __init__(self, client: Optional[AirQualityClient] = None, settings: Optional[Settings] = None):
        self.settings = settings or Settings()
        self.client = client if client is not None else AirQualityClient.from_settings(self.settings)
        self.parameter = self.settings.parameter
        self._lock = threading.Lock()
        self._generation = 0
        self._state: SessionState = Idle()

    @classmethod
    def from_env(cls) -> "AreaSession":
        """Session configured from the environment, with logging set to ``AQRING_LOG_LEVEL``."""
        settings = load_settings()
        configure_logging(settings.log_level)
        return cls(settings=settings)

    @property
    def state(self) -> SessionState:
        with self._lock:
            return self._state

    @property
    def generation(self) -> int:
        with self._lock:
            return self._generation

    def begin(self, center: GeoPoint) -> int:
        """Start a click and return its generation."""
        with self._lock:
            self._generation += 1
            if isinstance(self._state, Loading):
                logger.info("Click %d supersedes in-flight click %d", self._generation, self._state.generation)
            self._state = Loading(center=center, generation=self._generation)
            return self._generation

    def settle(self, generation: int, readings, requested_count: Optional[int] = None) -> bool:
        """Record the readings of ``generation``; returns False if it was superseded."""
        readings = tuple(readings)
        with self._lock:
            if not self._is_current(generation):
                logger.info("Discarding %d readings from stale click %d", len(readings), generation)
                return False
            center = self._state.center
            result = aggregate(readings, self.parameter, center=center, requested_count=requested_count)
            if result.has_data:
                self._state = Ready(center=center, result=result, readings=readings, generation=generation)
            else:
                self._state = Failed(center=center, reason=NO_DATA_REASON, generation=generation)
            return True

    def fail(self, generation: int, reason: str) -> bool:
        with self._lock:
            if not self._is_current(generation):
                logger.info("Ignoring failure of stale click %d: %s", generation, reason)
                return False
            self._state = Failed(center=self._state.center, reason=reason, generation=generation)
            return True

    def click(self, latitude: float, longitude: float) -> SessionState:
        center = GeoPoint(latitude, longitude)
        generation = self.begin(center)
        try:
            readings, requested = fetch_area_readings(
                self.client,
                center,
                self.settings.radius_km,
                rings=self.settings.rings,
                angles=self.settings.angles,
            )
        except Exception as exc:  # pylint: disable=broad-except
            logger.exception("Area air quality lookup failed: %s", exc)
            self.fail(generation, str(exc))
        else:
            self.settle(generation, readings, requested_count=requested)
        return self.state

    def select_parameter(self, parameter: Union[Parameter, str]) -> SessionState:
        """Switch the displayed parameter, re-aggregating the current readings."""
        param = as_parameter(parameter)
        with self._lock:
            self.parameter = param
            if isinstance(self._state, Ready):
                current = self._state
                result = aggregate(
                    current.readings,
                    param,
                    center=current.center,
                    requested_count=current.result.requested_count,
                )
                self._state = Ready(
                    center=current.center,
                    result=result,
                    readings=current.readings,
                    generation=current.generation,
                )
            return self._state

    def clear(self) -> None:
        with self._lock:
            self._generation += 1
            self._state = Idle(generation=self._generation)

    def _is_current(self, generation: int) -> bool:
        return isinstance(self._state, Loading) and generation == self._generation


__all__ = [
    "NO_DATA_REASON",
    "Idle",
    "Loading",
    "Ready",
    "Failed",
    "SessionState",
    "AreaSession",
]
