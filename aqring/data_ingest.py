"""Fetching point air-quality readings from the OpenWeather Air Pollution API."""
from __future__ import annotations

import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor, wait
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Dict, List, Mapping, Optional, Sequence

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from .sampler import SamplePoint

if TYPE_CHECKING:
    from .config import Settings

logger = logging.getLogger(__name__)

OPENWEATHER_AIR_POLLUTION_URL = "https://api.openweathermap.org/data/2.5/air_pollution"
AQI_CATEGORY_RANGE = range(1, 6)


class AirQualityFetchError(RuntimeError):
    """Raised when a single point cannot be turned into a reading."""


@dataclass(frozen=True)
class Reading:
    """Air-quality observation for one sample point."""

    point: SamplePoint
    aqi_category: int
    component_concentrations: Mapping[str, float] = field(default_factory=dict)
    observed_at_epoch_seconds: int = 0


def parse_reading(payload: Any, point: SamplePoint) -> Reading:
    """Build a :class:`Reading` from an Air Pollution API response body."""
    if not isinstance(payload, dict):
        raise AirQualityFetchError("Air pollution response is not a JSON object")

    entries = payload.get("list") or []
    if not entries or not isinstance(entries[0], dict):
        raise AirQualityFetchError(f"Air pollution response has no entries for {point.sample_id}")
    entry = entries[0]

    aqi = (entry.get("main") or {}).get("aqi")
    try:
        aqi_category = int(aqi)
    except (TypeError, ValueError) as exc:
        raise AirQualityFetchError(f"Missing AQI category in response for {point.sample_id}") from exc
    if aqi_category not in AQI_CATEGORY_RANGE:
        raise AirQualityFetchError(f"AQI category {aqi_category} out of range for {point.sample_id}")

    components: Dict[str, float] = {}
    for code, value in (entry.get("components") or {}).items():
        try:
            components[code] = float(value)
        except (TypeError, ValueError):
            logger.debug("Ignoring non-numeric component %s=%r", code, value)

    return Reading(
        point=point,
        aqi_category=aqi_category,
        component_concentrations=components,
        observed_at_epoch_seconds=int(entry.get("dt") or 0),
    )


def _build_session(pool_size: int = 10) -> requests.Session:
    session = requests.Session()
    # one attempt per point, failures are final
    retries = Retry(total=0, connect=0, read=0, status=0, raise_on_status=False)
    adapter = HTTPAdapter(
        max_retries=retries,
        pool_connections=1,
        pool_maxsize=max(pool_size, 1),
    )
    session.mount("https://", adapter)
    session.mount("http://", adapter)
    return session


class AirQualityClient:
    """Queries one reading per coordinate.

    The API key is injected here and nowhere else; an empty key turns every
    request into a fetch failure rather than an error at construction time.
    """

    def __init__(
        self,
        api_key: Optional[str],
        base_url: str = OPENWEATHER_AIR_POLLUTION_URL,
        timeout: Optional[float] = None,
        session: Optional[requests.Session] = None,
    ):
        self.api_key = api_key or None
        self.base_url = base_url
        self.timeout = timeout
        self._session = session
        self._owns_session = session is None
        self._pool_size = 0
        self._retired: List[requests.Session] = []
        self._session_lock = threading.Lock()
        if self.api_key is None:
            logger.warning("OPENWEATHER_API_KEY not set; every air quality request will fail")

    @classmethod
    def from_settings(cls, settings: "Settings") -> "AirQualityClient":
        return cls(settings.api_key, base_url=settings.base_url, timeout=settings.request_timeout)

    def _get_session(self, pool_size: int) -> requests.Session:
        with self._session_lock:
            if self._owns_session and (self._session is None or pool_size > self._pool_size):
                # a smaller session may still serve an in-flight fan-out; closed in close()
                if self._session is not None:
                    self._retired.append(self._session)
                self._session = _build_session(pool_size)
                self._pool_size = pool_size
            return self._session

    def fetch_reading(self, point: SamplePoint, session: Optional[requests.Session] = None) -> Reading:
        if self.api_key is None:
            raise AirQualityFetchError("OPENWEATHER_API_KEY not set")

        session = session or self._get_session(1)
        params = {"lat": point.latitude, "lon": point.longitude, "appid": self.api_key}
        logger.debug("Fetching air quality for %s at (%.4f, %.4f)", point.sample_id, point.latitude, point.longitude)
        try:
            response = session.get(self.base_url, params=params, timeout=self.timeout)
        except requests.RequestException as exc:
            raise AirQualityFetchError(f"Request for {point.sample_id} failed: {exc}") from exc

        if not 200 <= response.status_code < 300:
            raise AirQualityFetchError(
                f"Air pollution request failed with status {response.status_code}: {response.text[:200]}"
            )

        try:
            data = response.json()
        except ValueError as exc:
            raise AirQualityFetchError("Unable to decode air pollution response as JSON") from exc

        return parse_reading(data, point)

    def fetch_readings(self, points: Sequence[SamplePoint]) -> List[Reading]:
        """Fetch every point concurrently and keep whatever succeeded.

        All requests are submitted at once and awaited together; a failing
        point is logged and left out. Results follow the order of ``points``.
        """
        if not points:
            return []

        session = self._get_session(len(points))
        with ThreadPoolExecutor(max_workers=len(points)) as executor:
            futures: List[Future[Reading]] = [
                executor.submit(self.fetch_reading, point, session) for point in points
            ]
            wait(futures)

        readings: List[Reading] = []
        for point, future in zip(points, futures):
            try:
                readings.append(future.result())
            except AirQualityFetchError as exc:
                logger.warning("Failed to fetch data for %s (%.4f, %.4f): %s", point.sample_id, point.latitude, point.longitude, exc)
            except Exception as exc:  # pylint: disable=broad-except
                logger.warning("Unexpected error fetching %s: %r", point.sample_id, exc)

        if len(readings) < len(points):
            logger.info("Fetched %d of %d sample points", len(readings), len(points))
        return readings

    def close(self) -> None:
        with self._session_lock:
            if not self._owns_session:
                return
            for session in self._retired:
                session.close()
            self._retired = []
            if self._session is not None:
                self._session.close()
                self._session = None
            self._pool_size = 0

    def __enter__(self) -> "AirQualityClient":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()


__all__ = [
    "OPENWEATHER_AIR_POLLUTION_URL",
    "AirQualityFetchError",
    "Reading",
    "parse_reading",
    "AirQualityClient",
]
