"""One click: sample the area, fetch every point, aggregate."""
from __future__ import annotations

import logging
import time
from typing import List, Tuple, Union

from .aggregate import AggregateResult, aggregate
from .classify import Parameter, as_parameter
from .data_ingest import AirQualityClient, Reading
from .sampler import DEFAULT_ANGLES, DEFAULT_RINGS, generate_sample_points
from .utils_geo import GeoPoint

logger = logging.getLogger(__name__)


def fetch_area_readings(
    client: AirQualityClient,
    center: GeoPoint,
    radius_km: float = 10.0,
    rings: int = DEFAULT_RINGS,
    angles: int = DEFAULT_ANGLES,
) -> Tuple[List[Reading], int]:
    """Return the successful readings and how many points were requested."""
    points = generate_sample_points(center, radius_km, rings=rings, angles=angles)
    logger.info(
        "Fetching air quality for %d points within %.1f km of (%.4f, %.4f)",
        len(points),
        radius_km,
        center.latitude,
        center.longitude,
    )
    started = time.perf_counter()
    readings = client.fetch_readings(points)
    logger.info(
        "Received %d/%d readings in %.2f seconds",
        len(readings),
        len(points),
        time.perf_counter() - started,
    )
    return readings, len(points)


def assess_area(
    client: AirQualityClient,
    center: GeoPoint,
    radius_km: float = 10.0,
    parameter: Union[Parameter, str] = Parameter.AQI,
    rings: int = DEFAULT_RINGS,
    angles: int = DEFAULT_ANGLES,
) -> AggregateResult:
    param = as_parameter(parameter)
    readings, requested = fetch_area_readings(client, center, radius_km, rings=rings, angles=angles)
    result = aggregate(readings, param, center=center, requested_count=requested)
    if result.has_data:
        band = result.band
        logger.info(
            "Average %s over %d points: %.2f (%s)",
            param.value,
            result.sample_count,
            result.mean_value,
            band.label if band else "unclassified",
        )
    else:
        logger.warning("No air quality data around (%.4f, %.4f)", center.latitude, center.longitude)
    return result


__all__ = ["fetch_area_readings", "assess_area"]
