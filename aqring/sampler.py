"""Polar-grid sampling around a clicked map point."""
from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import List, Optional

from .utils_geo import GeoPoint, destination_point

logger = logging.getLogger(__name__)

DEFAULT_RINGS = 5
DEFAULT_ANGLES = 16
CENTER_SAMPLE_ID = "center"


@dataclass(frozen=True)
class SamplePoint:
    """A coordinate to query, tagged with its position on the polar grid."""

    point: GeoPoint
    ring_distance_km: float
    bearing_degrees: Optional[float]
    sample_id: str
    ring_index: int = 0

    @property
    def latitude(self) -> float:
        return self.point.latitude

    @property
    def longitude(self) -> float:
        return self.point.longitude

    @property
    def is_center(self) -> bool:
        return self.bearing_degrees is None


def _validate_count(name: str, value: int) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value < 1:
        raise ValueError(f"{name} must be a positive integer, got {value!r}")
    return value


def ring_distances(radius_km: float, rings: int = DEFAULT_RINGS) -> List[float]:
    """Evenly spaced ring radii, innermost first, the last equal to ``radius_km``."""
    return [radius_km * k / rings for k in range(1, rings + 1)]


def generate_sample_points(
    center: GeoPoint,
    radius_km: float,
    rings: int = DEFAULT_RINGS,
    angles: int = DEFAULT_ANGLES,
) -> List[SamplePoint]:
    """Generate the center plus ``rings`` x ``angles`` points around it.

    Parameters
    ----------
    center: GeoPoint
        Clicked location.
    radius_km: float
        Distance of the outermost ring, must be positive.
    rings: int, optional
        Number of concentric rings, evenly spaced up to ``radius_km``.
    angles: int, optional
        Number of equally spaced bearings per ring, starting at 0 (North).

    Returns
    -------
    list of SamplePoint
        Center first, then rings innermost to outermost, each ring ordered by
        increasing bearing. Always ``1 + rings * angles`` entries.
    """
    try:
        radius = float(radius_km)
    except (TypeError, ValueError) as exc:
        raise ValueError(f"radius_km must be a number, got {radius_km!r}") from exc
    if not math.isfinite(radius) or radius <= 0:
        raise ValueError(f"radius_km must be a finite value > 0, got {radius_km!r}")
    _validate_count("rings", rings)
    _validate_count("angles", angles)

    step = 360.0 / angles
    samples: List[SamplePoint] = [
        SamplePoint(
            point=center,
            ring_distance_km=0.0,
            bearing_degrees=None,
            sample_id=CENTER_SAMPLE_ID,
            ring_index=0,
        )
    ]
    for ring_index, distance in enumerate(ring_distances(radius, rings), start=1):
        for i in range(angles):
            bearing = i * step
            samples.append(
                SamplePoint(
                    point=destination_point(center, bearing, distance),
                    ring_distance_km=distance,
                    bearing_degrees=bearing,
                    sample_id=f"ring{ring_index}-{i:02d}",
                    ring_index=ring_index,
                )
            )

    logger.debug(
        "Generated %d sample points around (%.4f, %.4f) within %.2f km",
        len(samples),
        center.latitude,
        center.longitude,
        radius,
    )
    return samples


__all__ = [
    "DEFAULT_RINGS",
    "DEFAULT_ANGLES",
    "CENTER_SAMPLE_ID",
    "SamplePoint",
    "ring_distances",
    "generate_sample_points",
]
