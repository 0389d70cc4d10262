"""Spherical geometry helpers for ring sampling."""
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Optional, Tuple

EARTH_RADIUS_KM = 6371.0

COMPASS_DIRECTIONS: Tuple[str, ...] = (
    "North",
    "NNE",
    "NE",
    "ENE",
    "East",
    "ESE",
    "SE",
    "SSE",
    "South",
    "SSW",
    "SW",
    "WSW",
    "West",
    "WNW",
    "NW",
    "NNW",
)


@dataclass(frozen=True)
class GeoPoint:
    """A latitude/longitude pair in decimal degrees."""

    latitude: float
    longitude: float

    def __post_init__(self) -> None:
        try:
            lat = float(self.latitude)
            lon = float(self.longitude)
        except (TypeError, ValueError) as exc:
            raise ValueError(f"coordinates must be numbers, got ({self.latitude!r}, {self.longitude!r})") from exc
        if not (math.isfinite(lat) and math.isfinite(lon)):
            raise ValueError(f"coordinates must be finite, got ({self.latitude}, {self.longitude})")
        if not -90.0 <= lat <= 90.0:
            raise ValueError(f"latitude must be within [-90, 90], got {lat}")
        if not -180.0 <= lon <= 180.0:
            raise ValueError(f"longitude must be within [-180, 180], got {lon}")
        object.__setattr__(self, "latitude", lat)
        object.__setattr__(self, "longitude", lon)


def normalize_longitude(lon: float) -> float:
    """Wrap a longitude in degrees into [-180, 180)."""
    return (lon + 540.0) % 360.0 - 180.0


def normalize_bearing(bearing: float) -> float:
    return bearing % 360.0


def destination_point(
    origin: GeoPoint,
    bearing_degrees: float,
    distance_km: float,
    radius_km: float = EARTH_RADIUS_KM,
) -> GeoPoint:
    """Great-circle destination reached from ``origin`` along a bearing."""
    angular = distance_km / radius_km
    theta = math.radians(bearing_degrees)
    phi1 = math.radians(origin.latitude)
    lambda1 = math.radians(origin.longitude)

    sin_phi2 = math.sin(phi1) * math.cos(angular) + math.cos(phi1) * math.sin(angular) * math.cos(theta)
    phi2 = math.asin(max(-1.0, min(1.0, sin_phi2)))
    lambda2 = lambda1 + math.atan2(
        math.sin(theta) * math.sin(angular) * math.cos(phi1),
        math.cos(angular) - math.sin(phi1) * math.sin(phi2),
    )
    return GeoPoint(math.degrees(phi2), normalize_longitude(math.degrees(lambda2)))


def haversine_km(a: GeoPoint, b: GeoPoint, radius_km: float = EARTH_RADIUS_KM) -> float:
    """Great-circle distance in kilometres."""
    phi1 = math.radians(a.latitude)
    phi2 = math.radians(b.latitude)
    d_phi = math.radians(b.latitude - a.latitude)
    d_lambda = math.radians(b.longitude - a.longitude)

    h = math.sin(d_phi / 2.0) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2.0) ** 2
    c = 2.0 * math.atan2(math.sqrt(h), math.sqrt(1.0 - h))
    return radius_km * c


def initial_bearing(a: GeoPoint, b: GeoPoint) -> float:
    """Initial bearing in degrees [0, 360) of the great circle from ``a`` to ``b``."""
    phi1 = math.radians(a.latitude)
    phi2 = math.radians(b.latitude)
    d_lambda = math.radians(b.longitude - a.longitude)
    y = math.sin(d_lambda) * math.cos(phi2)
    x = math.cos(phi1) * math.sin(phi2) - math.sin(phi1) * math.cos(phi2) * math.cos(d_lambda)
    return normalize_bearing(math.degrees(math.atan2(y, x)))


def compass_direction(bearing_degrees: Optional[float]) -> Optional[str]:
    """Map a bearing to one of 16 compass names; ``None`` for the center point."""
    if bearing_degrees is None:
        return None
    # half-up, not banker's rounding
    index = math.floor(bearing_degrees / 22.5 + 0.5) % len(COMPASS_DIRECTIONS)
    return COMPASS_DIRECTIONS[index]


__all__ = [
    "EARTH_RADIUS_KM",
    "COMPASS_DIRECTIONS",
    "GeoPoint",
    "normalize_longitude",
    "normalize_bearing",
    "destination_point",
    "haversine_km",
    "initial_bearing",
    "compass_direction",
]
