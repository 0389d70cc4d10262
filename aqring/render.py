"""Hand-off structures for the map layer: GeoJSON, tables, legend and popups."""
from __future__ import annotations

import math
from datetime import datetime, timezone
from typing import Dict, List, Optional, Tuple, Union

import pandas as pd

from .aggregate import AggregateResult
from .classify import CONCENTRATION_UNIT, NO_DATA_COLOR, Parameter, as_parameter, bands
from .utils_geo import compass_direction

FRAME_COLUMNS = [
    "sample_id",
    "ring_index",
    "ring_distance_km",
    "bearing_degrees",
    "direction",
    "latitude",
    "longitude",
    "value",
    "label",
    "color",
]


def _number(value: float) -> str:
    return f"{value:g}"


def legend(parameter: Union[Parameter, str]) -> List[Tuple[str, str]]:
    """Legend rows as ``(text, color)``, e.g. ``("0-12 μg/m³ (Good)", "#FEF9C3")``."""
    param = as_parameter(parameter)
    rows: List[Tuple[str, str]] = []
    for band in bands(param):
        if param is Parameter.AQI:
            text = f"{band.level} ({band.label})"
        elif math.isinf(band.upper):
            text = f"{_number(band.lower)}+ {CONCENTRATION_UNIT} ({band.label})"
        else:
            text = f"{_number(band.lower)}-{_number(band.upper)} {CONCENTRATION_UNIT} ({band.label})"
        rows.append((text, band.color))
    return rows


def overlay_style(result: AggregateResult) -> Dict[str, object]:
    """Style of the circle drawn over the sampled area."""
    band = result.band
    color = band.color if band else NO_DATA_COLOR
    opacity = 0.6 if band and result.selected_parameter.is_concentration else 0.5
    return {"color": color, "fill_color": color, "fill_opacity": opacity, "weight": 2}


def describe(result: AggregateResult) -> str:
    if not result.has_data:
        return "No data"
    param = result.selected_parameter
    band = result.band
    if param is Parameter.AQI:
        headline = f"Average AQI: {result.mean_value:.1f}"
        if band:
            headline += f" ({band.label})"
    else:
        headline = f"Average {param.value.upper()}: {result.mean_value:.2f} {CONCENTRATION_UNIT}"
    return f"{headline}\nBased on {result.sample_count} sample points"


def parameter_from_toggles(pm2_5: bool, pm10: bool, o3: bool) -> Optional[Parameter]:
    """Parameter shown for the enabled pollutant checkboxes; ``None`` hides the layer."""
    if pm2_5:
        return Parameter.PM2_5
    if pm10:
        return Parameter.PM10
    if o3:
        return Parameter.O3
    return None


def to_frame(result: AggregateResult) -> pd.DataFrame:
    """One row per successfully sampled point."""
    rows = []
    for point, value, band in result.point_bands():
        rows.append(
            {
                "sample_id": point.sample_id,
                "ring_index": point.ring_index,
                "ring_distance_km": point.ring_distance_km,
                "bearing_degrees": point.bearing_degrees,
                "direction": compass_direction(point.bearing_degrees),
                "latitude": point.latitude,
                "longitude": point.longitude,
                "value": value,
                "label": band.label if band else None,
                "color": band.color if band else NO_DATA_COLOR,
            }
        )
    return pd.DataFrame(rows, columns=FRAME_COLUMNS)


def to_geojson(result: AggregateResult) -> Dict[str, object]:
    """Point FeatureCollection of the sampled values plus area metadata."""
    features = []
    for point, value, band in result.point_bands():
        features.append(
            {
                "type": "Feature",
                "geometry": {"type": "Point", "coordinates": [point.longitude, point.latitude]},
                "properties": {
                    "sample_id": point.sample_id,
                    "ring_index": point.ring_index,
                    "ring_distance_km": point.ring_distance_km,
                    "bearing_degrees": point.bearing_degrees,
                    "direction": compass_direction(point.bearing_degrees),
                    "parameter": result.selected_parameter.value,
                    "value": value,
                    "label": band.label if band else None,
                    "color": band.color if band else NO_DATA_COLOR,
                },
            }
        )

    band = result.band
    center = result.center_point
    metadata = {
        "generated_at": datetime.now(timezone.utc).isoformat(),
        "center": [center.longitude, center.latitude] if center else None,
        "parameter": result.selected_parameter.value,
        "mean_value": result.mean_value,
        "label": band.label if band else None,
        "color": band.color if band else NO_DATA_COLOR,
        "sample_count": result.sample_count,
        "requested_count": result.requested_count,
    }

    return {"type": "FeatureCollection", "features": features, "metadata": metadata}


__all__ = [
    "FRAME_COLUMNS",
    "legend",
    "overlay_style",
    "describe",
    "parameter_from_toggles",
    "to_frame",
    "to_geojson",
]
