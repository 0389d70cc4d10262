"""Breakpoint tables mapping pollutant values to severity bands and colors."""
from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional, Tuple, Union


class Parameter(str, Enum):
    """Quantity shown on the map."""

    AQI = "aqi"
    PM2_5 = "pm2_5"
    PM10 = "pm10"
    O3 = "o3"

    @property
    def is_concentration(self) -> bool:
        return self is not Parameter.AQI


NO_DATA_COLOR = "#666666"
CONCENTRATION_UNIT = "μg/m³"


@dataclass(frozen=True)
class Breakpoint:
    """Upper bound (exclusive) of a band, with its label and display color."""

    upper: float
    label: str
    color: str


@dataclass(frozen=True)
class Band:
    """A resolved severity band; ``level`` runs from 1 (best) to 5 (worst)."""

    level: int
    lower: float
    upper: float
    label: str
    color: str


_BAND_NAMES = ("Good", "Moderate", "Unhealthy", "Very Unhealthy", "Hazardous")


def _table(uppers: Tuple[float, ...], colors: Tuple[str, ...], labels: Tuple[str, ...] = _BAND_NAMES) -> List[Breakpoint]:
    return [Breakpoint(upper, label, color) for upper, label, color in zip(uppers + (math.inf,), labels, colors)]


# AQI bounds sit halfway between categories so a float mean rounds half-up
BREAKPOINTS: Dict[Parameter, List[Breakpoint]] = {
    Parameter.PM2_5: _table(
        (12.0, 35.0, 55.0, 75.0),
        ("#FEF9C3", "#FDE047", "#EAB308", "#F59E0B", "#DC2626"),
    ),
    Parameter.PM10: _table(
        (20.0, 50.0, 100.0, 150.0),
        ("#FEF3C7", "#D97706", "#92400E", "#78350F", "#451A03"),
    ),
    Parameter.O3: _table(
        (50.0, 100.0, 150.0, 200.0),
        ("#E0F2FE", "#7DD3FC", "#3B82F6", "#1E40AF", "#1E3A8A"),
    ),
    Parameter.AQI: _table(
        (1.5, 2.5, 3.5, 4.5),
        ("#00E400", "#FFFF00", "#FF7E00", "#FF0000", "#8F3F97"),
        ("Good", "Fair", "Moderate", "Poor", "Very Poor"),
    ),
}

TABLE_FLOOR: Dict[Parameter, float] = {
    Parameter.PM2_5: 0.0,
    Parameter.PM10: 0.0,
    Parameter.O3: 0.0,
    Parameter.AQI: 0.5,
}


def as_parameter(parameter: Union[Parameter, str]) -> Parameter:
    if isinstance(parameter, Parameter):
        return parameter
    try:
        return Parameter(str(parameter).lower())
    except ValueError as exc:
        choices = ", ".join(p.value for p in Parameter)
        raise ValueError(f"Unknown parameter {parameter!r}; expected one of {choices}") from exc


def bands(parameter: Union[Parameter, str]) -> List[Band]:
    """All bands of a parameter's table, lowest first."""
    param = as_parameter(parameter)
    lower = TABLE_FLOOR[param]
    resolved: List[Band] = []
    for level, bp in enumerate(BREAKPOINTS[param], start=1):
        resolved.append(Band(level=level, lower=lower, upper=bp.upper, label=bp.label, color=bp.color))
        lower = bp.upper
    return resolved


def classify(value: Optional[float], parameter: Union[Parameter, str]) -> Optional[Band]:
    """Return the band containing ``value``, or ``None`` when it cannot be classified.

    Lower bounds are inclusive, upper bounds exclusive; the top band is open.
    Missing values, NaN and values below the table floor yield ``None``.
    """
    if value is None:
        return None
    value = float(value)
    if math.isnan(value):
        return None
    table = bands(parameter)
    for band in table:
        if value < band.lower:
            return None
        if value < band.upper or band is table[-1]:
            return band
    return None


def color_for(value: Optional[float], parameter: Union[Parameter, str]) -> str:
    band = classify(value, parameter)
    return band.color if band else NO_DATA_COLOR


def label_for(value: Optional[float], parameter: Union[Parameter, str]) -> Optional[str]:
    band = classify(value, parameter)
    return band.label if band else None


__all__ = [
    "Parameter",
    "Breakpoint",
    "Band",
    "BREAKPOINTS",
    "TABLE_FLOOR",
    "NO_DATA_COLOR",
    "CONCENTRATION_UNIT",
    "as_parameter",
    "bands",
    "classify",
    "color_for",
    "label_for",
]
