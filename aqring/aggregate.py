"""Aggregation of point readings into a single area summary."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple, Union

import numpy as np

from .classify import Band, Parameter, as_parameter, classify
from .data_ingest import Reading
from .sampler import SamplePoint
from .utils_geo import GeoPoint

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AggregateResult:
    """Mean value of one parameter over the readings of a single click."""

    center_point: Optional[GeoPoint]
    selected_parameter: Parameter
    mean_value: Optional[float]
    sample_count: int
    per_point_values: Tuple[Tuple[SamplePoint, float], ...] = field(default_factory=tuple)
    requested_count: int = 0

    @property
    def has_data(self) -> bool:
        return self.sample_count > 0

    @property
    def band(self) -> Optional[Band]:
        """Band of the mean, used for the area overlay and center marker."""
        return classify(self.mean_value, self.selected_parameter)

    def point_bands(self) -> List[Tuple[SamplePoint, float, Optional[Band]]]:
        """Each point classified against its own value."""
        return [
            (point, value, classify(value, self.selected_parameter))
            for point, value in self.per_point_values
        ]


def extract_value(reading: Reading, parameter: Union[Parameter, str]) -> float:
    param = as_parameter(parameter)
    if param is Parameter.AQI:
        return float(reading.aqi_category)
    return float(reading.component_concentrations.get(param.value, 0.0) or 0.0)


def _default_center(readings: Sequence[Reading]) -> Optional[GeoPoint]:
    for reading in readings:
        if reading.point.is_center:
            return reading.point.point
    return readings[0].point.point if readings else None


def aggregate(
    readings: Sequence[Reading],
    parameter: Union[Parameter, str],
    center: Optional[GeoPoint] = None,
    requested_count: Optional[int] = None,
) -> AggregateResult:
    """Average ``parameter`` across all successful readings.

    With no readings the mean is ``None``; callers must show "no data"
    instead of treating it as zero.
    """
    param = as_parameter(parameter)
    per_point = tuple((reading.point, extract_value(reading, param)) for reading in readings)
    requested = len(per_point) if requested_count is None else int(requested_count)
    if requested < len(per_point):
        raise ValueError(
            f"requested_count ({requested}) cannot be smaller than the number of readings ({len(per_point)})"
        )

    mean_value: Optional[float] = None
    if per_point:
        mean_value = float(np.mean([value for _, value in per_point]))
    else:
        logger.info("No readings to aggregate for %s", param.value)

    return AggregateResult(
        center_point=center if center is not None else _default_center(readings),
        selected_parameter=param,
        mean_value=mean_value,
        sample_count=len(per_point),
        per_point_values=per_point,
        requested_count=requested,
    )


__all__ = ["AggregateResult", "extract_value", "aggregate"]
