"""Ring-sampled air quality around a clicked map point."""
from . import aggregate
from . import classify
from . import sampler
from .area import assess_area
from .session import AreaSession

__all__ = ["aggregate", "classify", "sampler", "assess_area", "AreaSession"]
