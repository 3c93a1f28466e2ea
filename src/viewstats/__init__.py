"""viewstats package public API."""

from .aggregates import correl, entropy, maximum, mean, median, minimum, stdev, total
from .data import Dataset, PositionWindow, PrefixWindow, dataset, wrap
from .joint import JointData
from .stats_engine import (
    DEFAULT_ENGINE,
    FnMetric,
    StatsContext,
    StatsEngine,
    build_default_engine,
)
from .utils import numerize, round_places
from .view import DataModifier, ProjectedView, SkippingCursor

__all__ = [
    "Dataset",
    "PositionWindow",
    "PrefixWindow",
    "ProjectedView",
    "SkippingCursor",
    "DataModifier",
    "JointData",
    "dataset",
    "wrap",
    "numerize",
    "round_places",
    "total",
    "maximum",
    "minimum",
    "mean",
    "stdev",
    "median",
    "correl",
    "entropy",
    "StatsEngine",
    "StatsContext",
    "FnMetric",
    "DEFAULT_ENGINE",
    "build_default_engine",
]

__version__ = "0.1.0"
