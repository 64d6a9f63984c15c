"""Preprocessing for GPS/sensor activity recordings.

The package merges duplicate samples, imputes distance and speed from GPS
positions, smooths elevation and derives grade and pace for activities
decoded from FIT files.
"""

from .errors import DecodeError, MalformedStructureError, NumericRangeError
from .fit_parser import parse_activity_fit
from .geomath import vincenty_distance
from .preprocessor import Preprocessor, PreprocessorOptions, preprocess_records
from .records import ActivityData, DeviceInfo, Record
from .series import ActivitySummary, RecordSeries, extract_series, summarize
from .sport import is_considered_moving
from .tcx_author import (
    Application,
    Build,
    BuildType,
    Device,
    Version,
    parse_application,
    parse_author,
    parse_device,
)

__all__ = [
    "ActivityData",
    "ActivitySummary",
    "Application",
    "Build",
    "BuildType",
    "DecodeError",
    "Device",
    "DeviceInfo",
    "MalformedStructureError",
    "NumericRangeError",
    "Preprocessor",
    "PreprocessorOptions",
    "Record",
    "RecordSeries",
    "Version",
    "extract_series",
    "is_considered_moving",
    "parse_activity_fit",
    "parse_application",
    "parse_author",
    "parse_device",
    "preprocess_records",
    "summarize",
    "vincenty_distance",
]
