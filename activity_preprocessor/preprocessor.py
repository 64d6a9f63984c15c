"""Preprocessing stages that fill in missing or refined record fields.

The :class:`Preprocessor` exposes independent stages that operate on the same
list of :class:`~activity_preprocessor.records.Record` objects:

* ``aggregate_by_timestamp``: merge records that share a timestamp.
* ``calculate_distance_and_speed``: impute cumulative distance from GPS
  positions and speed from distance deltas.
* ``smooth_elevation``: trailing, distance-windowed moving average of altitude.
* ``calculate_grade``: forward-looking slope in percent.
* ``calculate_pace``: seconds per kilometer for moving samples.

Every stage mutates records in place and skips samples whose inputs are
missing instead of raising, because partial sensor data is the normal case.
Stages after aggregation depend on distance, so callers wanting the usual
result should run them in the order above (see :func:`preprocess_records`).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, List, Optional, Sequence, TypeVar

from .geomath import vincenty_distance
from .records import Record
from .sport import is_considered_moving

logger = logging.getLogger(__name__)

DEFAULT_SMOOTHING_ELEVATION_DISTANCE_M = 30.0
DEFAULT_GRADE_DISTANCE_M = 100.0

# Fields folded with the pairwise average when records share a timestamp.
AVERAGED_FLOAT_FIELDS = ("altitude", "speed", "distance")
AVERAGED_INT_FIELDS = ("cadence", "heart_rate", "power", "temperature")

MovingPredicate = Callable[[str, Optional[float]], bool]
Number = TypeVar("Number", int, float)


def _is_positive(value: Optional[float]) -> bool:
    return value is not None and value > 0


@dataclass(frozen=True)
class PreprocessorOptions:
    """Distance windows (meters) used by the smoothing and grade stages.

    Values that are not strictly positive (including NaN) fall back to the
    defaults.
    """

    smoothing_elevation_distance: float = DEFAULT_SMOOTHING_ELEVATION_DISTANCE_M
    grade_distance: float = DEFAULT_GRADE_DISTANCE_M

    def __post_init__(self) -> None:
        if not _is_positive(self.smoothing_elevation_distance):
            object.__setattr__(
                self, "smoothing_elevation_distance", DEFAULT_SMOOTHING_ELEVATION_DISTANCE_M
            )
        if not _is_positive(self.grade_distance):
            object.__setattr__(self, "grade_distance", DEFAULT_GRADE_DISTANCE_M)


def _average(a: Optional[Number], b: Optional[Number], *, to_int: bool = False):
    """Return the mean of two optional values, or whichever one is present."""

    if a is None:
        return b
    if b is None:
        return a
    mean = (float(a) + float(b)) / 2
    if to_int:
        return int(mean)
    return mean


def _elapsed_seconds(current: datetime, previous: datetime) -> float:
    return (current - previous).total_seconds()


def _has_timestamp(record: Record) -> bool:
    return record.timestamp is not None and record.timestamp != datetime.min


class Preprocessor:
    """Configured set of preprocessing stages.

    The instance only holds read-only configuration, so it can be shared by
    threads that each process their own record list. Stages must not run
    concurrently on the same list.

    Parameters
    ----------
    options:
        Window configuration. When omitted, it is built from the keyword
        tunables below.
    smoothing_elevation_distance:
        Backward window (meters) for elevation smoothing. Defaults to 30 m.
    grade_distance:
        Forward window (meters) for grade calculation. Defaults to 100 m.
    is_moving:
        Predicate ``(sport, speed) -> bool`` deciding whether pace is computed
        for a sample. Defaults to :func:`~activity_preprocessor.sport.is_considered_moving`.
    """

    def __init__(
        self,
        options: PreprocessorOptions | None = None,
        *,
        smoothing_elevation_distance: float | None = None,
        grade_distance: float | None = None,
        is_moving: MovingPredicate = is_considered_moving,
    ) -> None:
        if options is None:
            options = PreprocessorOptions(
                smoothing_elevation_distance=smoothing_elevation_distance
                or DEFAULT_SMOOTHING_ELEVATION_DISTANCE_M,
                grade_distance=grade_distance or DEFAULT_GRADE_DISTANCE_M,
            )
        self.options = options
        self.is_moving = is_moving

    def aggregate_by_timestamp(self, records: Sequence[Record]) -> List[Record]:
        """Collapse runs of records sharing a timestamp into their first record.

        Some platforms split one sample across several FIT records with the
        same timestamp. Numeric fields are folded pairwise with
        :func:`_average` (so 10, 20, 30 becomes ``avg(avg(10, 20), 30) = 22.5``);
        integer fields are truncated. Positions are never averaged: the lead
        record keeps its own coordinate or takes the first one present in the
        run. The lead record is mutated and a new, possibly shorter, list is
        returned.
        """

        aggregated: List[Record] = []
        index = 0
        while index < len(records):
            lead = records[index]
            end = index + 1
            while end < len(records) and records[end].timestamp == lead.timestamp:
                candidate = records[end]
                if lead.position_lat is None:
                    lead.position_lat = candidate.position_lat
                if lead.position_long is None:
                    lead.position_long = candidate.position_long
                for name in AVERAGED_FLOAT_FIELDS:
                    setattr(lead, name, _average(getattr(lead, name), getattr(candidate, name)))
                for name in AVERAGED_INT_FIELDS:
                    setattr(
                        lead,
                        name,
                        _average(getattr(lead, name), getattr(candidate, name), to_int=True),
                    )
                end += 1

            aggregated.append(lead)
            index = end

        logger.debug("Aggregated %d records into %d", len(records), len(aggregated))
        return aggregated

    def calculate_distance_and_speed(self, records: Sequence[Record]) -> None:
        """Fill missing distance from GPS positions and missing speed.

        Distance is the previous cumulative distance (``0`` when absent) plus
        the Vincenty distance between the two positions. Speed is the positive
        distance delta divided by the elapsed time; samples with a
        non-positive elapsed time are skipped.
        """

        imputed_distance = imputed_speed = 0
        for i in range(1, len(records)):
            rec = records[i]
            prev = records[i - 1]

            point_distance = 0.0
            if rec.distance is None:
                if rec.has_position and prev.has_position:
                    point_distance = vincenty_distance(
                        rec.position_lat,
                        rec.position_long,
                        prev.position_lat,
                        prev.position_long,
                    )
                    previous_distance = prev.distance if prev.distance is not None else 0.0
                    rec.distance = previous_distance + point_distance
                    imputed_distance += 1
            elif prev.distance is not None:
                point_distance = rec.distance - prev.distance

            if rec.speed is None and point_distance > 0:
                elapsed = _elapsed_seconds(rec.timestamp, prev.timestamp)
                if elapsed > 0:
                    rec.speed = point_distance / elapsed
                    imputed_speed += 1

        logger.debug(
            "Imputed distance for %d and speed for %d of %d records",
            imputed_distance,
            imputed_speed,
            len(records),
        )

    def smooth_elevation(self, records: Sequence[Record]) -> None:
        """Smooth altitude with a trailing moving average over distance.

        Each altitude becomes the mean of its own reading and the altitudes of
        earlier records within ``smoothing_elevation_distance`` meters behind
        it. Records missing distance or altitude are skipped without closing
        the window. The list is processed left to right in place, so earlier
        records contribute their already smoothed altitude.
        """

        window = self.options.smoothing_elevation_distance
        for i, rec in enumerate(records):
            if rec.distance is None or rec.altitude is None:
                continue

            total = 0.0
            count = 0
            for j in range(i, -1, -1):
                prev = records[j]
                if prev.distance is None or prev.altitude is None:
                    continue
                if rec.distance - prev.distance > window:
                    break
                total += prev.altitude
                count += 1

            if count == 0:
                continue
            rec.altitude = total / count

    def calculate_grade(self, records: Sequence[Record]) -> None:
        """Compute grade (percent) from the farthest record within the window.

        The forward scan overwrites rise and run with every candidate whose
        distance ahead is within ``grade_distance``; the first candidate
        beyond the window stops the scan and is discarded. Grade is left unset
        when rise or run is exactly zero.
        """

        window = self.options.grade_distance
        graded = 0
        for i, rec in enumerate(records):
            if rec.distance is None or rec.altitude is None:
                continue

            rise = run = 0.0
            for j in range(i + 1, len(records)):
                nxt = records[j]
                if nxt.distance is None or nxt.altitude is None:
                    continue
                ahead = nxt.distance - rec.distance
                if ahead > window:
                    break
                rise = nxt.altitude - rec.altitude
                run = ahead

            if rise == 0 or run == 0:
                continue
            rec.grade = rise / run * 100
            graded += 1

        logger.debug("Calculated grade for %d of %d records", graded, len(records))

    def calculate_pace(self, sport: str, records: Sequence[Record]) -> None:
        """Compute pace in seconds per kilometer for moving samples.

        When speed is present the pace is ``3600 / (speed * 3.6)``; otherwise
        it is the elapsed time divided by the distance delta in kilometers,
        skipped when that delta is zero.
        """

        for i in range(1, len(records)):
            rec = records[i]
            prev = records[i - 1]

            if rec.distance is None or prev.distance is None:
                continue
            if not _has_timestamp(rec) or not _has_timestamp(prev):
                continue
            if not self.is_moving(sport, rec.speed):
                continue

            if rec.speed is None:
                delta_km = (rec.distance - prev.distance) / 1000
                if delta_km == 0:
                    continue
                rec.pace = _elapsed_seconds(rec.timestamp, prev.timestamp) / delta_km
            else:
                speed_kph = rec.speed * 3.6
                if speed_kph == 0:
                    continue
                rec.pace = 3600 / speed_kph


def preprocess_records(
    records: Sequence[Record],
    sport: str,
    preprocessor: Preprocessor | None = None,
) -> List[Record]:
    """Run every stage in the canonical order and return the aggregated list."""

    preprocessor = preprocessor or Preprocessor()
    aggregated = preprocessor.aggregate_by_timestamp(records)
    preprocessor.calculate_distance_and_speed(aggregated)
    preprocessor.smooth_elevation(aggregated)
    preprocessor.calculate_grade(aggregated)
    preprocessor.calculate_pace(sport, aggregated)
    logger.info("Preprocessed %d records (%s)", len(aggregated), sport)
    return aggregated
