"""NumPy views of preprocessed record streams for reporting and plotting.

Preprocessed records still contain gaps (e.g. grade is unset on flat ground
and pace is unset while stopped), so every helper here skips records lacking
the requested attribute instead of interpolating over them.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Sequence

import numpy as np

from .records import Record


@dataclass(frozen=True)
class RecordSeries:
    """A record attribute as aligned time and value arrays."""

    # Seconds since the first record's timestamp.
    times: np.ndarray
    values: np.ndarray


@dataclass(frozen=True)
class ActivitySummary:
    record_count: int
    total_distance_m: Optional[float]
    elapsed_s: float
    total_ascent_m: float
    average_pace_s_per_km: Optional[float]
    max_grade_percent: Optional[float]


def extract_series(
    records: Sequence[Record], attribute: str, *, time_origin: float | None = None
) -> RecordSeries:
    """Return the present values of ``attribute`` with their elapsed times.

    Parameters
    ----------
    records:
        Ordered records, usually the output of
        :func:`activity_preprocessor.preprocessor.preprocess_records`.
    attribute:
        Name of a numeric :class:`Record` field such as ``"grade"``.
    time_origin:
        Optional absolute timestamp (seconds since epoch) used as the zero
        reference. Defaults to the first record's timestamp.
    """

    if not records:
        return RecordSeries(times=np.array([]), values=np.array([]))

    start = time_origin if time_origin is not None else records[0].timestamp.timestamp()
    times: list[float] = []
    values: list[float] = []
    for record in records:
        value = getattr(record, attribute)
        if value is None:
            continue
        times.append(record.timestamp.timestamp() - start)
        values.append(float(value))

    return RecordSeries(
        times=np.asarray(times, dtype=float), values=np.asarray(values, dtype=float)
    )


def summarize(records: Sequence[Record]) -> ActivitySummary:
    """Compute headline totals from preprocessed records."""

    if not records:
        return ActivitySummary(
            record_count=0,
            total_distance_m=None,
            elapsed_s=0.0,
            total_ascent_m=0.0,
            average_pace_s_per_km=None,
            max_grade_percent=None,
        )

    distances = extract_series(records, "distance").values
    altitudes = extract_series(records, "altitude").values
    paces = extract_series(records, "pace").values
    grades = extract_series(records, "grade").values

    climbs = np.diff(altitudes)
    total_ascent = float(climbs[climbs > 0].sum()) if climbs.size else 0.0

    return ActivitySummary(
        record_count=len(records),
        total_distance_m=float(distances.max()) if distances.size else None,
        elapsed_s=(records[-1].timestamp - records[0].timestamp).total_seconds(),
        total_ascent_m=total_ascent,
        average_pace_s_per_km=float(np.mean(paces)) if paces.size else None,
        max_grade_percent=float(grades.max()) if grades.size else None,
    )
