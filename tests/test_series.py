import numpy as np
import pytest

from activity_preprocessor.series import extract_series, summarize


def test_extract_series_skips_missing_values(record_at):
    records = [
        record_at(0, grade=None),
        record_at(5, grade=2.0),
        record_at(10, grade=None),
        record_at(15, grade=-1.5),
    ]

    series = extract_series(records, "grade")

    np.testing.assert_allclose(series.times, [5.0, 15.0])
    np.testing.assert_allclose(series.values, [2.0, -1.5])


def test_extract_series_with_time_origin(record_at, base_time):
    records = [record_at(10, speed=3.0)]

    series = extract_series(records, "speed", time_origin=base_time.timestamp() - 20)

    np.testing.assert_allclose(series.times, [30.0])


def test_extract_series_empty():
    series = extract_series([], "altitude")
    assert series.times.size == 0
    assert series.values.size == 0


def test_summarize(record_at):
    records = [
        record_at(0, distance=None, altitude=100.0),
        record_at(60, distance=200.0, altitude=104.0, pace=300.0, grade=4.0),
        record_at(120, distance=400.0, altitude=102.0, pace=360.0, grade=-1.0),
        record_at(180, distance=600.0, altitude=105.0, pace=None, grade=6.5),
    ]

    summary = summarize(records)

    assert summary.record_count == 4
    assert summary.total_distance_m == 600.0
    assert summary.elapsed_s == 180.0
    assert summary.total_ascent_m == pytest.approx(7.0)
    assert summary.average_pace_s_per_km == pytest.approx(330.0)
    assert summary.max_grade_percent == 6.5


def test_summarize_without_records():
    summary = summarize([])
    assert summary.record_count == 0
    assert summary.total_distance_m is None
    assert summary.average_pace_s_per_km is None
