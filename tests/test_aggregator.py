import pytest

from activity_preprocessor.preprocessor import Preprocessor


def test_distinct_timestamps_are_unchanged(record_at):
    records = [record_at(i, altitude=10.0 + i, heart_rate=120 + i) for i in range(5)]
    snapshot = [(r.timestamp, r.altitude, r.heart_rate) for r in records]

    result = Preprocessor().aggregate_by_timestamp(records)

    assert result == records
    assert all(a is b for a, b in zip(result, records))
    assert [(r.timestamp, r.altitude, r.heart_rate) for r in result] == snapshot


def test_empty_sequence():
    assert Preprocessor().aggregate_by_timestamp([]) == []


def test_run_is_folded_pairwise_not_averaged(record_at):
    records = [
        record_at(0, altitude=10.0),
        record_at(0, altitude=20.0),
        record_at(0, altitude=30.0),
    ]

    result = Preprocessor().aggregate_by_timestamp(records)

    assert len(result) == 1
    assert result[0].altitude == pytest.approx(22.5)


def test_lead_record_is_reused(record_at):
    records = [record_at(0, speed=2.0), record_at(0, speed=4.0), record_at(1)]

    result = Preprocessor().aggregate_by_timestamp(records)

    assert result[0] is records[0]
    assert result[1] is records[2]
    assert result[0].speed == pytest.approx(3.0)


def test_integer_fields_are_truncated(record_at):
    records = [
        record_at(0, heart_rate=100, cadence=80, power=201, temperature=21),
        record_at(0, heart_rate=101, cadence=81, power=202, temperature=22),
        record_at(0, heart_rate=103, cadence=None, power=None, temperature=24),
    ]

    (merged,) = Preprocessor().aggregate_by_timestamp(records)

    # avg(100, 101) -> 100, avg(100, 103) -> 101
    assert merged.heart_rate == 101
    assert isinstance(merged.heart_rate, int)
    assert merged.cadence == 80
    assert merged.power == 201
    assert merged.temperature == 22


def test_absent_values_take_the_other_side(record_at):
    records = [
        record_at(0, altitude=None, distance=5.0),
        record_at(0, altitude=50.0, distance=None),
    ]

    (merged,) = Preprocessor().aggregate_by_timestamp(records)

    assert merged.altitude == 50.0
    assert merged.distance == 5.0


def test_position_is_first_wins_not_averaged(record_at):
    records = [
        record_at(0),
        record_at(0, position_lat=1.0, position_long=2.0),
        record_at(0, position_lat=3.0, position_long=4.0),
    ]

    (merged,) = Preprocessor().aggregate_by_timestamp(records)

    assert (merged.position_lat, merged.position_long) == (1.0, 2.0)


def test_lead_position_is_kept(record_at):
    records = [
        record_at(0, position_lat=10.0, position_long=20.0),
        record_at(0, position_lat=11.0, position_long=21.0),
    ]

    (merged,) = Preprocessor().aggregate_by_timestamp(records)

    assert (merged.position_lat, merged.position_long) == (10.0, 20.0)


def test_multiple_runs_preserve_order(record_at):
    records = [
        record_at(0, altitude=1.0),
        record_at(1, altitude=2.0),
        record_at(1, altitude=4.0),
        record_at(2, altitude=5.0),
        record_at(2, altitude=7.0),
        record_at(2, altitude=9.0),
    ]

    result = Preprocessor().aggregate_by_timestamp(records)

    assert [r.timestamp for r in result] == [records[0].timestamp, records[1].timestamp, records[3].timestamp]
    assert [r.altitude for r in result] == pytest.approx([1.0, 3.0, 7.5])


def test_derived_fields_are_not_folded(record_at):
    records = [record_at(0, grade=5.0, pace=300.0), record_at(0, grade=15.0, pace=500.0)]

    (merged,) = Preprocessor().aggregate_by_timestamp(records)

    assert merged.grade == 5.0
    assert merged.pace == 300.0
