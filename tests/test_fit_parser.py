from datetime import datetime, timezone
from types import SimpleNamespace

import pytest

from activity_preprocessor import fit_parser
from activity_preprocessor.fit_parser import parse_activity_fit, record_from_fields

TIMESTAMP = datetime(2024, 5, 1, 7, 0, 0, tzinfo=timezone.utc)


def _field(name, value):
    return SimpleNamespace(name=name, value=value)


def _message(**values):
    return [_field(name, value) for name, value in values.items()]


def _fields(**values):
    return {field.name: field for field in _message(**values)}


class FakeFitFile:
    messages = {}

    def __init__(self, path):
        self.path = path
        self.parsed = False

    def parse(self):
        self.parsed = True

    def get_messages(self, name):
        return iter(self.messages.get(name, []))


def test_semicircles_are_converted_to_degrees():
    record = record_from_fields(
        _fields(timestamp=TIMESTAMP, position_lat=2**30, position_long=-(2**29))
    )

    assert record.position_lat == pytest.approx(90.0)
    assert record.position_long == pytest.approx(-45.0)


def test_enhanced_fields_take_precedence():
    record = record_from_fields(
        _fields(
            timestamp=TIMESTAMP,
            altitude=100.0,
            enhanced_altitude=101.5,
            speed=3.0,
            enhanced_speed=3.25,
        )
    )

    assert record.altitude == 101.5
    assert record.speed == 3.25


def test_plain_fields_used_without_enhanced_values():
    record = record_from_fields(
        _fields(timestamp=TIMESTAMP, altitude=100.0, enhanced_altitude=None, speed=3.0)
    )

    assert record.altitude == 100.0
    assert record.speed == 3.0


def test_lone_coordinate_is_dropped():
    record = record_from_fields(_fields(timestamp=TIMESTAMP, position_lat=2**30))

    assert record.position_lat is None
    assert record.position_long is None
    assert not record.has_position


def test_sensor_values_are_integers():
    record = record_from_fields(
        _fields(timestamp=TIMESTAMP, heart_rate=150, cadence=85.0, power=250, temperature=18)
    )

    assert (record.heart_rate, record.cadence, record.power, record.temperature) == (150, 85, 250, 18)
    assert isinstance(record.cadence, int)


def test_missing_timestamp_yields_no_record():
    assert record_from_fields(_fields(distance=10.0)) is None


def test_parse_activity_fit(monkeypatch, tmp_path):
    FakeFitFile.messages = {
        "record": [
            _message(timestamp=TIMESTAMP, distance=0.0, heart_rate=120),
            _message(distance=5.0),
            _message(timestamp=TIMESTAMP, distance=3.0),
        ],
        "session": [_message(sport="running")],
        "device_info": [
            _message(manufacturer="garmin", product="fr965", serial_number=1234, timestamp=TIMESTAMP)
        ],
    }
    monkeypatch.setattr(fit_parser, "FitFile", FakeFitFile)
    path = tmp_path / "activity.fit"

    activity = parse_activity_fit(path)

    assert activity.source == path
    assert activity.sport == "running"
    assert [r.distance for r in activity.records] == [0.0, 3.0]
    assert activity.records[0].heart_rate == 120
    assert activity.devices[0].manufacturer == "garmin"
    assert activity.devices[0].software_version is None


def test_sport_defaults_to_generic(monkeypatch, tmp_path):
    FakeFitFile.messages = {"record": [_message(timestamp=TIMESTAMP)]}
    monkeypatch.setattr(fit_parser, "FitFile", FakeFitFile)

    activity = parse_activity_fit(tmp_path / "a.fit")

    assert activity.sport == "generic"
    assert activity.devices == []


def test_decoder_errors_propagate(monkeypatch, tmp_path):
    class BrokenFitFile(FakeFitFile):
        def parse(self):
            raise ValueError("bad header")

    monkeypatch.setattr(fit_parser, "FitFile", BrokenFitFile)

    with pytest.raises(ValueError, match="bad header"):
        parse_activity_fit(tmp_path / "broken.fit")
