"""FIT file decoding into preprocessor records."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Optional

from fitparse import FitFile

from .records import ActivityData, DeviceInfo, Record
from .sport import SPORT_GENERIC

logger = logging.getLogger(__name__)

Semicircle = Optional[int]
Degrees = Optional[float]


def _semicircles_to_degrees(value: Semicircle) -> Degrees:
    if value is None:
        return None
    return value * 180 / 2**31


def _safe_get(fields, key):
    field = fields.get(key)
    if field is not None:
        return field.value
    return None


def _first_present(fields, *keys):
    for key in keys:
        value = _safe_get(fields, key)
        if value is not None:
            return value
    return None


def _as_int(value) -> Optional[int]:
    if value is None:
        return None
    return int(value)


def record_from_fields(fields) -> Optional[Record]:
    """Build a :class:`Record` from a mapping of FIT field name to field.

    Returns ``None`` for messages without a timestamp. Enhanced altitude and
    speed take precedence over the 16-bit variants, and the position is kept
    only when both coordinates are present.
    """

    timestamp = _safe_get(fields, "timestamp")
    if timestamp is None:
        return None

    lat = _safe_get(fields, "position_lat")
    lon = _safe_get(fields, "position_long")
    if lat is None or lon is None:
        lat = lon = None

    return Record(
        timestamp=timestamp,
        position_lat=_semicircles_to_degrees(lat),
        position_long=_semicircles_to_degrees(lon),
        altitude=_first_present(fields, "enhanced_altitude", "altitude"),
        distance=_safe_get(fields, "distance"),
        speed=_first_present(fields, "enhanced_speed", "speed"),
        cadence=_as_int(_safe_get(fields, "cadence")),
        heart_rate=_as_int(_safe_get(fields, "heart_rate")),
        power=_as_int(_safe_get(fields, "power")),
        temperature=_as_int(_safe_get(fields, "temperature")),
    )


def _parse_devices(fit: FitFile) -> List[DeviceInfo]:
    devices: List[DeviceInfo] = []
    for message in fit.get_messages("device_info"):
        fields = {field.name: field for field in message}
        devices.append(
            DeviceInfo(
                manufacturer=_safe_get(fields, "manufacturer"),
                product=_safe_get(fields, "product"),
                software_version=_safe_get(fields, "software_version"),
                serial_number=_safe_get(fields, "serial_number"),
                descriptor=_safe_get(fields, "descriptor"),
                timestamp=_safe_get(fields, "timestamp"),
            )
        )
    return devices


def _parse_records(fit: FitFile) -> List[Record]:
    records: List[Record] = []
    skipped = 0
    for message in fit.get_messages("record"):
        fields = {field.name: field for field in message}
        record = record_from_fields(fields)
        if record is None:
            skipped += 1
            continue
        records.append(record)

    if skipped:
        logger.debug("Skipped %d record messages without a timestamp", skipped)
    return records


def _parse_sport(fit: FitFile) -> str:
    for message_name in ("session", "sport"):
        for message in fit.get_messages(message_name):
            fields = {field.name: field for field in message}
            sport = _safe_get(fields, "sport")
            if sport is not None:
                return str(sport)
    return SPORT_GENERIC


def parse_activity_fit(path: Path | str) -> ActivityData:
    """Decode a FIT activity file into records ready for preprocessing.

    Records are returned as stored in the file: no resampling, smoothing or
    de-duplication is applied, that is the preprocessor's job. Errors raised
    by :mod:`fitparse` propagate unchanged.
    """

    fit_file = FitFile(str(path))
    fit_file.parse()

    records = _parse_records(fit_file)
    activity = ActivityData(
        source=Path(path),
        sport=_parse_sport(fit_file),
        devices=_parse_devices(fit_file),
        records=records,
    )
    logger.info(
        "Decoded %d records from %s (sport: %s)", len(records), activity.source, activity.sport
    )
    return activity
