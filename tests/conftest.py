from datetime import datetime, timedelta, timezone

import pytest

from activity_preprocessor.records import Record

BASE_TIME = datetime(2024, 5, 1, 7, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def base_time():
    return BASE_TIME


@pytest.fixture
def record_at():
    """Factory building a record ``seconds`` after the base time."""

    def _make(seconds, **fields):
        return Record(timestamp=BASE_TIME + timedelta(seconds=seconds), **fields)

    return _make
