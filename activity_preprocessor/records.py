"""Data model shared by the decoders and the preprocessing pipeline."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import List, Optional, Sequence


@dataclass
class Record:
    """One timestamped activity sample.

    Records are mutable: the preprocessing stages fill in distance, speed,
    grade and pace and replace altitude in place. Absent values are ``None``.
    """

    timestamp: datetime
    position_lat: Optional[float] = None
    position_long: Optional[float] = None
    altitude: Optional[float] = None
    distance: Optional[float] = None
    speed: Optional[float] = None
    cadence: Optional[int] = None
    heart_rate: Optional[int] = None
    power: Optional[int] = None
    temperature: Optional[int] = None
    grade: Optional[float] = None
    pace: Optional[float] = None

    @property
    def has_position(self) -> bool:
        return self.position_lat is not None and self.position_long is not None


@dataclass(frozen=True)
class DeviceInfo:
    manufacturer: Optional[str]
    product: Optional[str]
    software_version: Optional[float]
    serial_number: Optional[int]
    descriptor: Optional[str]
    timestamp: Optional[datetime]


@dataclass(frozen=True)
class ActivityData:
    """Decoded activity ready for preprocessing."""

    source: Path
    sport: str
    devices: Sequence[DeviceInfo]
    records: List[Record]
