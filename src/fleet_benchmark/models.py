"""Data model shared by the generator and every backend adapter."""

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict

RAW_DATA_PLACEHOLDER = "{ 'sensor': 'ok' }"

TELEMETRY_COLUMNS = (
    "vehicle_id",
    "timestamp",
    "latitude",
    "longitude",
    "speed",
    "engine_temp",
    "raw_data",
)


@dataclass(frozen=True)
class TelemetryRecord:
    """A single synthetic vehicle telemetry reading."""

    vehicle_id: int
    timestamp: datetime
    latitude: float
    longitude: float
    speed: int
    engine_temp: float
    raw_data: str = RAW_DATA_PLACEHOLDER

    def as_row(self) -> Dict[str, Any]:
        """Column mapping used for relational inserts."""
        return {column: getattr(self, column) for column in TELEMETRY_COLUMNS}

    def as_document(self) -> Dict[str, Any]:
        # Always a fresh dict: pymongo adds ``_id`` to what it inserts.
        return self.as_row()

    def position(self) -> str:
        return f"{self.latitude},{self.longitude}"


@dataclass(frozen=True)
class SampleQuery:
    """The representative filtered read issued against every backend."""

    vehicle_id: int = 10
    min_speed: int = 80

    def matches(self, record: TelemetryRecord) -> bool:
        return record.vehicle_id == self.vehicle_id and record.speed > self.min_speed
