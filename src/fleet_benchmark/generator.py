"""
Synthetic telemetry generator.

The dataset is generated once per run and handed unchanged to every backend,
so the comparison measures storage cost rather than generation variance.
"""

import logging
from datetime import datetime, timezone
from typing import Iterable, Optional, Tuple

import numpy as np
import pandas as pd

from .models import RAW_DATA_PLACEHOLDER, TELEMETRY_COLUMNS, SampleQuery, TelemetryRecord

logger = logging.getLogger(__name__)

BASE_LATITUDE = 50.0
BASE_LONGITUDE = 30.0
SPEED_RANGE = (0, 160)
ENGINE_TEMP_BASE = 90.0
ENGINE_TEMP_SPAN = 20.0


class RecordGenerator:
    """Produces fixed-size batches of random ``TelemetryRecord`` values."""

    def __init__(self, vehicle_id_range: Tuple[int, int] = (1, 100), seed: Optional[int] = None):
        """
        Initialize the generator.

        Args:
            vehicle_id_range: Half-open ``[low, high)`` range for vehicle ids
            seed: Seed for the random source; ``None`` draws fresh entropy
        """
        low, high = vehicle_id_range
        if low >= high:
            raise ValueError(f"Empty vehicle id range: [{low}, {high})")
        self.vehicle_id_range = (low, high)
        self.seed = seed
        self._rng = np.random.default_rng(seed)

    def generate(self, count: int) -> Tuple[TelemetryRecord, ...]:
        """
        Generate ``count`` independent telemetry records.

        Args:
            count: Number of records to produce

        Returns:
            Immutable tuple of records
        """
        if count <= 0:
            raise ValueError(f"count must be positive, got {count}")

        low, high = self.vehicle_id_range
        # tolist() yields built-in ints/floats, which every driver can encode
        vehicle_ids = self._rng.integers(low, high, size=count).tolist()
        latitudes = (BASE_LATITUDE + self._rng.random(count)).tolist()
        longitudes = (BASE_LONGITUDE + self._rng.random(count)).tolist()
        speeds = self._rng.integers(*SPEED_RANGE, size=count).tolist()
        engine_temps = (ENGINE_TEMP_BASE + self._rng.random(count) * ENGINE_TEMP_SPAN).tolist()

        records = tuple(
            TelemetryRecord(
                vehicle_id=vehicle_ids[i],
                timestamp=datetime.now(timezone.utc),
                latitude=latitudes[i],
                longitude=longitudes[i],
                speed=speeds[i],
                engine_temp=engine_temps[i],
                raw_data=RAW_DATA_PLACEHOLDER,
            )
            for i in range(count)
        )
        logger.info(f"Generated {len(records)} telemetry records (seed={self.seed})")
        return records


def expected_matches(records: Iterable[TelemetryRecord], sample: SampleQuery) -> int:
    """Number of records the sample read should return."""
    return sum(1 for record in records if sample.matches(record))


def records_to_frame(records: Iterable[TelemetryRecord]) -> pd.DataFrame:
    return pd.DataFrame([record.as_row() for record in records], columns=list(TELEMETRY_COLUMNS))
