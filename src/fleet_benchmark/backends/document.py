"""
Document backend (MongoDB) driven through pymongo.

Batches are inserted independently; there is no transaction spanning the
write phase. The compound (vehicle_id, speed) index is built after the write
and before the timed read, outside the measured window.
"""

import logging
from typing import Any, Dict, List, Optional, Sequence

from pymongo import ASCENDING, MongoClient
from pymongo.errors import PyMongoError

from ..config import DocumentConfig
from ..models import SampleQuery, TelemetryRecord
from ..timing import READ, WRITE, Measurement, measure
from .base import BackendAdapter, chunked

logger = logging.getLogger(__name__)

SAMPLE_INDEX = [("vehicle_id", ASCENDING), ("speed", ASCENDING)]


class DocumentAdapter(BackendAdapter):
    """Benchmark adapter for a MongoDB collection."""

    name = "document"

    def __init__(self, config: Optional[DocumentConfig] = None,
                 sample: Optional[SampleQuery] = None,
                 client: Optional[MongoClient] = None):
        super().__init__(sample)
        self.config = config or DocumentConfig()
        self.client = client
        self._owns_client = client is None
        self.database = None
        self.collection = None

    @property
    def title(self) -> str:
        return "MONGODB (Document NoSQL)"

    def open(self) -> None:
        try:
            if self.client is None:
                self.client = MongoClient(
                    self.config.url,
                    serverSelectionTimeoutMS=self.config.server_selection_timeout_ms,
                    tz_aware=True,
                )
            self.database = self.client[self.config.database]
            self.collection = self.database[self.config.collection]
        except PyMongoError as e:
            raise self._fail("connect", e) from e
        logger.info(f"Using collection {self.config.database}.{self.config.collection}")

    def close(self) -> None:
        if self._owns_client and self.client is not None:
            self.client.close()
            self.client = None
        self.database = None
        self.collection = None

    def reset(self) -> None:
        try:
            self.database.drop_collection(self.config.collection)
            self.database.create_collection(self.config.collection)
        except PyMongoError as e:
            raise self._fail("reset", e) from e
        self.collection = self.database[self.config.collection]
        logger.info(f"Recreated collection {self.config.collection}")

    def write_all(self, records: Sequence[TelemetryRecord], batch_size: int) -> Measurement:
        batches = list(chunked(records, batch_size))

        def insert_batches() -> int:
            inserted = 0
            for batch in batches:
                result = self.collection.insert_many([record.as_document() for record in batch])
                inserted += len(result.inserted_ids)
            return inserted

        logger.info(f"Inserting {len(records)} documents in {len(batches)} batches of {batch_size}")
        try:
            return measure(self.name, WRITE, insert_batches, operation="Insert")
        except PyMongoError as e:
            raise self._fail("write", e) from e

    def _sample_filter(self) -> Dict[str, Any]:
        return {
            "vehicle_id": self.sample.vehicle_id,
            "speed": {"$gt": self.sample.min_speed},
        }

    def ensure_index(self) -> str:
        """Build the (vehicle_id, speed) index the sample read relies on."""
        try:
            index_name = self.collection.create_index(SAMPLE_INDEX)
        except PyMongoError as e:
            raise self._fail("create_index", e) from e
        logger.info(f"Created index {index_name}")
        return index_name

    def fetch_sample(self) -> List[Dict[str, Any]]:
        try:
            return list(self.collection.find(self._sample_filter(), {"_id": 0}))
        except PyMongoError as e:
            raise self._fail("read", e) from e

    def read_sample(self) -> Measurement:
        self.ensure_index()
        query = self._sample_filter()

        def run_query() -> int:
            return len(list(self.collection.find(query)))

        try:
            return measure(
                self.name, READ, run_query,
                operation="Filter",
                outcome_label="Found",
                detail="index on (vehicle_id, speed) built before timing",
            )
        except PyMongoError as e:
            raise self._fail("read", e) from e

    def stored_count(self) -> int:
        try:
            return self.collection.count_documents({})
        except PyMongoError as e:
            raise self._fail("count", e) from e
