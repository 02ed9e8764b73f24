"""
Relational backend (PostgreSQL by default) driven through SQLAlchemy Core.

All write batches share one transaction: the phase commits only after every
batch succeeded, and a failing batch rolls back everything written so far.
The sample read runs against whatever indexes already exist on the table.
"""

import logging
from typing import Any, Dict, List, Optional, Sequence

from sqlalchemy import (
    Column,
    DateTime,
    Float,
    Integer,
    MetaData,
    Table,
    Text,
    create_engine,
    delete,
    func,
    insert,
    select,
    text,
)
from sqlalchemy.engine import Connection, Engine, make_url
from sqlalchemy.exc import SQLAlchemyError

from ..config import RelationalConfig
from ..models import SampleQuery, TelemetryRecord
from ..timing import READ, WRITE, Measurement, measure
from .base import BackendAdapter, chunked

logger = logging.getLogger(__name__)


def telemetry_table(name: str, metadata: MetaData) -> Table:
    """Table definition matching the benchmark's relational schema."""
    return Table(
        name,
        metadata,
        Column("vehicle_id", Integer, nullable=False),
        Column("timestamp", DateTime(timezone=True), nullable=False),
        Column("latitude", Float, nullable=False),
        Column("longitude", Float, nullable=False),
        Column("speed", Integer, nullable=False),
        Column("engine_temp", Float, nullable=False),
        Column("raw_data", Text),
    )


class RelationalAdapter(BackendAdapter):
    """Benchmark adapter for a SQL database."""

    name = "relational"

    def __init__(self, config: Optional[RelationalConfig] = None,
                 sample: Optional[SampleQuery] = None,
                 engine: Optional[Engine] = None):
        super().__init__(sample)
        self.config = config or RelationalConfig()
        self.metadata = MetaData()
        self.table = telemetry_table(self.config.table, self.metadata)
        self.engine = engine
        self._owns_engine = engine is None
        self.connection: Optional[Connection] = None

    @property
    def dialect_name(self) -> str:
        if self.engine is not None:
            return self.engine.dialect.name
        return make_url(self.config.url).get_backend_name()

    @property
    def title(self) -> str:
        return f"{self.dialect_name.upper()} (Relational)"

    def open(self) -> None:
        try:
            if self.engine is None:
                self.engine = create_engine(self.config.url)
            self.connection = self.engine.connect()
        except SQLAlchemyError as e:
            raise self._fail("connect", e) from e
        logger.info(f"Connected to {self.dialect_name} database, table {self.config.table}")

    def close(self) -> None:
        if self.connection is not None:
            self.connection.close()
            self.connection = None
        if self._owns_engine and self.engine is not None:
            self.engine.dispose()
            self.engine = None

    def create_table(self) -> None:
        """Provision the benchmark table if it does not exist yet."""
        try:
            with self.connection.begin():
                self.metadata.create_all(self.connection)
        except SQLAlchemyError as e:
            raise self._fail("create_table", e) from e
        logger.info(f"Ensured table {self.config.table} exists")

    def reset(self) -> None:
        try:
            with self.connection.begin():
                if self.dialect_name == "postgresql":
                    quoted = self.connection.dialect.identifier_preparer.format_table(self.table)
                    self.connection.execute(text(f"TRUNCATE TABLE {quoted}"))
                else:
                    self.connection.execute(delete(self.table))
        except SQLAlchemyError as e:
            raise self._fail("reset", e) from e
        logger.info(f"Cleared table {self.config.table}")

    def write_all(self, records: Sequence[TelemetryRecord], batch_size: int) -> Measurement:
        batches = list(chunked(records, batch_size))
        statement = insert(self.table)

        def insert_batches() -> int:
            inserted = 0
            with self.connection.begin():
                for batch in batches:
                    self.connection.execute(statement, [record.as_row() for record in batch])
                    inserted += len(batch)
            return inserted

        logger.info(f"Inserting {len(records)} rows in {len(batches)} batches of {batch_size}")
        try:
            return measure(self.name, WRITE, insert_batches, operation="Insert")
        except SQLAlchemyError as e:
            raise self._fail("write", e) from e

    def _sample_statement(self):
        return select(self.table).where(
            self.table.c.vehicle_id == self.sample.vehicle_id,
            self.table.c.speed > self.sample.min_speed,
        )

    def fetch_sample(self) -> List[Dict[str, Any]]:
        try:
            with self.connection.begin():
                rows = self.connection.execute(self._sample_statement()).mappings().all()
        except SQLAlchemyError as e:
            raise self._fail("read", e) from e
        return [dict(row) for row in rows]

    def read_sample(self) -> Measurement:
        statement = self._sample_statement()

        def run_query() -> int:
            return len(self.connection.execute(statement).all())

        try:
            # the transaction commits after the clock stops
            with self.connection.begin():
                return measure(
                    self.name, READ, run_query,
                    operation="Filter",
                    outcome_label="Found",
                    detail="no index created",
                )
        except SQLAlchemyError as e:
            raise self._fail("read", e) from e

    def stored_count(self) -> int:
        try:
            with self.connection.begin():
                return self.connection.execute(select(func.count()).select_from(self.table)).scalar_one()
        except SQLAlchemyError as e:
            raise self._fail("count", e) from e
