import os
import sys
from datetime import datetime, timezone

from fakeredis import FakeServer
from fakeredis.aioredis import FakeRedis as FakeAsyncRedis
import mongomock
import pytest

# Add the src directory to the Python path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from fleet_benchmark.backends import DocumentAdapter, KeyValueAdapter, RelationalAdapter
from fleet_benchmark.config import DocumentConfig, KeyValueConfig, RelationalConfig
from fleet_benchmark.generator import RecordGenerator
from fleet_benchmark.models import TelemetryRecord


def make_record(vehicle_id=10, speed=95, latitude=50.25, longitude=30.75, engine_temp=97.5):
    return TelemetryRecord(
        vehicle_id=vehicle_id,
        timestamp=datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc),
        latitude=latitude,
        longitude=longitude,
        speed=speed,
        engine_temp=engine_temp,
    )


@pytest.fixture
def records():
    """Seeded synthetic dataset"""
    return RecordGenerator(seed=1234).generate(500)


@pytest.fixture
def sqlite_url(tmp_path):
    return f"sqlite:///{tmp_path / 'benchmark.db'}"


@pytest.fixture
def relational(sqlite_url):
    """Open relational adapter on a fresh SQLite table"""
    adapter = RelationalAdapter(RelationalConfig(url=sqlite_url))
    with adapter:
        adapter.create_table()
        yield adapter


@pytest.fixture
def mongo_client():
    return mongomock.MongoClient()


@pytest.fixture
def document(mongo_client):
    """Open document adapter on an in-memory mongomock client"""
    adapter = DocumentAdapter(DocumentConfig(database="fleet_test"), client=mongo_client)
    with adapter:
        yield adapter


@pytest.fixture
def redis_server():
    return FakeServer()


@pytest.fixture
def redis_factory(redis_server):
    return lambda: FakeAsyncRedis(server=redis_server, decode_responses=True)


@pytest.fixture
def key_value(redis_factory):
    """Open key-value adapter on a fakeredis server"""
    adapter = KeyValueAdapter(KeyValueConfig(write_limit=10000, max_in_flight=16),
                              client_factory=redis_factory)
    with adapter:
        yield adapter
