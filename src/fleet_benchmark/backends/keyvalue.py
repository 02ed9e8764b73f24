"""
Key-value backend (Redis) driven through ``redis.asyncio``.

The write phase stores the latest position of each vehicle under
``<prefix>:<vehicle_id>:pos``. A bounded subset of the dataset is written with
every SET launched at once and the phase ends when the last one completes.
The adapter keeps a private event loop so it can offer the same synchronous
contract as the other backends.
"""

import asyncio
import logging
from typing import Any, Awaitable, Callable, Dict, List, Optional, Sequence

import redis.asyncio as redis
from redis.exceptions import RedisError

from ..config import KeyValueConfig
from ..models import SampleQuery, TelemetryRecord
from ..timing import READ, WRITE, Measurement, measure
from .base import BackendAdapter

logger = logging.getLogger(__name__)

ClientFactory = Callable[[], redis.Redis]


class KeyValueAdapter(BackendAdapter):
    """Benchmark adapter for Redis position keys."""

    name = "key_value"

    def __init__(self, config: Optional[KeyValueConfig] = None,
                 sample: Optional[SampleQuery] = None,
                 client_factory: Optional[ClientFactory] = None):
        super().__init__(sample)
        self.config = config or KeyValueConfig()
        self.client_factory = client_factory or self._default_client
        self.client: Optional[redis.Redis] = None
        self._loop: Optional[asyncio.AbstractEventLoop] = None

    @property
    def title(self) -> str:
        return "REDIS (Key-Value NoSQL)"

    def _default_client(self) -> redis.Redis:
        return redis.from_url(self.config.url, decode_responses=True)

    def position_key(self, vehicle_id: int) -> str:
        return f"{self.config.key_prefix}:{vehicle_id}:pos"

    @property
    def key_pattern(self) -> str:
        return f"{self.config.key_prefix}:*:pos"

    def _run(self, coro: Awaitable[Any]) -> Any:
        return self._loop.run_until_complete(coro)

    async def _connect(self) -> redis.Redis:
        client = self.client_factory()
        await client.ping()
        return client

    def open(self) -> None:
        self._loop = asyncio.new_event_loop()
        try:
            self.client = self._run(self._connect())
        except (RedisError, OSError, ValueError) as e:
            # from_url rejects a malformed URL with ValueError
            self._loop.close()
            self._loop = None
            raise self._fail("connect", e) from e
        logger.info(f"Connected to Redis, key pattern {self.key_pattern}")

    def close(self) -> None:
        if self._loop is None:
            return
        if self.client is not None:
            self._run(self.client.aclose())
            self.client = None
        self._loop.close()
        self._loop = None

    async def _delete_positions(self) -> int:
        deleted = 0
        keys: List[str] = []
        async for key in self.client.scan_iter(match=self.key_pattern, count=1000):
            keys.append(key)
            if len(keys) >= 1000:
                deleted += await self.client.delete(*keys)
                keys = []
        if keys:
            deleted += await self.client.delete(*keys)
        return deleted

    def reset(self) -> None:
        try:
            deleted = self._run(self._delete_positions())
        except (RedisError, OSError) as e:
            raise self._fail("reset", e) from e
        logger.info(f"Deleted {deleted} position keys")

    async def _set_positions(self, records: Sequence[TelemetryRecord]) -> int:
        in_flight = asyncio.Semaphore(self.config.max_in_flight)

        async def set_position(record: TelemetryRecord) -> None:
            async with in_flight:
                await self.client.set(self.position_key(record.vehicle_id), record.position())

        tasks = [asyncio.ensure_future(set_position(record)) for record in records]
        try:
            await asyncio.gather(*tasks)
        except BaseException:
            for task in tasks:
                task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)
            raise
        return len(records)

    def write_all(self, records: Sequence[TelemetryRecord], batch_size: int) -> Measurement:
        # batch_size is part of the shared contract; writes here are per key
        subset = records[:self.config.write_limit]
        logger.info(f"Setting {len(subset)} position keys, "
                    f"at most {self.config.max_in_flight} in flight")
        try:
            return measure(
                self.name, WRITE,
                lambda: self._run(self._set_positions(subset)),
                operation="Set Position",
                detail=f"{len(subset)} operations",
            )
        except (RedisError, OSError) as e:
            raise self._fail("write", e) from e

    def get_position(self, vehicle_id: int) -> Optional[str]:
        try:
            return self._run(self.client.get(self.position_key(vehicle_id)))
        except (RedisError, OSError) as e:
            raise self._fail("read", e) from e

    def fetch_sample(self) -> List[Dict[str, Any]]:
        key = self.position_key(self.sample.vehicle_id)
        value = self.get_position(self.sample.vehicle_id)
        if value is None:
            return []
        return [{"key": key, "value": value}]

    def read_sample(self) -> Measurement:
        key = self.position_key(self.sample.vehicle_id)
        try:
            return measure(
                self.name, READ,
                lambda: self._run(self.client.get(key)),
                operation="Get One",
                unit="us",
                outcome_label="Value",
                detail="single key lookup",
            )
        except (RedisError, OSError) as e:
            raise self._fail("read", e) from e

    async def _count_positions(self) -> int:
        count = 0
        async for _ in self.client.scan_iter(match=self.key_pattern, count=1000):
            count += 1
        return count

    def stored_count(self) -> int:
        try:
            return self._run(self._count_positions())
        except (RedisError, OSError) as e:
            raise self._fail("count", e) from e
