from typing import List

from ..config import Config
from ..models import SampleQuery
from .base import BackendAdapter, BackendError, chunked
from .document import DocumentAdapter
from .keyvalue import KeyValueAdapter
from .relational import RelationalAdapter

__all__ = [
    "BackendAdapter",
    "BackendError",
    "DocumentAdapter",
    "KeyValueAdapter",
    "RelationalAdapter",
    "build_adapters",
    "chunked",
]


def build_adapters(config: Config) -> List[BackendAdapter]:
    """Adapters in benchmark order: relational, document, key-value."""
    sample = SampleQuery(
        vehicle_id=config.benchmark.sample_vehicle_id,
        min_speed=config.benchmark.sample_min_speed,
    )
    return [
        RelationalAdapter(config.relational, sample=sample),
        DocumentAdapter(config.document, sample=sample),
        KeyValueAdapter(config.key_value, sample=sample),
    ]
