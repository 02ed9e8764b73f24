"""
Fleet storage benchmark.

Measures write/read latency of a relational, a document and a key-value store
under the same synthetic vehicle telemetry workload.
"""

from .config import Config, ConfigError
from .generator import RecordGenerator
from .harness import BackendOutcome, BenchmarkReport, Harness
from .models import SampleQuery, TelemetryRecord
from .reporter import Reporter
from .timing import Measurement, measure

__version__ = "0.1.0"

__all__ = [
    "BackendOutcome",
    "BenchmarkReport",
    "Config",
    "ConfigError",
    "Harness",
    "Measurement",
    "RecordGenerator",
    "Reporter",
    "SampleQuery",
    "TelemetryRecord",
    "measure",
]
