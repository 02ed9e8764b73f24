"""
Backend adapter contract.

Every storage engine under comparison is driven through the same small
interface so the harness can run them one after another with identical data.
"""

import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, Iterator, List, Optional, Sequence

from ..models import SampleQuery, TelemetryRecord
from ..timing import Measurement

logger = logging.getLogger(__name__)


class BackendError(RuntimeError):
    """A backend was unreachable or rejected an operation."""

    def __init__(self, backend: str, operation: str, cause: Exception):
        super().__init__(f"{backend} {operation} failed: {cause}")
        self.backend = backend
        self.operation = operation
        self.cause = cause


def chunked(records: Sequence[TelemetryRecord], batch_size: int) -> Iterator[Sequence[TelemetryRecord]]:
    """Yield consecutive slices of at most ``batch_size`` records."""
    if batch_size <= 0:
        raise ValueError(f"batch_size must be positive, got {batch_size}")
    for start in range(0, len(records), batch_size):
        yield records[start:start + batch_size]


class BackendAdapter(ABC):
    """Uniform open/reset/write/read contract over one storage engine."""

    name: str = "backend"

    def __init__(self, sample: Optional[SampleQuery] = None):
        self.sample = sample or SampleQuery()

    @property
    def title(self) -> str:
        """Section heading printed before this backend's results."""
        return self.name.upper()

    def __enter__(self) -> "BackendAdapter":
        self.open()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    @abstractmethod
    def open(self) -> None:
        """Establish the backend's single client. Not timed."""

    @abstractmethod
    def close(self) -> None:
        """Release the client. Safe to call more than once."""

    @abstractmethod
    def reset(self) -> None:
        """Remove all benchmark data so repeated runs start from empty."""

    @abstractmethod
    def write_all(self, records: Sequence[TelemetryRecord], batch_size: int) -> Measurement:
        """Persist ``records`` and return the timing of the whole write phase."""

    @abstractmethod
    def read_sample(self) -> Measurement:
        """Run the representative read and return its timing and outcome."""

    @abstractmethod
    def fetch_sample(self) -> List[Dict[str, Any]]:
        """Untimed version of the sample read returning the stored items."""

    @abstractmethod
    def stored_count(self) -> int:
        """Number of benchmark items currently stored."""

    def _fail(self, operation: str, error: Exception) -> BackendError:
        logger.error(f"{self.name} {operation} failed: {error}")
        return BackendError(self.name, operation, error)
