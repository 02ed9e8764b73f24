"""
Benchmark harness.

Generates the dataset once, then runs every backend section in a fixed order,
one at a time, so no two backends compete for the host while being timed.
"""

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Sequence

from .backends import BackendAdapter, BackendError, build_adapters
from .config import Config
from .generator import RecordGenerator, expected_matches
from .models import SampleQuery, TelemetryRecord
from .reporter import Reporter
from .timing import Measurement

logger = logging.getLogger(__name__)


@dataclass
class BackendOutcome:
    """Result of one backend section: its measurements or why it failed."""

    backend: str
    measurements: List[Measurement] = field(default_factory=list)
    error: Optional[str] = None
    skipped: bool = False

    @property
    def ok(self) -> bool:
        return self.error is None and not self.skipped


@dataclass
class BenchmarkReport:
    record_count: int
    expected_sample_count: int
    outcomes: List[BackendOutcome] = field(default_factory=list)

    @property
    def succeeded(self) -> bool:
        return bool(self.outcomes) and all(outcome.ok for outcome in self.outcomes)

    @property
    def measurements(self) -> List[Measurement]:
        return [m for outcome in self.outcomes for m in outcome.measurements]

    def outcome(self, backend: str) -> Optional[BackendOutcome]:
        for item in self.outcomes:
            if item.backend == backend:
                return item
        return None


class Harness:
    """Runs the write/read benchmark against each configured backend."""

    def __init__(self, config: Optional[Config] = None,
                 adapters: Optional[Sequence[BackendAdapter]] = None,
                 generator: Optional[RecordGenerator] = None,
                 reporter: Optional[Reporter] = None):
        self.config = config or Config()
        settings = self.config.benchmark
        self.adapters = list(adapters) if adapters is not None else build_adapters(self.config)
        self.generator = generator or RecordGenerator(settings.vehicle_id_range, seed=settings.seed)
        self.reporter = reporter or Reporter()
        self.sample = SampleQuery(settings.sample_vehicle_id, settings.sample_min_speed)

    def run_backend(self, adapter: BackendAdapter,
                    records: Sequence[TelemetryRecord]) -> BackendOutcome:
        """Open, reset, write, read and close one backend."""
        outcome = BackendOutcome(backend=adapter.name)
        self.reporter.section(adapter.title)
        try:
            with adapter:
                adapter.reset()
                measurement = adapter.write_all(records, self.config.benchmark.batch_size)
                outcome.measurements.append(self.reporter.report(measurement))
                measurement = adapter.read_sample()
                outcome.measurements.append(self.reporter.report(measurement))
        except BackendError as e:
            outcome.error = str(e)
            self.reporter.failure(adapter.name, outcome.error)
        return outcome

    def run(self) -> BenchmarkReport:
        settings = self.config.benchmark
        names = ", ".join(adapter.name for adapter in self.adapters)
        self.reporter.line(f"=== BENCHMARK: {names} ===")
        self.reporter.line(f"Records: {settings.record_count}, batch size: {settings.batch_size}")
        self.reporter.line("Generating data... ", end="")
        records = self.generator.generate(settings.record_count)
        self.reporter.line("Done.")

        report = BenchmarkReport(
            record_count=len(records),
            expected_sample_count=expected_matches(records, self.sample),
        )
        logger.info(f"Sample read should match {report.expected_sample_count} records")

        for index, adapter in enumerate(self.adapters):
            outcome = self.run_backend(adapter, records)
            report.outcomes.append(outcome)
            if not outcome.ok and settings.fail_fast:
                remaining = self.adapters[index + 1:]
                for skipped in remaining:
                    report.outcomes.append(BackendOutcome(backend=skipped.name, skipped=True))
                if remaining:
                    logger.warning("Aborting benchmark, skipped: "
                                   + ", ".join(s.name for s in remaining))
                break

        self.reporter.print_summary()
        self.reporter.line()
        self.reporter.line("Benchmark complete." if report.succeeded else "Benchmark finished with errors.")
        return report
