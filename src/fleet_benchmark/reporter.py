"""Console reporting of benchmark measurements."""

import sys
from typing import List, Optional, TextIO

import pandas as pd

from .timing import Measurement

SUMMARY_COLUMNS = ["backend", "phase", "operation", "elapsed_ms", "outcome"]


class Reporter:
    """Prints each measurement as soon as it is reported."""

    def __init__(self, stream: Optional[TextIO] = None):
        self.stream = stream
        self.measurements: List[Measurement] = []

    def line(self, text: str = "", end: str = "\n") -> None:
        print(text, end=end, file=self.stream or sys.stdout, flush=True)

    def section(self, title: str) -> None:
        self.line()
        self.line(f"--- {title} ---")

    def report(self, measurement: Measurement) -> Measurement:
        self.measurements.append(measurement)
        self.line(measurement.format())
        return measurement

    def failure(self, backend: str, reason: str) -> None:
        self.line()
        self.line(f"!!! ERROR ({backend}): {reason}")
        self.line("Check that every database is running and reachable.")

    def summary(self) -> pd.DataFrame:
        """Tabulate every reported measurement."""
        rows = [
            {
                "backend": m.backend,
                "phase": m.phase,
                "operation": m.operation,
                "elapsed_ms": round(m.elapsed_ms, 3),
                "outcome": m.outcome,
            }
            for m in self.measurements
        ]
        return pd.DataFrame(rows, columns=SUMMARY_COLUMNS)

    def print_summary(self) -> None:
        if not self.measurements:
            return
        self.line()
        self.line("=== SUMMARY ===")
        self.line(self.summary().to_string(index=False))
