"""Monotonic stopwatch wrapping a single benchmark phase."""

import time
from dataclasses import dataclass
from typing import Any, Callable, Optional

WRITE = "write"
READ = "read"


@dataclass(frozen=True)
class Measurement:
    """The timed outcome of one phase of one backend."""

    backend: str
    phase: str
    operation: str
    elapsed_ns: int
    outcome: Any
    unit: str = "ms"
    outcome_label: Optional[str] = None
    detail: Optional[str] = None

    @property
    def elapsed_ms(self) -> float:
        return self.elapsed_ns / 1_000_000

    @property
    def elapsed_us(self) -> float:
        return self.elapsed_ns / 1_000

    def format_elapsed(self) -> str:
        if self.unit == "us":
            return f"{self.elapsed_us:.1f} µs"
        return f"{self.elapsed_ms:.0f} ms"

    def format(self) -> str:
        line = f"{self.phase.upper()} ({self.operation}): {self.format_elapsed()}"
        if self.outcome_label:
            line += f". {self.outcome_label}: {self.outcome}"
        if self.detail:
            line += f" ({self.detail})"
        return line


def measure(backend: str, phase: str, thunk: Callable[[], Any], *,
            operation: str, unit: str = "ms",
            outcome_label: Optional[str] = None,
            detail: Optional[str] = None) -> Measurement:
    """
    Time ``thunk`` and package its return value as the phase outcome.

    The clock starts immediately before the call and stops immediately after;
    anything the caller does outside ``thunk`` is not measured.
    """
    start = time.perf_counter_ns()
    outcome = thunk()
    elapsed = time.perf_counter_ns() - start
    return Measurement(
        backend=backend,
        phase=phase,
        operation=operation,
        elapsed_ns=elapsed,
        outcome=outcome,
        unit=unit,
        outcome_label=outcome_label,
        detail=detail,
    )
