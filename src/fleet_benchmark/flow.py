"""Prefect flow wrapping a single benchmark run."""

from typing import Optional

from prefect import flow, get_run_logger

from .config import Config
from .harness import Harness
from .tracking import log_benchmark_run


@flow(name="storage_benchmark_pipeline")
def storage_benchmark_pipeline(
    config_path: Optional[str] = None,
    continue_on_failure: bool = False,
    track: bool = False,
    record_count: Optional[int] = None,
    batch_size: Optional[int] = None,
    seed: Optional[int] = None,
) -> bool:
    """
    Prefect flow for the storage benchmark.

    Args:
        config_path: Optional YAML configuration file
        continue_on_failure: Keep benchmarking remaining backends after a failure
        track: Log the run to MLflow
        record_count: Override the number of generated records
        batch_size: Override the write batch size
        seed: Override the generator seed

    Returns:
        True when every backend completed
    """
    logger = get_run_logger()

    overrides = {"record_count": record_count, "batch_size": batch_size, "seed": seed}
    overrides = {key: value for key, value in overrides.items() if value is not None}
    if continue_on_failure:
        overrides["fail_fast"] = False

    config = Config.load(config_path).merge({"benchmark": overrides})
    config.validate()

    logger.info(f"Starting storage benchmark with {config.benchmark.record_count} records")
    report = Harness(config).run()

    if track:
        log_benchmark_run(report, config)

    for outcome in report.outcomes:
        if outcome.error:
            logger.error(f"{outcome.backend} failed: {outcome.error}")

    logger.info(f"Storage benchmark finished, succeeded={report.succeeded}")
    return report.succeeded
