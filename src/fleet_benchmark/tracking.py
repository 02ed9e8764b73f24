"""Optional MLflow tracking of benchmark runs."""

import logging
from datetime import datetime
from typing import Optional

import mlflow

from .config import Config
from .harness import BenchmarkReport

logger = logging.getLogger(__name__)

EXPERIMENT_NAME = "fleet-storage-benchmark"


def metric_name(backend: str, phase: str) -> str:
    return f"{backend}_{phase}_ms"


def log_benchmark_run(report: BenchmarkReport, config: Config,
                      tracking_uri: Optional[str] = None) -> None:
    """
    Log benchmark parameters and per-phase latencies to MLflow.

    Args:
        report: Completed benchmark report
        config: Configuration the run used
        tracking_uri: MLflow tracking server; defaults to the configured one
    """
    tracking_uri = tracking_uri or config.mlflow_tracking_uri
    logger.info("Logging benchmark run to MLflow")

    try:
        if tracking_uri:
            mlflow.set_tracking_uri(tracking_uri)
        mlflow.set_experiment(EXPERIMENT_NAME)

        run_name = f"storage_benchmark_{datetime.now().strftime('%Y%m%d_%H%M%S')}"
        with mlflow.start_run(run_name=run_name):
            mlflow.log_params({
                'record_count': report.record_count,
                'batch_size': config.benchmark.batch_size,
                'seed': config.benchmark.seed,
                'kv_write_limit': config.key_value.write_limit,
                'kv_max_in_flight': config.key_value.max_in_flight,
                'backends': ",".join(o.backend for o in report.outcomes if o.ok),
            })

            metrics = {
                metric_name(m.backend, m.phase): m.elapsed_ms
                for m in report.measurements
            }
            metrics['expected_sample_count'] = report.expected_sample_count
            mlflow.log_metrics(metrics)

            failed = [o for o in report.outcomes if o.error]
            if failed:
                mlflow.set_tags({f"error.{o.backend}": o.error for o in failed})

        logger.info("MLflow logging completed")

    except Exception as e:
        logger.warning(f"MLflow logging failed: {str(e)}")
        # MLflow failure never fails the benchmark
