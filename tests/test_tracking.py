from unittest.mock import MagicMock, patch

import pytest

from fleet_benchmark.config import Config
from fleet_benchmark.flow import storage_benchmark_pipeline
from fleet_benchmark.harness import BackendOutcome, BenchmarkReport
from fleet_benchmark.timing import READ, WRITE, Measurement
from fleet_benchmark.tracking import log_benchmark_run, metric_name


@pytest.fixture
def report():
    return BenchmarkReport(
        record_count=1000,
        expected_sample_count=4,
        outcomes=[
            BackendOutcome("relational", [
                Measurement("relational", WRITE, "Insert", 20_000_000, 1000),
                Measurement("relational", READ, "Filter", 2_000_000, 4),
            ]),
            BackendOutcome("document", error="document reset failed: refused"),
        ],
    )


class TestMlflowTracking:
    """Test logging runs to MLflow"""

    def test_logs_params_and_metrics(self, report):
        with patch("fleet_benchmark.tracking.mlflow") as mlflow:
            log_benchmark_run(report, Config(), tracking_uri="http://mlflow:5000")

        mlflow.set_tracking_uri.assert_called_once_with("http://mlflow:5000")
        params = mlflow.log_params.call_args.args[0]
        assert params["record_count"] == 1000
        assert params["batch_size"] == 2000
        assert params["backends"] == "relational"

        metrics = mlflow.log_metrics.call_args.args[0]
        assert metrics["relational_write_ms"] == 20.0
        assert metrics["relational_read_ms"] == 2.0
        assert metrics["expected_sample_count"] == 4
        mlflow.set_tags.assert_called_once_with({"error.document": "document reset failed: refused"})

    def test_tracking_failure_does_not_raise(self, report):
        with patch("fleet_benchmark.tracking.mlflow") as mlflow:
            mlflow.start_run.side_effect = RuntimeError("tracking server down")
            log_benchmark_run(report, Config())

    def test_metric_name(self):
        assert metric_name("key_value", "read") == "key_value_read_ms"


class TestPrefectFlow:
    """Test the flow body without a Prefect run context"""

    def test_flow_runs_harness(self):
        with patch("fleet_benchmark.flow.get_run_logger", return_value=MagicMock()), \
                patch("fleet_benchmark.flow.Harness") as harness, \
                patch("fleet_benchmark.flow.log_benchmark_run") as log_run:
            harness.return_value.run.return_value = MagicMock(succeeded=True, outcomes=[])
            result = storage_benchmark_pipeline.fn(
                continue_on_failure=True, track=True, record_count=10, seed=4)

        assert result is True
        config = harness.call_args.args[0]
        assert config.benchmark.record_count == 10
        assert config.benchmark.seed == 4
        assert config.benchmark.fail_fast is False
        log_run.assert_called_once()
