from unittest.mock import MagicMock, patch

import pytest

from fleet_benchmark import cli
from fleet_benchmark.config import Config


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    for variable in ("POSTGRES_URL", "MONGO_URL", "REDIS_URL", "BENCH_RECORD_COUNT",
                     "BENCH_BATCH_SIZE", "BENCH_SEED", "MLFLOW_TRACKING_URI"):
        monkeypatch.delenv(variable, raising=False)
    monkeypatch.setattr(cli, "configure_logging", lambda *args, **kwargs: None)


def fake_report(succeeded):
    report = MagicMock()
    report.succeeded = succeeded
    return report


class TestRunCommand:
    """Test the default benchmark command"""

    def test_no_arguments_runs_benchmark(self):
        with patch.object(cli, "Harness") as harness:
            harness.return_value.run.return_value = fake_report(True)
            assert cli.main([]) == 0

        config = harness.call_args.args[0]
        assert config.benchmark.record_count == 50000
        assert config.benchmark.batch_size == 2000

    def test_overrides_reach_config(self):
        with patch.object(cli, "Harness") as harness:
            harness.return_value.run.return_value = fake_report(True)
            cli.main(["run", "--records", "100", "--batch-size", "10", "--seed", "3",
                      "--continue-on-failure"])

        config = harness.call_args.args[0]
        assert config.benchmark.record_count == 100
        assert config.benchmark.batch_size == 10
        assert config.benchmark.seed == 3
        assert config.benchmark.fail_fast is False

    def test_failure_exit_code(self):
        with patch.object(cli, "Harness") as harness:
            harness.return_value.run.return_value = fake_report(False)
            assert cli.main([]) == 1

    def test_invalid_configuration(self, capsys):
        assert cli.main(["--records", "0"]) == 2
        assert "Configuration error" in capsys.readouterr().err

    def test_mlflow_tracking(self):
        with patch.object(cli, "Harness") as harness, \
                patch("fleet_benchmark.tracking.log_benchmark_run") as log_run:
            report = fake_report(True)
            harness.return_value.run.return_value = report
            assert cli.main(["--mlflow"]) == 0

        log_run.assert_called_once()
        assert log_run.call_args.args[0] is report

    def test_prefect_flow(self):
        with patch("fleet_benchmark.flow.storage_benchmark_pipeline", return_value=True) as pipeline:
            assert cli.main(["run", "--prefect", "--records", "10"]) == 0

        kwargs = pipeline.call_args.kwargs
        assert kwargs["record_count"] == 10
        assert kwargs["continue_on_failure"] is False


class TestOtherCommands:
    """Test the wait and create-schema commands"""

    def test_wait(self):
        with patch.object(cli, "wait_for_services", return_value=True) as wait:
            assert cli.main(["wait", "--timeout", "5"]) == 0
        assert wait.call_args.kwargs["timeout"] == 5

    def test_wait_timeout(self):
        with patch.object(cli, "wait_for_services", return_value=False):
            assert cli.main(["wait"]) == 1

    def test_create_schema(self, monkeypatch, tmp_path, capsys):
        url = f"sqlite:///{tmp_path / 'schema.db'}"
        monkeypatch.setenv("POSTGRES_URL", url)

        assert cli.main(["create-schema"]) == 0
        assert "vehicle_telemetry is ready" in capsys.readouterr().out

    def test_create_schema_failure(self, monkeypatch, tmp_path):
        monkeypatch.setenv("POSTGRES_URL", f"sqlite:///{tmp_path / 'missing' / 'x.db'}")
        assert cli.main(["create-schema"]) == 1


class TestApplyOverrides:
    def test_options_before_run_command_are_kept(self):
        args = cli.build_parser().parse_args(["--seed", "5", "--mlflow", "run", "--records", "20"])
        assert args.seed == 5
        assert args.mlflow is True
        assert args.records == 20
        assert args.batch_size is None
        assert args.prefect is None

    def test_no_overrides_keeps_config(self):
        args = cli.build_parser().parse_args([])
        config = cli.apply_overrides(Config(), args)
        assert config.benchmark == Config().benchmark
