"""
Command-line entry point for the fleet storage benchmark.

Running without a command runs the benchmark with the configured defaults.
"""

import argparse
import logging
import sys
from typing import List, Optional

from .backends import BackendError, RelationalAdapter
from .config import Config, ConfigError
from .harness import Harness
from .services import wait_for_services

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

logger = logging.getLogger(__name__)


def configure_logging(level: str = "INFO", log_file: Optional[str] = None) -> None:
    handlers: List[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    if log_file:
        handlers.append(logging.FileHandler(log_file))
    logging.basicConfig(level=getattr(logging, level.upper(), logging.INFO),
                        format=LOG_FORMAT, handlers=handlers, force=True)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='fleet-benchmark',
        description='Compare write/read latency of relational, document and key-value stores')
    parser.add_argument('--config', help='YAML configuration file')
    parser.add_argument('--log-level', default='WARNING',
                        help='Logging level (default: WARNING)')
    parser.add_argument('--log-file', help='Also write logs to this file')
    subparsers = parser.add_subparsers(dest='command', help='Available commands')

    run_parser = subparsers.add_parser('run', help='Run the benchmark (default)')
    add_run_arguments(run_parser, default=argparse.SUPPRESS)

    wait_parser = subparsers.add_parser('wait', help='Wait for the data stores to accept connections')
    wait_parser.add_argument('--timeout', type=float, default=60,
                             help='Seconds to wait for each store')

    subparsers.add_parser('create-schema', help='Create the relational benchmark table')

    add_run_arguments(parser)
    return parser


def add_run_arguments(parser: argparse.ArgumentParser, default=None) -> None:
    """Register the run options; the ``run`` subparser passes SUPPRESS so it keeps root values."""
    parser.add_argument('--records', type=int, default=default,
                        help='Number of records to generate')
    parser.add_argument('--batch-size', type=int, default=default,
                        help='Records per write batch')
    parser.add_argument('--seed', type=int, default=default,
                        help='Seed for the data generator')
    parser.add_argument('--continue-on-failure', action='store_true', default=default,
                        help='Keep benchmarking the remaining backends after a failure')
    parser.add_argument('--mlflow', action='store_true', default=default,
                        help='Log the run to MLflow')
    parser.add_argument('--prefect', action='store_true', default=default,
                        help='Run as a Prefect flow')


def apply_overrides(config: Config, args: argparse.Namespace) -> Config:
    overrides = {}
    if args.records is not None:
        overrides['record_count'] = args.records
    if args.batch_size is not None:
        overrides['batch_size'] = args.batch_size
    if args.seed is not None:
        overrides['seed'] = args.seed
    if args.continue_on_failure:
        overrides['fail_fast'] = False
    config = config.merge({'benchmark': overrides})
    config.validate()
    return config


def run_benchmark(config: Config, track: bool = False) -> int:
    report = Harness(config).run()
    if track:
        from .tracking import log_benchmark_run
        log_benchmark_run(report, config)
    return 0 if report.succeeded else 1


def create_schema(config: Config) -> int:
    adapter = RelationalAdapter(config.relational)
    try:
        with adapter:
            adapter.create_table()
    except BackendError as e:
        print(f"Schema creation failed: {e}", file=sys.stderr)
        return 1
    print(f"Table {config.relational.table} is ready")
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point that dispatches to the requested command."""
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.log_level, args.log_file)

    try:
        config = Config.load(args.config)
        if args.command in (None, 'run'):
            config = apply_overrides(config, args)
    except ConfigError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return 2

    if args.command == 'wait':
        return 0 if wait_for_services(config, timeout=args.timeout) else 1

    if args.command == 'create-schema':
        return create_schema(config)

    if args.prefect:
        from .flow import storage_benchmark_pipeline
        succeeded = storage_benchmark_pipeline(
            config_path=args.config,
            continue_on_failure=bool(args.continue_on_failure),
            track=bool(args.mlflow),
            record_count=args.records,
            batch_size=args.batch_size,
            seed=args.seed,
        )
        return 0 if succeeded else 1

    return run_benchmark(config, track=bool(args.mlflow))


if __name__ == "__main__":
    sys.exit(main())
