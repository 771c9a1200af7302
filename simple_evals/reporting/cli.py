"""Command-line access to stored scenario runs.

``simple-evals-report summary`` prints one execution and, with
``--fail-on-failure``, exits non-zero when any of its scenarios failed so a CI
job can gate on the stored results. ``executions`` lists what is stored and
``trend`` follows metric values across executions.
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from simple_evals.reporting.formatting import (
    execution_failed,
    format_executions,
    format_summary,
)
from simple_evals.reporting.reader import load_records
from simple_evals.reporting.trending import score_trend_report

logger = logging.getLogger(__name__)


def setup_logging(verbose: bool) -> None:
    """Configure logging for the CLI."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler(sys.stderr)],
    )


def _resolve_storage_root(value: str | None) -> Path:
    if value is not None:
        return Path(value)
    from simple_evals.config import EvalConfig

    return EvalConfig().storage_root


def _positive_int(value: str) -> int:
    number = int(value)
    if number < 1:
        raise argparse.ArgumentTypeError(f"must be at least 1, got {value}")
    return number


def build_parser() -> argparse.ArgumentParser:
    shared = argparse.ArgumentParser(add_help=False)
    shared.add_argument(
        "--format", choices=["terminal", "markdown"], default="terminal",
        help="Output format (default: terminal)",
    )
    shared.add_argument(
        "--storage-root", default=None,
        help="Report storage root (default: SIMPLE_EVALS_STORAGE_ROOT or ./eval-reports)",
    )

    parser = argparse.ArgumentParser(
        prog="simple-evals-report",
        description="Inspect stored LLM response evaluations",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    commands = parser.add_subparsers(dest="command", required=True)

    summary = commands.add_parser(
        "summary", parents=[shared], help="Metrics of one execution",
    )
    summary.add_argument("--execution", default=None, help="Execution name (default: latest)")
    summary.add_argument(
        "--fail-on-failure", action="store_true",
        help="Exit with status 1 if any scenario in the execution failed",
    )

    commands.add_parser("executions", parents=[shared], help="List stored executions")

    trend = commands.add_parser(
        "trend", parents=[shared], help="Metric values across executions",
    )
    trend.add_argument("--scenario", default=None, help="Only this scenario")
    trend.add_argument("--metric", default=None, help="Only this metric (e.g. Coherence)")
    trend.add_argument(
        "--last", type=_positive_int, default=20,
        help="Show last N records (default: 20)",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    """Entry point for ``simple-evals-report``; returns the exit status."""
    args = build_parser().parse_args(argv)
    setup_logging(args.verbose)

    storage_root = _resolve_storage_root(args.storage_root)
    logger.debug(f"Reading stored results from {storage_root}")
    records = load_records(storage_root)

    status = 0
    if args.command == "summary":
        output = format_summary(records, execution_name=args.execution, fmt=args.format)
        if args.fail_on_failure and execution_failed(records, args.execution):
            status = 1
    elif args.command == "executions":
        output = format_executions(records, fmt=args.format)
    else:
        output = score_trend_report(
            records,
            scenario=args.scenario,
            metric=args.metric,
            last_n=args.last,
            fmt=args.format,
        )

    print(output)
    return status


if __name__ == "__main__":
    sys.exit(main())
