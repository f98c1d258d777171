# lichess_classifier/cli.py
"""
The command-line entry point.

    lichess-classifier <variant> <pgn_dir> [csv_dir]

Every PGN file directly inside `pgn_dir` produces one CSV file in `csv_dir`
(default: `pgn_dir`). Exits 0 when every file was processed, 1 when at least
one file failed and 2 for an unusable invocation.
"""
import argparse
import sys
from typing import List, Optional

import structlog

from lichess_classifier.config.settings import settings
from lichess_classifier.containers import get_container
from lichess_classifier.exceptions import InvalidInvocationError
from lichess_classifier.orchestration.orchestrator import ClassificationOrchestrator
from lichess_classifier.orchestration.run_config_factory import RunConfigFactory
from lichess_classifier.types import ClassifierVariant
from lichess_classifier.utils.logging_config import setup_logging

logger = structlog.get_logger(__name__)

EXIT_OK = 0
EXIT_FILE_FAILED = 1
EXIT_INVALID_INVOCATION = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="lichess-classifier",
        description="Classify the games of lichess PGN dumps into per-file CSV tables.",
    )
    parser.add_argument(
        "variant",
        choices=[variant.value for variant in ClassifierVariant],
        help="Which classifier to run over every game."
    )
    parser.add_argument("pgn_dir", help="Directory holding .pgn, .pgn.bz2, .pgn.zst or .pgn.gz files.")
    parser.add_argument("csv_dir", nargs="?", default=None, help="Output directory (default: pgn_dir).")
    parser.add_argument(
        "--workers",
        type=int,
        default=None,
        help="Number of worker processes (default: one per CPU)."
    )
    parser.add_argument(
        "--log-level",
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging verbosity."
    )
    parser.add_argument("--log-file", default=None, help="Also write JSON logs to this file.")
    parser.add_argument("--json-logs", action="store_true", help="Render console logs as JSON.")
    parser.add_argument("--no-progress", action="store_true", help="Hide the progress bar.")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Runs the classifier; returns the process exit code."""
    parser = build_parser()
    try:
        args = parser.parse_args(argv)
    except SystemExit as e:
        # argparse exits itself on --help (0) and on usage errors (2).
        return e.code if isinstance(e.code, int) else EXIT_INVALID_INVOCATION

    try:
        run_config = RunConfigFactory.create_from_args(args, settings)
    except InvalidInvocationError as e:
        setup_logging(log_level="INFO")
        logger.error("Invalid invocation.", error=str(e))
        return EXIT_INVALID_INVOCATION

    setup_logging(
        log_level=run_config.log_level,
        log_file=run_config.log_file,
        force_json_console=run_config.json_logs,
    )

    container = get_container(run_config)
    orchestrator = container.resolve(ClassificationOrchestrator)
    try:
        report = orchestrator.run()
    except InvalidInvocationError as e:
        logger.error("Invalid invocation.", error=str(e))
        return EXIT_INVALID_INVOCATION

    for failed in report.failed_files:
        logger.error("File failed.", path=failed.source, error=failed.error)
    return EXIT_FILE_FAILED if report.failed_files else EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
