# lichess_classifier/orchestration/run_config_factory.py
"""
A factory for creating RunConfig objects from command-line arguments.
"""
import argparse
from pathlib import Path

from pydantic import ValidationError

from lichess_classifier.config.settings import RunConfig, Settings
from lichess_classifier.exceptions import InvalidInvocationError
from lichess_classifier.types import ClassifierVariant


class RunConfigFactory:
    """A factory class to centralize the creation of RunConfig objects."""

    @staticmethod
    def create_from_args(args: argparse.Namespace, app_settings: Settings) -> RunConfig:
        """
        Creates a RunConfig object from parsed command-line arguments.

        Values missing on the command line fall back to `app_settings`, which
        itself reads the environment. The CSV directory defaults to the PGN
        directory.

        Raises:
            InvalidInvocationError: If the arguments do not form a valid run.
        """
        pgn_dir = Path(args.pgn_dir)
        csv_dir = Path(args.csv_dir) if args.csv_dir else pgn_dir
        try:
            return RunConfig(
                variant=ClassifierVariant(args.variant),
                pgn_dir=pgn_dir,
                csv_dir=csv_dir,
                workers=args.workers if args.workers is not None else app_settings.default_workers,
                show_progress=app_settings.show_progress and not args.no_progress,
                log_level=args.log_level or app_settings.default_log_level,
                log_file=Path(args.log_file) if args.log_file else None,
                json_logs=args.json_logs,
                classifier_settings=app_settings.classifier_settings,
            )
        except (ValidationError, ValueError) as e:
            raise InvalidInvocationError(f"Invalid arguments: {e}") from e
