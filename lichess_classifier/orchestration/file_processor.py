# lichess_classifier/orchestration/file_processor.py
"""
Defines the `FileProcessor`, responsible for classifying a single PGN file.

A `FileProcessor` is sent to a worker process and run there: it builds its own
classifier and sink, so workers never share mutable state.
"""

import time
from pathlib import Path

import structlog

from lichess_classifier.config.settings import ClassifierSettings
from lichess_classifier.core.variants import create_classifier, csv_columns
from lichess_classifier.output.csv_sink import CsvSink
from lichess_classifier.services.pgn_service import PgnService
from lichess_classifier.types import ClassifierVariant, FileReport

logger = structlog.get_logger(__name__)


class FileProcessor:
    """Runs one variant's classifier over one PGN file and writes one CSV file."""

    def __init__(
        self,
        variant: ClassifierVariant,
        classifier_settings: ClassifierSettings,
        pgn_service: PgnService,
    ):
        self._variant = variant
        self._classifier_settings = classifier_settings
        self._pgn_service = pgn_service

    @property
    def variant(self) -> ClassifierVariant:
        return self._variant

    def process(self, pgn_path: Path, csv_path: Path) -> FileReport:
        """
        Streams every game of `pgn_path` through a fresh classifier and appends
        each accepted row to `csv_path`, in file order.

        Raises:
            PgnSourceError: If the PGN file cannot be opened or read.
            CsvSinkError: If the CSV file cannot be created or written.
        """
        structlog.contextvars.bind_contextvars(source=pgn_path.name)
        try:
            started = time.perf_counter()
            report = FileReport(source=str(pgn_path), sink=str(csv_path))
            classifier = create_classifier(self._variant, self._classifier_settings)
            logger.info("Processing PGN.", path=str(pgn_path), variant=self._variant.value)

            with CsvSink(csv_path, csv_columns(self._variant)) as sink:
                for game in self._pgn_service.stream_games(pgn_path, classifier):
                    report.games_seen += 1
                    if game.row is not None:
                        sink.write_row(game.row)
                        report.games_accepted += 1

            report.elapsed_seconds = time.perf_counter() - started
            logger.info(
                "Wrote CSV.", path=str(csv_path), games=report.games_seen,
                accepted=report.games_accepted, elapsed_s=round(report.elapsed_seconds, 2),
            )
            return report
        finally:
            structlog.contextvars.clear_contextvars()
