# lichess_classifier/orchestration/orchestrator.py
"""
The top-level application orchestrator.

Fans the PGN files of a directory out over a pool of worker processes, one file
per task. A failure while processing one file is logged and recorded in the run
report; it never stops the other files.
"""

import os
import time
import uuid
from concurrent.futures import Executor, Future, ProcessPoolExecutor, as_completed
from pathlib import Path
from typing import Callable, Dict, List, Optional, Sequence

import structlog
from tqdm import tqdm

from lichess_classifier.config.settings import RunConfig
from lichess_classifier.exceptions import InvalidInvocationError
from lichess_classifier.orchestration.file_processor import FileProcessor
from lichess_classifier.services.pgn_service import PgnService
from lichess_classifier.types import FileReport, RunReport
from lichess_classifier.utils import metrics
from lichess_classifier.utils.logging_config import setup_logging

logger = structlog.get_logger(__name__)

ExecutorFactory = Callable[[int], Executor]


class ClassificationOrchestrator:
    def __init__(
        self,
        config: RunConfig,
        processor: FileProcessor,
        pgn_service: PgnService,
        pgn_patterns: Sequence[str],
        executor_factory: Optional[ExecutorFactory] = None,
    ):
        self._config = config
        self._processor = processor
        self._pgn_service = pgn_service
        self._pgn_patterns = list(pgn_patterns)
        self._executor_factory = executor_factory or self._process_pool

    def _process_pool(self, max_workers: int) -> Executor:
        # Worker processes start with an unconfigured logging system.
        return ProcessPoolExecutor(
            max_workers=max_workers,
            initializer=setup_logging,
            initargs=(self._config.log_level, True, self._config.log_file, self._config.json_logs),
        )

    def _worker_count(self, file_count: int) -> int:
        requested = self._config.workers or os.cpu_count() or 1
        return max(1, min(requested, file_count))

    def _prepare_directories(self) -> None:
        pgn_dir, csv_dir = self._config.pgn_dir, self._config.csv_dir
        if not pgn_dir.is_dir():
            raise InvalidInvocationError(f"PGN directory does not exist: {pgn_dir}")
        try:
            csv_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise InvalidInvocationError(f"Cannot create CSV directory {csv_dir}: {e}") from e

    def run(self) -> RunReport:
        """
        Processes every PGN file of the configured directory.

        Raises:
            InvalidInvocationError: If the PGN directory is missing or the CSV
                directory cannot be created, or if two inputs would write the
                same CSV file. No file is processed in that case.
        """
        self._prepare_directories()
        run_id = f"run-{uuid.uuid4().hex[:8]}"
        started = time.perf_counter()

        files = self._pgn_service.discover(self._config.pgn_dir, self._pgn_patterns)
        logger.info(
            "Starting classification run.", run_id=run_id,
            variant=self._config.variant.value, files=len(files),
        )
        if not files:
            logger.warning("No PGN files found.", directory=str(self._config.pgn_dir))
            return RunReport(files=[], elapsed_seconds=time.perf_counter() - started)

        self._check_unique_sinks(files)

        reports = self._run_pool(files)
        report = RunReport(files=reports, elapsed_seconds=time.perf_counter() - started)

        seen, accepted = report.totals
        logger.info(
            "Classification run finished.", run_id=run_id, files=len(reports),
            failed=len(report.failed_files), games=seen, accepted=accepted,
            elapsed_s=round(report.elapsed_seconds, 2),
        )
        return report

    def _check_unique_sinks(self, files: List[Path]) -> None:
        # Each CSV file must have exactly one writer.
        owners: Dict[Path, Path] = {}
        for path in files:
            sink = self._pgn_service.csv_path_for(path, self._config.csv_dir)
            if sink in owners:
                raise InvalidInvocationError(
                    f"{owners[sink].name} and {path.name} would both write {sink}"
                )
            owners[sink] = path

    def _run_pool(self, files: List[Path]) -> List[FileReport]:
        reports: Dict[Path, FileReport] = {}
        with self._executor_factory(self._worker_count(len(files))) as executor:
            futures = {
                executor.submit(
                    self._processor.process,
                    path,
                    self._pgn_service.csv_path_for(path, self._config.csv_dir),
                ): path
                for path in files
            }
            with tqdm(total=len(files), unit="file", disable=not self._config.show_progress) as progress:
                for future in as_completed(futures):
                    path = futures[future]
                    reports[path] = self._collect(path, future)
                    progress.update(1)

        # Reports follow discovery order, not completion order.
        return [reports[path] for path in files]

    def _collect(self, path: Path, future: Future) -> FileReport:
        variant = self._config.variant.value
        try:
            report = future.result()
        except Exception as e:
            logger.error("Failed to process PGN file.", path=str(path), error=str(e), exc_info=True)
            metrics.FILES_FAILED_TOTAL.labels(variant=variant).inc()
            return FileReport(
                source=str(path),
                sink=str(self._pgn_service.csv_path_for(path, self._config.csv_dir)),
                error=f"{type(e).__name__}: {e}",
            )

        metrics.FILES_PROCESSED_TOTAL.labels(variant=variant).inc()
        metrics.GAMES_SEEN_TOTAL.labels(variant=variant).inc(report.games_seen)
        metrics.GAMES_ACCEPTED_TOTAL.labels(variant=variant).inc(report.games_accepted)
        metrics.GAMES_REJECTED_TOTAL.labels(variant=variant).inc(report.games_rejected)
        metrics.FILE_PROCESSING_DURATION_SECONDS.observe(report.elapsed_seconds)
        return report
