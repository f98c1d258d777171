# lichess_classifier/output/csv_sink.py
"""
Provides the append-only CSV sink that accepted rows are written to.

`CsvSink` is a "dumb" I/O service: it knows nothing about classification, only
how to turn row dataclasses into CSV lines. Each input file gets its own sink,
written by exactly one worker, so no locking is involved.
"""

import csv
from pathlib import Path
from typing import List, Optional, TextIO

import structlog

from lichess_classifier.exceptions import CsvSinkError
from lichess_classifier.types import CsvRow

logger = structlog.get_logger(__name__)


class CsvSink:
    """Writes one header line followed by one line per accepted game."""

    def __init__(self, path: Path, columns: List[str]):
        self._path = path
        self._columns = columns
        self._handle: Optional[TextIO] = None
        self._writer = None
        self.rows_written = 0

    @property
    def path(self) -> Path:
        return self._path

    def open(self) -> "CsvSink":
        """
        Creates (or truncates) the CSV file and writes the header.

        Raises:
            CsvSinkError: If the file cannot be created.
        """
        try:
            self._handle = self._path.open("w", newline="", encoding="utf-8")
            self._writer = csv.writer(self._handle)
            self._writer.writerow(self._columns)
        except OSError as e:
            raise CsvSinkError(f"Failed to create CSV file {self._path}") from e
        return self

    def write_row(self, row: CsvRow) -> None:
        if self._writer is None:
            raise CsvSinkError(f"CSV sink {self._path} is not open")
        try:
            self._writer.writerow(row.csv_values())
        except OSError as e:
            raise CsvSinkError(f"Failed to write to CSV file {self._path}") from e
        self.rows_written += 1

    def close(self) -> None:
        """Flushes and closes the file. Safe to call more than once."""
        if self._handle is None:
            return
        handle, self._handle, self._writer = self._handle, None, None
        try:
            handle.flush()
        except OSError as e:
            raise CsvSinkError(f"Failed to flush CSV file {self._path}") from e
        finally:
            handle.close()
        logger.debug("Closed CSV sink.", path=str(self._path), rows=self.rows_written)

    def __enter__(self) -> "CsvSink":
        return self.open()

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
