# lichess_classifier/services/pgn_service.py
"""
Provides a service for handling all filesystem interactions with PGN files.

This module is a stateless adapter to the filesystem: it finds the PGN files of
a directory, picks a decompressor from the file extension, and streams games
through a classifier with `python-chess`. Lichess dumps are distributed as
`.pgn.zst` (formerly `.pgn.bz2`); plain and gzipped files are accepted as well.
"""

import bz2
import gzip
import io
from contextlib import contextmanager
from pathlib import Path
from typing import BinaryIO, Callable, Dict, Iterator, List, Sequence, TextIO

import chess.pgn
import structlog
import zstandard

from lichess_classifier.core.lifecycle import GameClassifier
from lichess_classifier.core.visitor import visitor_factory
from lichess_classifier.exceptions import PgnSourceError
from lichess_classifier.types import ClassifiedGame, Compression

logger = structlog.get_logger(__name__)

# Errors a decompressor or the underlying file can raise mid-stream.
_READ_ERRORS = (OSError, EOFError, zstandard.ZstdError)


def _open_zstd(raw: BinaryIO) -> BinaryIO:
    # read_across_frames handles archives made by concatenating .zst files.
    return zstandard.ZstdDecompressor().stream_reader(raw, read_across_frames=True)


class PgnService:
    """A stateless service for PGN discovery, decompression and game streaming."""

    _SUFFIX_COMPRESSION: Dict[str, Compression] = {
        ".bz2": Compression.BZIP2,
        ".zst": Compression.ZSTD,
        ".gz": Compression.GZIP,
    }

    # One decoder constructor per compression; each wraps the raw file handle.
    _DECODERS: Dict[Compression, Callable[[BinaryIO], BinaryIO]] = {
        Compression.NONE: lambda raw: raw,
        # BZ2File reads multi-stream archives (pbzip2 output) to the end.
        Compression.BZIP2: lambda raw: bz2.BZ2File(raw),
        Compression.ZSTD: _open_zstd,
        Compression.GZIP: lambda raw: gzip.GzipFile(fileobj=raw),
    }

    @classmethod
    def compression_for(cls, path: Path) -> Compression:
        """Selects the decompressor from the last file extension."""
        return cls._SUFFIX_COMPRESSION.get(path.suffix.lower(), Compression.NONE)

    @classmethod
    def csv_path_for(cls, pgn_path: Path, csv_dir: Path) -> Path:
        """
        Replaces only the last extension: `games.pgn` becomes `games.csv`,
        `games.pgn.zst` becomes `games.pgn.csv`, so `games.pgn` and
        `games.pgn.zst` side by side never share a sink.
        """
        return csv_dir / pgn_path.with_suffix(".csv").name

    def discover(self, pgn_dir: Path, patterns: Sequence[str]) -> List[Path]:
        """
        Lists the PGN files directly inside `pgn_dir` (no recursion), sorted by
        name, each at most once even if several patterns match it.
        """
        found = {path for pattern in patterns for path in pgn_dir.glob(pattern) if path.is_file()}
        logger.debug("Discovered PGN files.", directory=str(pgn_dir), count=len(found))
        return sorted(found)

    @contextmanager
    def open_text(self, path: Path) -> Iterator[TextIO]:
        """
        Opens a PGN file, decompressing it according to its extension.

        Raises:
            PgnSourceError: If the file cannot be opened.
        """
        compression = self.compression_for(path)
        try:
            raw = path.open("rb")
        except OSError as e:
            raise PgnSourceError(f"Could not open PGN source {path}: {e}") from e

        try:
            decoded = self._DECODERS[compression](raw)
            with io.TextIOWrapper(decoded, encoding="utf-8", errors="replace") as text:
                yield text
        except _READ_ERRORS as e:
            raise PgnSourceError(f"Could not read PGN source {path}: {e}") from e
        finally:
            raw.close()

    def stream_games(self, path: Path, classifier: GameClassifier) -> Iterator[ClassifiedGame]:
        """
        Streams every game of `path` through `classifier`, one at a time.

        This approach is memory-efficient: games are parsed with
        `chess.pgn.read_game`, and the classifier tells the parser to skip the
        movetext of games it already rejected.

        Yields:
            A `ClassifiedGame` per game, in file order.

        Raises:
            PgnSourceError: If the file cannot be opened, read or decompressed.
        """
        make_visitor = visitor_factory(classifier)
        with self.open_text(path) as handle:
            while True:
                try:
                    game = chess.pgn.read_game(handle, Visitor=make_visitor)
                except _READ_ERRORS as e:
                    raise PgnSourceError(f"Failed to read games from {path}: {e}") from e
                if game is None:
                    break  # End of file
                yield game
