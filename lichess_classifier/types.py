# lichess_classifier/types.py
"""
A central module for shared data structures: enums, parse events, typed header
values and the output row schemas of every classifier variant.
"""

from dataclasses import dataclass, field, fields
from enum import Enum
from typing import List, Optional, Tuple, TypeAlias, Union


class ClassifierVariant(str, Enum):
    BERSERK = "berserk"; BLITZ = "blitz"; TIME_ODDS = "time-odds"


class Compression(str, Enum):
    NONE = "none"; BZIP2 = "bz2"; ZSTD = "zst"; GZIP = "gz"


class LifecycleState(str, Enum):
    IDLE = "Idle"; ACTIVE = "Active"; REJECTED = "Rejected"; FINALIZING = "Finalizing"


class Decision(str, Enum):
    """The answer to `end-headers`: keep reading the movetext or skip it."""
    CONTINUE = "continue"; SKIP_MOVES = "skip-moves"


class Termination(str, Enum):
    """The possible values of the Termination header in lichess PGNs."""
    NORMAL = "Normal"
    TIME_FORFEIT = "Time forfeit"
    ABANDONED = "Abandoned"
    RULES_INFRACTION = "Rules infraction"
    UNTERMINATED = "Unterminated"
    UNKNOWN = "Unknown"


class PgnResult(str, Enum):
    WHITE_WIN = "1-0"; DRAW = "1/2-1/2"; BLACK_WIN = "0-1"; OTHER = "*"


@dataclass(frozen=True, slots=True)
class TimeControl:
    """
    A time control header like `300+0`. This is the only supported format; the
    PGN standard allows several others (sudden death, moves-per-period, ...).
    """
    initial_time: int
    increment: int


@dataclass(frozen=True, slots=True)
class ClockSample:
    ply_index: int; elapsed_seconds: int


# --- Parse events, in the order a game delivers them ---

@dataclass(frozen=True, slots=True)
class BeginGame:
    pass

@dataclass(frozen=True, slots=True)
class Header:
    name: str; value: str

@dataclass(frozen=True, slots=True)
class EndHeaders:
    pass

@dataclass(frozen=True, slots=True)
class MoveComment:
    ply: int; text: str

@dataclass(frozen=True, slots=True)
class EndGame:
    pass

GameEvent: TypeAlias = Union[BeginGame, Header, EndHeaders, MoveComment, EndGame]


# --- Output rows. Field order is the CSV column order. ---

class CsvRow:
    """Mixin giving row dataclasses their CSV header and cell rendering."""

    @classmethod
    def csv_columns(cls) -> List[str]:
        return [f.name for f in fields(cls)]

    def csv_values(self) -> List[str]:
        values = []
        for f in fields(self):
            value = getattr(self, f.name)
            # Booleans are written lowercase: true/false.
            values.append(str(value).lower() if isinstance(value, bool) else str(value))
        return values


@dataclass(frozen=True, slots=True)
class BerserkRow(CsvRow):
    white_rating: int
    black_rating: int
    time_minutes: int
    berserk_code: int
    result: int
    termination: int


@dataclass(frozen=True, slots=True)
class BlitzRow(CsvRow):
    white: str
    black: str
    result: int
    utc_date: str
    utc_time: str
    white_elo: int
    black_elo: int
    white_rating_diff: int
    black_rating_diff: int


@dataclass(frozen=True, slots=True)
class TimeOddsRow(CsvRow):
    white_rating: int
    black_rating: int
    white_initial_time: int
    black_initial_time: int
    initial_time: int
    increment: int
    result: int
    termination: int
    tournament: bool


OutputRow: TypeAlias = Union[BerserkRow, BlitzRow, TimeOddsRow]


# --- Run reporting ---

@dataclass(slots=True)
class FileReport:
    """What happened to a single input file."""
    source: str
    sink: Optional[str] = None
    games_seen: int = 0
    games_accepted: int = 0
    elapsed_seconds: float = 0.0
    error: Optional[str] = None

    @property
    def games_rejected(self) -> int:
        return self.games_seen - self.games_accepted

    @property
    def failed(self) -> bool:
        return self.error is not None


@dataclass(slots=True)
class RunReport:
    files: List[FileReport] = field(default_factory=list)
    elapsed_seconds: float = 0.0

    @property
    def failed_files(self) -> List[FileReport]:
        return [report for report in self.files if report.failed]

    @property
    def totals(self) -> Tuple[int, int]:
        """(games seen, games accepted) over all files."""
        return (
            sum(report.games_seen for report in self.files),
            sum(report.games_accepted for report in self.files),
        )


@dataclass(frozen=True, slots=True)
class ClassifiedGame:
    """One parsed game; `row` is None when the classifier rejected it."""
    row: Optional[OutputRow]

    @property
    def accepted(self) -> bool:
        return self.row is not None
