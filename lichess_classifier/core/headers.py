# lichess_classifier/core/headers.py
"""
Pure parsers turning raw PGN header values into typed values.

Every parser either returns a typed value or raises `HeaderParseError`. The
classifiers treat both a malformed and an unsupported value the same way: the
game is skipped.
"""
import re

from lichess_classifier.exceptions import HeaderParseError
from lichess_classifier.types import PgnResult, Termination, TimeControl

_UNSIGNED_RE = re.compile(r"\+?[0-9]+")
_SIGNED_RE = re.compile(r"[+-]?[0-9]+")

U16_MAX = 0xFFFF
U32_MAX = 0xFFFFFFFF
I16_MIN, I16_MAX = -0x8000, 0x7FFF


def _parse_unsigned(name: str, value: str, upper: int) -> int:
    if not _UNSIGNED_RE.fullmatch(value):
        raise HeaderParseError(name, value, "not an unsigned integer")
    number = int(value)
    if number > upper:
        raise HeaderParseError(name, value, f"exceeds {upper}")
    return number


def parse_rating(name: str, value: str) -> int:
    """Parses WhiteElo/BlackElo. Lichess writes `?` for unrated players, which fails."""
    return _parse_unsigned(name, value, U16_MAX)


def parse_rating_diff(name: str, value: str) -> int:
    """Parses WhiteRatingDiff/BlackRatingDiff, e.g. `+8` or `-12`."""
    if not _SIGNED_RE.fullmatch(value):
        raise HeaderParseError(name, value, "not an integer")
    number = int(value)
    if not I16_MIN <= number <= I16_MAX:
        raise HeaderParseError(name, value, "out of range")
    return number


def parse_time_control(value: str) -> TimeControl:
    """
    Parses a TimeControl header of the form `initial+increment` (both seconds).

    Raises:
        HeaderParseError: For any other form, including lichess' `-` for
            correspondence games.
    """
    initial, sep, increment = value.partition("+")
    if not sep:
        raise HeaderParseError("TimeControl", value, "expected time control with form time+inc")
    return TimeControl(
        initial_time=_parse_unsigned("TimeControl", initial, U32_MAX),
        increment=_parse_unsigned("TimeControl", increment, U32_MAX),
    )


def parse_termination(value: str) -> Termination:
    try:
        return Termination(value)
    except ValueError:
        raise HeaderParseError("Termination", value, "unexpected termination type") from None


def parse_result(value: str) -> PgnResult:
    try:
        return PgnResult(value)
    except ValueError:
        raise HeaderParseError("Result", value, "unexpected result type") from None


def termination_code(termination: Termination) -> int:
    """
    Maps the two accepted terminations to their row code: Normal is 0, Time
    forfeit is 1. Aborted games and rules violations raise.
    """
    if termination is Termination.NORMAL:
        return 0
    if termination is Termination.TIME_FORFEIT:
        return 1
    raise HeaderParseError("Termination", termination.value, "termination not accepted")


def outcome_code(result: PgnResult) -> int:
    """Maps a finished result to 0 (black won), 1 (draw) or 2 (white won)."""
    codes = {PgnResult.BLACK_WIN: 0, PgnResult.DRAW: 1, PgnResult.WHITE_WIN: 2}
    if result not in codes:
        raise HeaderParseError("Result", result.value, "game unfinished")
    return codes[result]
