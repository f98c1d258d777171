# lichess_classifier/core/time_parser.py
"""
Provides a pure, stateless utility function to parse PGN clock annotations.

Lichess attaches the remaining clock time to every move as `[%clk H:MM:SS]`,
possibly next to other commands such as `[%eval 0.17]`. The matcher is passed
in by the caller rather than read from module state, so each classifier owns
the pattern it was configured with.
"""

from typing import Pattern

from lichess_classifier.exceptions import ClockParseError


def parse_clk_comment_to_seconds(comment: str, pattern: Pattern[str]) -> int:
    """
    Parses a PGN comment to the whole seconds remaining on the mover's clock.

    Only the first clock command in the comment is read.

    Example annotations handled:
    - "[%clk 0:00:30]"
    - "[%eval 0.17] [%clk 1:30:05]"

    Args:
        comment: The PGN comment text.
        pattern: A compiled regex with the named groups h, m and s.

    Returns:
        The total seconds remaining.

    Raises:
        ClockParseError: If the comment has no clock command, or the minutes or
            seconds are out of range.
    """
    match = pattern.search(comment)
    if not match:
        raise ClockParseError(f"no clock command in comment {comment!r}")

    hours = int(match.group("h"))
    minutes = int(match.group("m"))
    seconds = int(match.group("s"))

    # Validate that minutes and seconds are within a valid range.
    if minutes >= 60 or seconds >= 60:
        raise ClockParseError(f"clock out of range in comment {comment!r}")

    return hours * 3600 + minutes * 60 + seconds
