# lichess_classifier/core/blitz.py
"""
Projects the headers of rated lichess blitz games into flat rows.

This variant never looks at the movetext: `needs_moves` is False, so the parser
skips straight to the next game once the headers are read.
"""
from dataclasses import dataclass
from typing import Optional

from lichess_classifier.core.headers import (parse_rating, parse_rating_diff,
                                             parse_result)
from lichess_classifier.core.lifecycle import GameClassifier, GameState
from lichess_classifier.types import BlitzRow, ClassifierVariant, PgnResult

_RESULT_SIGN = {PgnResult.WHITE_WIN: 1, PgnResult.DRAW: 0, PgnResult.BLACK_WIN: -1}


@dataclass(slots=True)
class BlitzScratch:
    white: str = ""
    black: str = ""
    result: int = 0
    utc_date: str = ""
    utc_time: str = ""
    white_elo: int = 0
    black_elo: int = 0
    white_rating_diff: int = 0
    black_rating_diff: int = 0


class BlitzClassifier(GameClassifier[BlitzScratch, BlitzRow]):
    variant = ClassifierVariant.BLITZ
    row_type = BlitzRow
    required_headers = frozenset({
        "Event", "White", "Black", "Result", "UTCDate", "UTCTime",
        "WhiteElo", "BlackElo", "WhiteRatingDiff", "BlackRatingDiff",
    })
    needs_moves = False

    def new_scratch(self) -> BlitzScratch:
        return BlitzScratch()

    def on_header(self, state: GameState[BlitzScratch], name: str, value: str) -> None:
        scratch = state.scratch
        if name == "Event":
            if value != self.settings.blitz_event:
                state.reject(f"not a rated blitz game: {value!r}")
        elif name == "Result":
            result = parse_result(value)
            if result not in _RESULT_SIGN:
                state.reject("game unfinished")
                return
            scratch.result = _RESULT_SIGN[result]
        elif name in ("WhiteElo", "BlackElo"):
            rating = parse_rating(name, value)
            if name == "WhiteElo":
                scratch.white_elo = rating
            else:
                scratch.black_elo = rating
        elif name in ("WhiteRatingDiff", "BlackRatingDiff"):
            diff = parse_rating_diff(name, value)
            if name == "WhiteRatingDiff":
                scratch.white_rating_diff = diff
            else:
                scratch.black_rating_diff = diff
        elif name == "White":
            scratch.white = value
        elif name == "Black":
            scratch.black = value
        elif name == "UTCDate":
            scratch.utc_date = value
        elif name == "UTCTime":
            scratch.utc_time = value

    def build_row(self, state: GameState[BlitzScratch]) -> Optional[BlitzRow]:
        s = state.scratch
        return BlitzRow(
            white=s.white, black=s.black, result=s.result,
            utc_date=s.utc_date, utc_time=s.utc_time,
            white_elo=s.white_elo, black_elo=s.black_elo,
            white_rating_diff=s.white_rating_diff, black_rating_diff=s.black_rating_diff,
        )
