# lichess_classifier/core/berserk.py
"""
Finds lichess arena games at 1+0 or 3+0 and records which players berserked.

Berserking halves a player's starting clock, so a side berserked exactly when
its first recorded clock reading is below the initial time of the control.
Only the first two clock samples (white's and black's first moves) matter.
"""
from dataclasses import dataclass
from typing import Optional

from lichess_classifier.core.headers import (outcome_code, parse_rating,
                                             parse_result, parse_termination,
                                             parse_time_control,
                                             termination_code)
from lichess_classifier.core.lifecycle import GameClassifier, GameState
from lichess_classifier.types import BerserkRow, ClassifierVariant, ClockSample


@dataclass(slots=True)
class BerserkScratch:
    white_rating: int = 0
    black_rating: int = 0
    initial_time: int = 0
    result: int = 0
    termination: int = 0
    white_berserked: bool = False
    black_berserked: bool = False

    def berserk_code(self) -> int:
        """0 = neither side, 1 = white only, 2 = black only, 3 = both."""
        return int(self.white_berserked) | int(self.black_berserked) << 1


class BerserkClassifier(GameClassifier[BerserkScratch, BerserkRow]):
    variant = ClassifierVariant.BERSERK
    row_type = BerserkRow
    required_headers = frozenset({"WhiteElo", "BlackElo", "Event", "TimeControl", "Termination", "Result"})

    def new_scratch(self) -> BerserkScratch:
        return BerserkScratch()

    def on_header(self, state: GameState[BerserkScratch], name: str, value: str) -> None:
        scratch = state.scratch
        if name == "WhiteElo":
            scratch.white_rating = parse_rating(name, value)
        elif name == "BlackElo":
            scratch.black_rating = parse_rating(name, value)
        elif name == "Event":
            # we only want arena games (swiss events also say "tournament")
            if self.settings.tournament_marker not in value:
                state.reject(f"not a tournament event: {value!r}")
        elif name == "TimeControl":
            tc = parse_time_control(value)
            if tc.increment > 0 or tc.initial_time not in self.settings.berserk_initial_times:
                state.reject(f"unsupported time control {value!r}")
                return
            scratch.initial_time = tc.initial_time
        elif name == "Termination":
            scratch.termination = termination_code(parse_termination(value))
        elif name == "Result":
            scratch.result = outcome_code(parse_result(value))

    def wants_clock(self, state: GameState[BerserkScratch]) -> bool:
        return state.clock_samples < 2

    def on_clock(self, state: GameState[BerserkScratch], sample: ClockSample) -> None:
        berserked = sample.elapsed_seconds < state.scratch.initial_time
        if sample.ply_index == 0:
            state.scratch.white_berserked = berserked
        else:
            state.scratch.black_berserked = berserked

    def build_row(self, state: GameState[BerserkScratch]) -> Optional[BerserkRow]:
        # both players must have made a move with a clock reading
        if state.clock_samples < 2:
            state.reject(f"only {state.clock_samples} clock samples")
            return None
        scratch = state.scratch
        return BerserkRow(
            white_rating=scratch.white_rating,
            black_rating=scratch.black_rating,
            # only whole-minute controls are accepted, so this is exact
            time_minutes=scratch.initial_time // 60,
            berserk_code=scratch.berserk_code(),
            result=scratch.result,
            termination=scratch.termination,
        )
