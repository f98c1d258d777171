# lichess_classifier/core/time_odds.py
"""
Finds lichess games where one player started with more time than the other.

The vast majority of these come from berserking, but the classifier does not
require a tournament; it only records whether the Event looked like one. Games
are excluded when:

- both sides' first clock readings are equal, even if they differ from the
  stated control;
- neither side's first reading differs from the stated control;
- a clock later grows by more than one increment (plus a rounding tolerance),
  which means time was granted mid-game.

Clock samples are evaluated as they arrive, so a game can be rejected long
before its last move.
"""
from dataclasses import dataclass
from typing import Optional

from lichess_classifier.core.headers import (outcome_code, parse_rating,
                                             parse_result, parse_termination,
                                             parse_time_control,
                                             termination_code)
from lichess_classifier.core.lifecycle import GameClassifier, GameState
from lichess_classifier.types import ClassifierVariant, ClockSample, TimeOddsRow


@dataclass(slots=True)
class TimeOddsScratch:
    white_rating: int = 0
    black_rating: int = 0
    initial_time: int = 0
    increment: int = 0
    result: int = 0
    termination: int = 0
    tournament: bool = False
    white_initial_time: int = 0
    black_initial_time: int = 0
    white_time_odds: bool = False
    black_time_odds: bool = False
    white_prev_time: int = 0
    black_prev_time: int = 0


class TimeOddsClassifier(GameClassifier[TimeOddsScratch, TimeOddsRow]):
    variant = ClassifierVariant.TIME_ODDS
    row_type = TimeOddsRow
    required_headers = frozenset({"WhiteElo", "BlackElo", "TimeControl", "Termination", "Result"})

    def new_scratch(self) -> TimeOddsScratch:
        return TimeOddsScratch()

    def on_header(self, state: GameState[TimeOddsScratch], name: str, value: str) -> None:
        scratch = state.scratch
        if name == "WhiteElo":
            scratch.white_rating = parse_rating(name, value)
        elif name == "BlackElo":
            scratch.black_rating = parse_rating(name, value)
        elif name == "Event":
            scratch.tournament = self.settings.tournament_marker in value
        elif name == "TimeControl":
            tc = parse_time_control(value)
            scratch.initial_time = tc.initial_time
            scratch.increment = tc.increment
        elif name == "Termination":
            scratch.termination = termination_code(parse_termination(value))
        elif name == "Result":
            scratch.result = outcome_code(parse_result(value))

    def on_clock(self, state: GameState[TimeOddsScratch], sample: ClockSample) -> None:
        scratch = state.scratch
        t = sample.elapsed_seconds
        i = sample.ply_index

        if i == 0:
            scratch.white_initial_time = t
            scratch.white_time_odds = t != scratch.initial_time
            scratch.white_prev_time = t
            return

        if i == 1:
            # equal starting clocks are not odds, whatever the stated control says
            if t == scratch.white_initial_time:
                state.reject("both sides started with the same time")
                return
            scratch.black_initial_time = t
            scratch.black_time_odds = t != scratch.initial_time
            scratch.black_prev_time = t
            return

        if i == 2 and not (scratch.white_time_odds or scratch.black_time_odds):
            state.reject("neither side's start differs from the time control")
            return

        limit_slack = scratch.increment + self.settings.rounding_tolerance_seconds
        if i % 2 == 0:
            if t > scratch.white_prev_time + limit_slack:
                state.reject(f"white clock grew mid-game at sample {i}")
                return
            scratch.white_prev_time = t
        else:
            if t > scratch.black_prev_time + limit_slack:
                state.reject(f"black clock grew mid-game at sample {i}")
                return
            scratch.black_prev_time = t

    def build_row(self, state: GameState[TimeOddsScratch]) -> Optional[TimeOddsRow]:
        # only include games where both players made at least one move
        if state.clock_samples < 2:
            state.reject(f"only {state.clock_samples} clock samples")
            return None
        s = state.scratch
        return TimeOddsRow(
            white_rating=s.white_rating,
            black_rating=s.black_rating,
            white_initial_time=s.white_initial_time,
            black_initial_time=s.black_initial_time,
            initial_time=s.initial_time,
            increment=s.increment,
            result=s.result,
            termination=s.termination,
            tournament=s.tournament,
        )
