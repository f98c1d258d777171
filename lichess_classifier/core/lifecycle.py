# lichess_classifier/core/lifecycle.py
"""
The per-game state machine shared by every classifier variant.

A `GameClassifier` consumes the ordered events of one game at a time:

    begin-game -> header* -> end-headers -> move-comment* -> end-game

It moves through `Idle -> Active -> (Rejected | Finalizing) -> Idle`. All
per-game data lives in a single `GameState` value: the variant's scratch block
(counters, flags, previous clock readings and the row being assembled) plus the
monotonic reject flag. `begin_game` installs a fresh state and `finalize` hands
back the finished row together with a fresh state, so nothing from one game can
leak into the next.

Variants only implement the hooks `on_header`, `on_clock` and `build_row`; the
base class owns ordering, rejection and reset.
"""
import abc
from dataclasses import dataclass, field
from typing import (ClassVar, FrozenSet, Generic, Optional, Set, Tuple, Type,
                    TypeVar)

import structlog

from lichess_classifier.config.settings import ClassifierSettings
from lichess_classifier.core.time_parser import parse_clk_comment_to_seconds
from lichess_classifier.exceptions import GameRecordError, LifecycleError
from lichess_classifier.types import (BeginGame, ClassifierVariant, ClockSample,
                                      CsvRow, Decision, EndGame, EndHeaders,
                                      GameEvent, Header, LifecycleState,
                                      MoveComment, OutputRow)

logger = structlog.get_logger(__name__)

ScratchT = TypeVar("ScratchT")
RowT = TypeVar("RowT", bound=OutputRow)

# Header names a classifier may care about; anything else is ignored.
RECOGNIZED_HEADERS: FrozenSet[str] = frozenset({
    "White", "Black", "WhiteElo", "BlackElo", "WhiteRatingDiff", "BlackRatingDiff",
    "Event", "TimeControl", "Termination", "Result", "UTCDate", "UTCTime",
})


@dataclass(slots=True)
class GameState(Generic[ScratchT]):
    """Everything the classifier knows about the game currently being read."""
    scratch: ScratchT
    lifecycle: LifecycleState = LifecycleState.IDLE
    reject_reason: Optional[str] = None
    seen_headers: Set[str] = field(default_factory=set)
    clock_samples: int = 0
    last_clock_ply: int = 0

    @property
    def rejected(self) -> bool:
        return self.reject_reason is not None

    def reject(self, reason: str) -> None:
        """Marks the game as rejected. The first reason wins; the flag never clears."""
        if self.reject_reason is None:
            self.reject_reason = reason
            self.lifecycle = LifecycleState.REJECTED


class GameClassifier(abc.ABC, Generic[ScratchT, RowT]):
    """
    Base class for the classifier variants.

    Instances are not reentrant: feed them one game at a time from a single
    thread. Each worker owns its own instance.
    """

    variant: ClassVar[ClassifierVariant]
    row_type: ClassVar[Type[CsvRow]]
    # Headers the output row cannot be built without.
    required_headers: ClassVar[FrozenSet[str]] = frozenset()
    # Variants that only project headers let the parser skip the movetext.
    needs_moves: ClassVar[bool] = True

    def __init__(self, settings: ClassifierSettings):
        self._settings = settings
        self._state: GameState[ScratchT] = self._fresh_state()

    # --- Variant hooks ---

    @abc.abstractmethod
    def new_scratch(self) -> ScratchT:
        """Returns the scratch block for a new game."""

    @abc.abstractmethod
    def on_header(self, state: GameState[ScratchT], name: str, value: str) -> None:
        """Handles one recognized header. May raise `HeaderParseError` or call `state.reject`."""

    def wants_clock(self, state: GameState[ScratchT]) -> bool:
        """Whether the next move comment should be parsed at all."""
        return True

    def on_clock(self, state: GameState[ScratchT], sample: ClockSample) -> None:
        """Handles one clock sample. May call `state.reject`."""

    @abc.abstractmethod
    def build_row(self, state: GameState[ScratchT]) -> Optional[RowT]:
        """Runs the end-of-game predicate; returns the row or rejects and returns None."""

    # --- Lifecycle ---

    @property
    def state(self) -> GameState[ScratchT]:
        return self._state

    @property
    def settings(self) -> ClassifierSettings:
        return self._settings

    def _fresh_state(self) -> GameState[ScratchT]:
        return GameState(scratch=self.new_scratch())

    def _require_open(self, event: str) -> None:
        if self._state.lifecycle in (LifecycleState.IDLE, LifecycleState.FINALIZING):
            raise LifecycleError(f"'{event}' received while {self._state.lifecycle.value}")

    def feed(self, event: GameEvent):
        """
        Applies one parse event and returns its effect: a `Decision` for
        `EndHeaders`, the finished row (or None) for `EndGame`, otherwise None.
        """
        if isinstance(event, BeginGame):
            return self.begin_game()
        if isinstance(event, Header):
            return self.header(event.name, event.value)
        if isinstance(event, EndHeaders):
            return self.end_headers()
        if isinstance(event, MoveComment):
            return self.move_comment(event.ply, event.text)
        if isinstance(event, EndGame):
            return self.end_game()
        raise LifecycleError(f"Unknown event {event!r}")

    def begin_game(self) -> None:
        if self._state.lifecycle is not LifecycleState.IDLE:
            logger.warning("Game began before the previous one ended; discarding it.",
                           variant=self.variant.value)
        self._state = self._fresh_state()
        self._state.lifecycle = LifecycleState.ACTIVE

    def header(self, name: str, value: str) -> None:
        self._require_open("header")
        if self._state.rejected or name not in RECOGNIZED_HEADERS:
            return
        self._state.seen_headers.add(name)
        try:
            self.on_header(self._state, name, value)
        except GameRecordError as e:
            self._state.reject(str(e))

    def end_headers(self) -> Decision:
        self._require_open("end-headers")
        state = self._state
        if not state.rejected and self._settings.require_all_headers:
            missing = self.required_headers - state.seen_headers
            if missing:
                state.reject(f"missing headers {sorted(missing)}")
        if state.rejected or not self.needs_moves:
            return Decision.SKIP_MOVES
        return Decision.CONTINUE

    def move_comment(self, ply: int, text: str) -> None:
        """
        Feeds the comment that follows the `ply`-th mainline move. Comments
        before the first move and further comments on an already sampled move
        are ignored.
        """
        self._require_open("move-comment")
        state = self._state
        if state.rejected or ply <= state.last_clock_ply or not self.wants_clock(state):
            return
        try:
            seconds = parse_clk_comment_to_seconds(text, self._settings.clock_pattern)
        except GameRecordError as e:
            state.reject(str(e))
            return
        state.last_clock_ply = ply
        self.on_clock(state, ClockSample(ply_index=state.clock_samples, elapsed_seconds=seconds))
        if not state.rejected:
            state.clock_samples += 1

    def end_game(self) -> Optional[RowT]:
        self._require_open("end-game")
        row, self._state = self.finalize(self._state)
        return row

    def finalize(self, state: GameState[ScratchT]) -> Tuple[Optional[RowT], GameState[ScratchT]]:
        """Takes the finished row out of `state` and returns it with a fresh state."""
        row: Optional[RowT] = None
        if not state.rejected:
            state.lifecycle = LifecycleState.FINALIZING
            try:
                row = self.build_row(state)
            except GameRecordError as e:
                state.reject(str(e))
            if state.rejected:
                row = None
        if row is None:
            logger.debug("Game rejected.", variant=self.variant.value, reason=state.reject_reason)
        return row, self._fresh_state()
