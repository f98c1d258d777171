# lichess_classifier/core/visitor.py
"""
Adapts `python-chess`'s streaming PGN parser to the classifier event model.

`chess.pgn.read_game` drives a `BaseVisitor` through callbacks; this visitor
translates each callback into the matching classifier call and hands the
classifier's answer back to the parser (e.g. `SKIP` after the headers of a
rejected game). Side variations are never entered, so comments inside them
can not be mistaken for mainline clock readings.
"""
import functools
from typing import Callable, Optional

import chess
import chess.pgn
import structlog

from lichess_classifier.core.lifecycle import GameClassifier
from lichess_classifier.types import ClassifiedGame, Decision, OutputRow

logger = structlog.get_logger(__name__)


class ClassifierVisitor(chess.pgn.BaseVisitor[ClassifiedGame]):
    """Feeds one game into a classifier; `result()` wraps the accepted row, if any."""

    def __init__(self, classifier: GameClassifier):
        self._classifier = classifier
        self._ply = 0
        self._row: Optional[OutputRow] = None

    def begin_game(self) -> None:
        self._ply = 0
        self._row = None
        self._classifier.begin_game()

    def visit_header(self, tagname: str, tagvalue: str) -> None:
        self._classifier.header(tagname, tagvalue)

    def end_headers(self) -> Optional[chess.pgn.SkipType]:
        if self._classifier.end_headers() is Decision.SKIP_MOVES:
            return chess.pgn.SKIP
        return None

    def visit_move(self, board: chess.Board, move: chess.Move) -> None:
        self._ply += 1

    def visit_comment(self, comment: str) -> None:
        text = comment if isinstance(comment, str) else " ".join(comment)
        self._classifier.move_comment(self._ply, text)

    def begin_variation(self) -> Optional[chess.pgn.SkipType]:
        return chess.pgn.SKIP

    def handle_error(self, error: Exception) -> None:
        # Illegal or unreadable moves: skip the game rather than the file.
        logger.debug("Unparsable movetext.", error=str(error), ply=self._ply)
        self._classifier.state.reject(f"unparsable movetext: {error}")

    def end_game(self) -> None:
        self._row = self._classifier.end_game()

    def result(self) -> ClassifiedGame:
        return ClassifiedGame(row=self._row)


def visitor_factory(classifier: GameClassifier) -> Callable[[], ClassifierVisitor]:
    """Returns the zero-argument factory `chess.pgn.read_game(Visitor=...)` expects."""
    return functools.partial(ClassifierVisitor, classifier)
