# tests/conftest.py
from typing import Dict, List, Optional

import pytest

from lichess_classifier.config.settings import ClassifierSettings
from lichess_classifier.types import Decision


def clk(seconds: int) -> str:
    hours, rest = divmod(seconds, 3600)
    minutes, secs = divmod(rest, 60)
    return f"[%clk {hours}:{minutes:02d}:{secs:02d}]"


@pytest.fixture
def classifier_settings():
    return ClassifierSettings()


@pytest.fixture
def feed_game():
    """Feeds one synthetic game (headers + one clock comment per ply) to a classifier."""
    def _feed(classifier, headers: Dict[str, str], clocks: Optional[List[int]] = None):
        classifier.begin_game()
        for name, value in headers.items():
            classifier.header(name, value)
        if classifier.end_headers() is Decision.CONTINUE:
            for ply, seconds in enumerate(clocks or [], start=1):
                classifier.move_comment(ply, clk(seconds))
        return classifier.end_game()
    return _feed


@pytest.fixture
def make_pgn():
    """Renders headers and a list of per-ply clock readings as lichess-style PGN text."""
    def _make(headers: Dict[str, str], clocks: Optional[List[int]] = None, result: str = "1-0") -> str:
        sans = ["e4", "e5", "Nf3", "Nc6", "Bc4", "Bc5", "c3", "Nf6", "d4", "exd4"]
        lines = [f'[{name} "{value}"]' for name, value in headers.items()]
        tokens = []
        for ply, seconds in enumerate(clocks or []):
            if ply % 2 == 0:
                tokens.append(f"{ply // 2 + 1}.")
            tokens.append(f"{sans[ply]} {{ {clk(seconds)} }}")
        tokens.append(result)
        return "\n".join(lines) + "\n\n" + " ".join(tokens) + "\n\n"
    return _make


@pytest.fixture
def berserk_headers():
    return {
        "Event": "Rated Bullet tournament https://lichess.org/tournament/abc",
        "White": "alice",
        "Black": "bob",
        "Result": "1-0",
        "WhiteElo": "1800",
        "BlackElo": "1750",
        "TimeControl": "60+0",
        "Termination": "Normal",
    }


@pytest.fixture
def blitz_headers():
    return {
        "Event": "Rated Blitz game",
        "White": "A",
        "Black": "B",
        "Result": "1-0",
        "UTCDate": "2020.01.01",
        "UTCTime": "00:00:00",
        "WhiteElo": "1500",
        "BlackElo": "1400",
        "WhiteRatingDiff": "8",
        "BlackRatingDiff": "-8",
    }


@pytest.fixture
def time_odds_headers():
    return {
        "Event": "Rated Blitz tournament https://lichess.org/tournament/xyz",
        "White": "carol",
        "Black": "dave",
        "Result": "0-1",
        "WhiteElo": "2000",
        "BlackElo": "1990",
        "TimeControl": "180+2",
        "Termination": "Time forfeit",
    }
