# tests/core/test_visitor.py
import io

import chess.pgn

from lichess_classifier.core.berserk import BerserkClassifier
from lichess_classifier.core.blitz import BlitzClassifier
from lichess_classifier.core.time_odds import TimeOddsClassifier
from lichess_classifier.core.visitor import visitor_factory
from lichess_classifier.types import ClassifiedGame


def read_all(pgn_text, classifier):
    handle = io.StringIO(pgn_text)
    make_visitor = visitor_factory(classifier)
    games = []
    while True:
        game = chess.pgn.read_game(handle, Visitor=make_visitor)
        if game is None:
            return games
        games.append(game)


def test_streams_every_game_in_order(classifier_settings, berserk_headers, make_pgn):
    pgn = (
        make_pgn(berserk_headers, [30, 60, 25, 55])
        + make_pgn({**berserk_headers, "TimeControl": "60+1"}, [30, 30])
        + make_pgn({**berserk_headers, "WhiteElo": "1900"}, [60, 30])
    )
    games = read_all(pgn, BerserkClassifier(classifier_settings))

    assert len(games) == 3
    assert all(isinstance(game, ClassifiedGame) for game in games)
    assert [game.accepted for game in games] == [True, False, True]
    assert games[0].row.berserk_code == 1
    assert games[2].row.berserk_code == 2
    assert games[2].row.white_rating == 1900


def test_empty_input_yields_nothing(classifier_settings):
    assert read_all("", BerserkClassifier(classifier_settings)) == []


def test_variation_comments_are_ignored(classifier_settings, berserk_headers, make_pgn):
    header_block = make_pgn(berserk_headers).split("\n\n")[0]
    movetext = (
        "1. e4 { [%clk 0:01:00] } "
        "( 1. d4 { [%clk 0:00:10] } 1... d5 { [%clk 0:00:05] } ) "
        "1... e5 { [%clk 0:00:30] } 2. Nf3 { [%clk 0:00:59] } 1-0"
    )
    games = read_all(f"{header_block}\n\n{movetext}\n\n", BerserkClassifier(classifier_settings))
    assert games[0].row.berserk_code == 2


def test_comment_before_first_move_is_ignored(classifier_settings, berserk_headers, make_pgn):
    header_block = make_pgn(berserk_headers).split("\n\n")[0]
    movetext = "{ [%clk 0:00:01] } 1. e4 { [%clk 0:01:00] } 1... e5 { [%clk 0:01:00] } 1-0"
    games = read_all(f"{header_block}\n\n{movetext}\n\n", BerserkClassifier(classifier_settings))
    assert games[0].row.berserk_code == 0


def test_illegal_move_rejects_only_that_game(classifier_settings, berserk_headers, make_pgn):
    header_block = make_pgn(berserk_headers).split("\n\n")[0]
    broken = f"{header_block}\n\n1. e4 {{ [%clk 0:00:30] }} 1... Ke4 {{ [%clk 0:00:30] }} 1-0\n\n"
    pgn = broken + make_pgn(berserk_headers, [30, 30])
    games = read_all(pgn, BerserkClassifier(classifier_settings))
    assert [game.accepted for game in games] == [False, True]


def test_blitz_ignores_movetext(classifier_settings, blitz_headers, make_pgn):
    header_block = make_pgn(blitz_headers).split("\n\n")[0]
    with_moves = make_pgn(blitz_headers, [300, 300, 299, 298])
    with_garbage = f"{header_block}\n\n1. Qxh7 {{ nonsense }} 1... Kz9 1-0\n\n"
    games = read_all(with_moves + with_garbage, BlitzClassifier(classifier_settings))
    assert len(games) == 2
    assert games[0].row == games[1].row
    assert games[0].row.csv_values() == games[1].row.csv_values()


def test_time_odds_from_pgn(classifier_settings, time_odds_headers, make_pgn):
    pgn = (
        make_pgn(time_odds_headers, [90, 180, 91, 181], result="0-1")
        + make_pgn(time_odds_headers, [150, 150], result="0-1")
    )
    games = read_all(pgn, TimeOddsClassifier(classifier_settings))
    assert games[0].row.white_initial_time == 90
    assert games[0].row.tournament is True
    assert games[1].row is None
