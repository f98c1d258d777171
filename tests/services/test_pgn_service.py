# tests/services/test_pgn_service.py
import bz2
import gzip
from pathlib import Path

import pytest
import zstandard

from lichess_classifier.core.berserk import BerserkClassifier
from lichess_classifier.exceptions import PgnSourceError
from lichess_classifier.services.pgn_service import PgnService
from lichess_classifier.types import Compression

PATTERNS = ["*.pgn", "*.pgn.bz2", "*.pgn.zst", "*.pgn.gz"]


@pytest.fixture
def service():
    return PgnService()


@pytest.fixture
def two_games(berserk_headers, make_pgn):
    return (
        make_pgn(berserk_headers, [30, 30])
        + make_pgn({**berserk_headers, "Event": "Rated Bullet game"}, [30, 30])
    )


@pytest.mark.parametrize("name, compression", [
    ("games.pgn", Compression.NONE),
    ("games.pgn.bz2", Compression.BZIP2),
    ("games.pgn.zst", Compression.ZSTD),
    ("games.pgn.gz", Compression.GZIP),
    ("GAMES.PGN.ZST", Compression.ZSTD),
])
def test_compression_from_extension(name, compression):
    assert PgnService.compression_for(Path(name)) is compression


@pytest.mark.parametrize("name, expected", [
    ("lichess_db_standard_rated_2013-01.pgn.zst", "lichess_db_standard_rated_2013-01.pgn.csv"),
    ("a.pgn.bz2", "a.pgn.csv"),
    ("a.pgn.gz", "a.pgn.csv"),
    ("a.pgn", "a.csv"),
])
def test_csv_path_for(tmp_path, name, expected):
    assert PgnService.csv_path_for(Path("/data") / name, tmp_path) == tmp_path / expected


def test_plain_and_compressed_twins_get_distinct_csv_files(tmp_path, service):
    for name in ["a.pgn", "a.pgn.bz2"]:
        (tmp_path / name).write_bytes(b"")
    found = service.discover(tmp_path, PATTERNS)
    assert [PgnService.csv_path_for(path, tmp_path).name for path in found] == ["a.csv", "a.pgn.csv"]


def test_discover_lists_pgn_files_sorted_without_recursion(tmp_path, service):
    for name in ["b.pgn.zst", "a.pgn", "c.pgn.bz2", "d.pgn.gz", "notes.txt", "e.csv"]:
        (tmp_path / name).write_bytes(b"")
    (tmp_path / "nested").mkdir()
    (tmp_path / "nested" / "f.pgn").write_bytes(b"")
    (tmp_path / "dir.pgn").mkdir()

    found = service.discover(tmp_path, PATTERNS)
    assert [path.name for path in found] == ["a.pgn", "b.pgn.zst", "c.pgn.bz2", "d.pgn.gz"]


def test_discover_empty_directory(tmp_path, service):
    assert service.discover(tmp_path, PATTERNS) == []


def _write(path: Path, text: str) -> Path:
    data = text.encode("utf-8")
    if path.name.endswith(".bz2"):
        path.write_bytes(bz2.compress(data))
    elif path.name.endswith(".gz"):
        with gzip.open(path, "wb") as handle:
            handle.write(data)
    elif path.name.endswith(".zst"):
        path.write_bytes(zstandard.ZstdCompressor().compress(data))
    else:
        path.write_bytes(data)
    return path


@pytest.mark.parametrize("name", ["games.pgn", "games.pgn.bz2", "games.pgn.zst", "games.pgn.gz"])
def test_stream_games_from_every_compression(tmp_path, service, classifier_settings, two_games, name):
    path = _write(tmp_path / name, two_games)
    games = list(service.stream_games(path, BerserkClassifier(classifier_settings)))
    assert [game.accepted for game in games] == [True, False]
    assert games[0].row.berserk_code == 3


def test_stream_concatenated_streams(tmp_path, service, classifier_settings, berserk_headers, make_pgn):
    first = make_pgn(berserk_headers, [30, 60]).encode()
    second = make_pgn(berserk_headers, [60, 30]).encode()

    zst = tmp_path / "multi.pgn.zst"
    compressor = zstandard.ZstdCompressor()
    zst.write_bytes(compressor.compress(first) + compressor.compress(second))
    bz = tmp_path / "multi.pgn.bz2"
    bz.write_bytes(bz2.compress(first) + bz2.compress(second))

    for path in (zst, bz):
        games = list(service.stream_games(path, BerserkClassifier(classifier_settings)))
        assert [game.row.berserk_code for game in games] == [1, 2]


def test_missing_file_raises(tmp_path, service, classifier_settings):
    with pytest.raises(PgnSourceError):
        list(service.stream_games(tmp_path / "missing.pgn", BerserkClassifier(classifier_settings)))


@pytest.mark.parametrize("name", ["broken.pgn.bz2", "broken.pgn.gz", "broken.pgn.zst"])
def test_corrupt_archive_raises(tmp_path, service, classifier_settings, name):
    (tmp_path / name).write_bytes(b"this is not compressed data at all" * 10)
    with pytest.raises(PgnSourceError):
        list(service.stream_games(tmp_path / name, BerserkClassifier(classifier_settings)))


def test_invalid_utf8_is_replaced(tmp_path, service, classifier_settings, berserk_headers, make_pgn):
    text = make_pgn({**berserk_headers, "White": "caf\udce9"}, [30, 30])
    path = tmp_path / "latin.pgn"
    path.write_bytes(text.encode("utf-8", errors="surrogateescape"))
    games = list(service.stream_games(path, BerserkClassifier(classifier_settings)))
    assert games[0].accepted
