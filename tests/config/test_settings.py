# tests/config/test_settings.py
import re

import pytest
from pydantic import ValidationError

from lichess_classifier.config.settings import (DEFAULT_CLOCK_PATTERN, ClassifierSettings,
                                                RunConfig, Settings)
from lichess_classifier.types import ClassifierVariant


def test_classifier_defaults():
    defaults = ClassifierSettings()
    assert defaults.clock_pattern.pattern == DEFAULT_CLOCK_PATTERN.pattern
    assert defaults.rounding_tolerance_seconds == 1
    assert defaults.berserk_initial_times == [60, 180]
    assert defaults.tournament_marker == "tournament"
    assert defaults.blitz_event == "Rated Blitz game"
    assert defaults.require_all_headers is True


def test_clock_pattern_needs_named_groups():
    with pytest.raises(ValidationError):
        ClassifierSettings(clock_pattern=re.compile(r"\[%clk (\d+):(\d+):(\d+)\]"))


def test_clock_pattern_accepts_string():
    custom = ClassifierSettings(clock_pattern=r"(?P<h>\d+)h(?P<m>\d+)m(?P<s>\d+)s")
    assert custom.clock_pattern.search("1h02m03s")


@pytest.mark.parametrize("times", [[90], [0], [-60]])
def test_berserk_times_must_be_whole_minutes(times):
    with pytest.raises(ValidationError):
        ClassifierSettings(berserk_initial_times=times)


def test_negative_tolerance_is_invalid():
    with pytest.raises(ValidationError):
        ClassifierSettings(rounding_tolerance_seconds=-1)


def test_run_config_rejects_zero_workers(tmp_path):
    with pytest.raises(ValidationError):
        RunConfig(variant=ClassifierVariant.BLITZ, pgn_dir=tmp_path, csv_dir=tmp_path, workers=0)


def test_settings_from_environment(monkeypatch):
    monkeypatch.setenv("LICHESS_CLASSIFIER_DEFAULT_WORKERS", "3")
    monkeypatch.setenv("LICHESS_CLASSIFIER_CLASSIFIER_SETTINGS__REQUIRE_ALL_HEADERS", "false")
    monkeypatch.setenv("LICHESS_CLASSIFIER_CLASSIFIER_SETTINGS__TOURNAMENT_MARKER", "arena")
    loaded = Settings()
    assert loaded.default_workers == 3
    assert loaded.classifier_settings.require_all_headers is False
    assert loaded.classifier_settings.tournament_marker == "arena"
