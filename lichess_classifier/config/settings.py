# lichess_classifier/config/settings.py
"""
Configuration settings for the lichess classifier, powered by Pydantic.

This module centralizes all tunable parameters and default values. Classifier
instances receive their `ClassifierSettings` explicitly (including the compiled
clock matcher), so several classifiers can run side by side without sharing any
module-level state.
"""
import re
from pathlib import Path
from typing import List, Optional, Pattern

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from lichess_classifier.types import ClassifierVariant

# Lichess writes `[%clk 0:02:57]`; see
# https://www.enpassant.dk/chess/palview/enhancedpgn.htm for the command syntax.
DEFAULT_CLOCK_PATTERN = re.compile(
    r"\[%clk\s+"               # Literal start of the command
    r"(?P<h>[0-9]+):"          # Hours
    r"(?P<m>[0-9]+):"          # Minutes
    r"(?P<s>[0-9]+)"           # Whole seconds (ASCII digits only)
    r"\s*\]"                   # Literal end of the command
)


class ClassifierSettings(BaseModel):
    """Groups every knob the per-game classifiers read."""
    clock_pattern: Pattern[str] = Field(
        DEFAULT_CLOCK_PATTERN,
        description="Regex recognizing a clock command; must define the named groups h, m and s.",
    )
    rounding_tolerance_seconds: int = Field(
        1, ge=0,
        description="Extra seconds a clock may gain over one increment before the game counts as having a mid-game time grant.",
    )
    berserk_initial_times: List[int] = Field(
        default_factory=lambda: [60, 180],
        description="Initial clock times (seconds, zero increment) accepted by the berserk classifier.",
    )
    tournament_marker: str = Field("tournament", description="Substring of the Event header that marks arena games.")
    blitz_event: str = Field("Rated Blitz game", description="Exact Event header accepted by the blitz extractor.")
    require_all_headers: bool = Field(
        True,
        description="Reject games missing a header the variant's row needs, instead of writing a default value.",
    )

    @field_validator("clock_pattern")
    @classmethod
    def validate_clock_groups(cls, pattern: Pattern[str]) -> Pattern[str]:
        """Ensures the clock regex exposes the groups the time parser reads."""
        missing = {"h", "m", "s"} - set(pattern.groupindex)
        if missing:
            raise ValueError(f"Configuration error: clock_pattern lacks groups {sorted(missing)}.")
        return pattern

    @field_validator("berserk_initial_times")
    @classmethod
    def validate_berserk_times(cls, times: List[int]) -> List[int]:
        """The berserk row stores whole minutes, so every accepted time must be one."""
        if any(t <= 0 or t % 60 for t in times):
            raise ValueError("Configuration error: berserk_initial_times must be positive whole minutes.")
        return times


class RunConfig(BaseModel):
    """
    Encapsulates all configuration for a single run over one PGN directory.

    Constructed at startup from command-line arguments and the main settings.
    """
    variant: ClassifierVariant
    pgn_dir: Path
    csv_dir: Path
    workers: Optional[int] = Field(None, ge=1, description="Worker processes; None means one per CPU.")
    show_progress: bool = True
    log_level: str = "INFO"
    log_file: Optional[Path] = None
    json_logs: bool = Field(False, description="Render console logs as JSON, in workers as well as the parent.")
    classifier_settings: ClassifierSettings = Field(default_factory=ClassifierSettings)


# --- Main Application Settings Class ---

class Settings(BaseSettings):
    """
    Main configuration class for the application.

    It loads settings from environment variables with the prefix
    'LICHESS_CLASSIFIER_'. Nested models can be configured using a double
    underscore delimiter, e.g. `LICHESS_CLASSIFIER_CLASSIFIER_SETTINGS__REQUIRE_ALL_HEADERS=false`.
    """
    model_config = SettingsConfigDict(env_prefix='LICHESS_CLASSIFIER_', env_nested_delimiter='__')

    classifier_settings: ClassifierSettings = Field(default_factory=ClassifierSettings)
    pgn_patterns: List[str] = Field(default_factory=lambda: ["*.pgn", "*.pgn.bz2", "*.pgn.zst", "*.pgn.gz"])
    default_workers: Optional[int] = None
    default_log_level: str = "INFO"
    show_progress: bool = True

# A singleton instance of the settings, accessible throughout the application.
settings = Settings()
