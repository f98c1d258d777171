# lichess_classifier/core/variants.py
"""Maps each `ClassifierVariant` to its classifier class."""
from typing import Dict, List, Type

from lichess_classifier.config.settings import ClassifierSettings
from lichess_classifier.core.berserk import BerserkClassifier
from lichess_classifier.core.blitz import BlitzClassifier
from lichess_classifier.core.lifecycle import GameClassifier
from lichess_classifier.core.time_odds import TimeOddsClassifier
from lichess_classifier.types import ClassifierVariant

CLASSIFIERS: Dict[ClassifierVariant, Type[GameClassifier]] = {
    ClassifierVariant.BERSERK: BerserkClassifier,
    ClassifierVariant.BLITZ: BlitzClassifier,
    ClassifierVariant.TIME_ODDS: TimeOddsClassifier,
}


def create_classifier(variant: ClassifierVariant, settings: ClassifierSettings) -> GameClassifier:
    """Creates a fresh classifier instance; every worker needs its own."""
    return CLASSIFIERS[variant](settings)


def csv_columns(variant: ClassifierVariant) -> List[str]:
    """The CSV header of a variant's output."""
    return CLASSIFIERS[variant].row_type.csv_columns()
