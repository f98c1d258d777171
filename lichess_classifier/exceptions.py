# lichess_classifier/exceptions.py
"""
Defines custom exceptions for the lichess classifier.

Centralizing exceptions in this module prevents circular dependencies between
the core classifiers, the I/O services and the orchestration layer. Everything
derives from `ClassifierError`, so callers can catch application errors without
also catching programming mistakes.
"""


class ClassifierError(Exception):
    """Base class for all application-specific, catchable errors."""
    pass


class GameRecordError(ClassifierError):
    """
    Base class for problems confined to a single game record.

    These never escape the classifier: the lifecycle catches them, rejects the
    current game and moves on to the next one.
    """
    pass


class HeaderParseError(GameRecordError):
    """Raised when a PGN header value cannot be parsed into its expected type."""

    def __init__(self, name: str, value: str, reason: str):
        super().__init__(f"Invalid {name} header {value!r}: {reason}")
        self.name = name
        self.value = value


class ClockParseError(GameRecordError):
    """Raised when a move comment carries no usable `[%clk ...]` command."""
    pass


class LifecycleError(ClassifierError):
    """
    Raised when events reach a classifier out of order, e.g. a header before
    `begin_game`. This indicates a bug in the event source.
    """
    pass


class PgnSourceError(ClassifierError):
    """
    Raised when a PGN source cannot be opened, read or decompressed.

    Aborts the processing of that file only.
    """
    pass


class CsvSinkError(ClassifierError):
    """Raised when an output CSV file cannot be created or written."""
    pass


class InvalidInvocationError(ClassifierError):
    """Raised for unusable command-line arguments, before any file is processed."""
    pass
