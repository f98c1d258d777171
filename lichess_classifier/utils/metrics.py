"""
Centralized Prometheus metrics definitions for the lichess classifier.

Workers run in separate processes, so these are only updated in the parent
process, from the `FileReport` each worker returns.
"""
from prometheus_client import Counter, Histogram

# A common prefix for all application-specific metrics.
PREFIX = "lichess_classifier"

# --- File Metrics ---

FILES_PROCESSED_TOTAL = Counter(
    f"{PREFIX}_files_processed_total",
    "Total number of PGN files fully processed.",
    ["variant"],
)

FILES_FAILED_TOTAL = Counter(
    f"{PREFIX}_files_failed_total",
    "Total number of PGN files whose worker aborted.",
    ["variant"],
)

FILE_PROCESSING_DURATION_SECONDS = Histogram(
    f"{PREFIX}_file_processing_duration_seconds",
    "Histogram of the time taken to classify a single PGN file.",
    buckets=(1, 10, 60, 300, 900, 1800, 3600, 7200, float("inf"))
)

# --- Game Metrics ---

GAMES_SEEN_TOTAL = Counter(
    f"{PREFIX}_games_seen_total",
    "Total number of games read from PGN files.",
    ["variant"],
)

GAMES_ACCEPTED_TOTAL = Counter(
    f"{PREFIX}_games_accepted_total",
    "Total number of games written as CSV rows.",
    ["variant"],
)

GAMES_REJECTED_TOTAL = Counter(
    f"{PREFIX}_games_rejected_total",
    "Total number of games skipped by the classifier.",
    ["variant"],
)
