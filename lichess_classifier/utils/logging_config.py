# lichess_classifier/utils/logging_config.py
"""
Configures structured logging for the CLI process and its pool workers.

structlog events are routed through the stdlib `logging` tree and rendered by a
`ProcessorFormatter`, so records from third-party libraries (python-chess,
concurrent.futures) come out in the same format as our own.
"""

import logging
import sys
from pathlib import Path
from typing import List, Optional

import structlog
from structlog.types import Processor

# python-chess logs movetext problems here; the visitor already
# turns those into per-game rejects.
_QUIET_LOGGERS = {"chess.pgn": logging.ERROR}


def _shared_processors() -> List[Processor]:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        # Several workers write to the same console and log file.
        structlog.processors.CallsiteParameterAdder(
            {structlog.processors.CallsiteParameter.PROCESS_NAME}
        ),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]


def setup_logging(
    log_level: str = "INFO",
    log_to_console: bool = True,
    log_file: Optional[Path] = None,
    force_json_console: bool = False,
    extra_processors: Optional[List[Processor]] = None,
) -> None:
    """
    Configures application-wide structured logging using structlog.

    Also used as the `ProcessPoolExecutor` initializer, so every worker process
    renders its records exactly like the parent.

    Args:
        log_level: Root level name, e.g. "DEBUG".
        log_to_console: Attach a handler writing to stdout.
        log_file: When set, also append JSON lines to this file.
        force_json_console: Render console output as JSON instead of the
            human-readable renderer.
        extra_processors: Processors run after the shared chain.
    """
    shared_processors = _shared_processors()

    structlog.configure(
        processors=shared_processors + (extra_processors or []) + [
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    handlers: List[logging.Handler] = []
    if log_to_console:
        renderer: Processor
        if force_json_console:
            renderer = structlog.processors.JSONRenderer()
        else:
            renderer = structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty())
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setFormatter(structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=shared_processors,
            processor=renderer,
        ))
        handlers.append(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file, mode="a", encoding="utf-8")
        file_handler.setFormatter(structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=shared_processors,
            processor=structlog.processors.JSONRenderer(),
        ))
        handlers.append(file_handler)

    logging.basicConfig(handlers=handlers, level=log_level.upper(), force=True)
    for name, level in _QUIET_LOGGERS.items():
        logging.getLogger(name).setLevel(level)
