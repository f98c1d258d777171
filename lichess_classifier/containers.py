# lichess_classifier/containers.py
"""
Defines the Dependency Injection (DI) container for the application.

This module uses the `punq` library to manage the creation and wiring of
the services and components of a classification run.
"""

from typing import Optional, Sequence

import punq

from lichess_classifier.config.settings import ClassifierSettings, RunConfig, settings
from lichess_classifier.orchestration.file_processor import FileProcessor
from lichess_classifier.orchestration.orchestrator import ClassificationOrchestrator, ExecutorFactory
from lichess_classifier.services.pgn_service import PgnService


def get_container(
    run_config: RunConfig,
    pgn_patterns: Optional[Sequence[str]] = None,
    executor_factory: Optional[ExecutorFactory] = None,
) -> punq.Container:
    """
    Initializes and returns a DI container configured for a specific run.
    """
    container = punq.Container()
    patterns = list(pgn_patterns) if pgn_patterns is not None else settings.pgn_patterns

    # Register instances that are created outside the container's control.
    container.register(RunConfig, instance=run_config)
    container.register(ClassifierSettings, instance=run_config.classifier_settings)

    container.register(PgnService, factory=PgnService, scope=punq.Scope.singleton)
    container.register(
        FileProcessor,
        factory=lambda: FileProcessor(
            run_config.variant,
            container.resolve(ClassifierSettings),
            container.resolve(PgnService),
        ),
    )
    container.register(
        ClassificationOrchestrator,
        factory=lambda: ClassificationOrchestrator(
            run_config,
            container.resolve(FileProcessor),
            container.resolve(PgnService),
            patterns,
            executor_factory,
        ),
    )

    return container
