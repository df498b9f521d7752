"""Centralized logging configuration for the manifesto analysis."""

import logging
import sys

ROOT_LOGGER = "manifesto"


class PipelineLogger:
    """Shared stdout handler for every logger under the ``manifesto`` namespace.

    Stages create their loggers at import time with ``get_logger``, which
    attaches the handler at INFO. The job then calls
    ``setup_logger("run_analysis", LOG_LEVEL)`` to apply the configured level.
    """

    _initialized = False
    _level = logging.INFO

    @classmethod
    def initialize(cls, level: int = logging.INFO) -> None:
        """Attach the stdout handler to the root manifesto logger once.

        Args:
            level: Logging level (default: INFO).
        """
        if cls._initialized:
            return

        root_logger = logging.getLogger(ROOT_LOGGER)
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(
            '%(asctime)s | %(levelname)-8s | %(name)-25s | %(message)s',
            datefmt='%H:%M:%S'
        ))
        root_logger.addHandler(handler)
        root_logger.propagate = False

        cls._initialized = True
        cls.set_level(level)

    @classmethod
    def set_level(cls, level: int) -> None:
        """Change the level of the root logger and its handlers."""
        cls._level = level
        root_logger = logging.getLogger(ROOT_LOGGER)
        root_logger.setLevel(level)
        for handler in root_logger.handlers:
            handler.setLevel(level)

    @classmethod
    def get_logger(cls, name: str) -> logging.Logger:
        """Get a child of the root manifesto logger.

        Args:
            name: Logger name (e.g., "run_analysis" or "stages.sentiment").

        Returns:
            logging.Logger: Configured logger instance.
        """
        if not cls._initialized:
            cls.initialize()

        full_name = name if name.startswith(ROOT_LOGGER) else f"{ROOT_LOGGER}.{name}"
        return logging.getLogger(full_name)


def resolve_level(level: int | str) -> int:
    """Turn a level name from ``.env`` into a logging level.

    Unknown names fall back to INFO.
    """
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(level.strip().upper())
    return resolved if isinstance(resolved, int) else logging.INFO


def setup_logger(name: str = ROOT_LOGGER, level: int | str = logging.INFO) -> logging.Logger:
    """Set up and return a configured logger for a job.

    Args:
        name: Logger name (typically the job name).
        level: Logging level, as an int or a level name such as "DEBUG".

    Returns:
        logging.Logger: Configured logger instance.
    """
    level = resolve_level(level)
    PipelineLogger.initialize(level)
    PipelineLogger.set_level(level)
    return PipelineLogger.get_logger(name)


def get_logger(name: str) -> logging.Logger:
    """Get a logger for a stage or helper module, e.g. ``"stages.corpus"``."""
    return PipelineLogger.get_logger(name)
