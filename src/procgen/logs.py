"""Structured logging setup."""

import logging

import structlog


def configure_logging(level: int | str = logging.INFO) -> None:
    """Configure structlog with level filtering, ISO timestamps and console output.

    Args:
        level: Minimum level, as a logging constant or name ("DEBUG", "info", ...).
    """
    if isinstance(level, str):
        resolved = logging.getLevelName(level.upper())
        if not isinstance(resolved, int):
            raise ValueError(f"Unknown log level: {level}")
        level = resolved

    structlog.configure(
        processors=[
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.dev.ConsoleRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
    )
