"""
structlog configuration.
Path: command_env/logging_setup.py
"""

import logging

import structlog

from command_env.config import EnvironmentSettings


def configure_logging(level: str = "INFO") -> None:
    """Install a console renderer filtered at the given level name"""
    numeric_level = logging.getLevelName(level.upper())
    if not isinstance(numeric_level, int):
        raise ValueError(f"Unknown log level: {level}")

    structlog.configure(
        processors=[
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.add_log_level,
            structlog.processors.format_exc_info,
            structlog.dev.ConsoleRenderer()
        ],
        wrapper_class=structlog.make_filtering_bound_logger(numeric_level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory()
    )


def configure_logging_from_settings(settings: EnvironmentSettings) -> None:
    """Apply the log level carried by EnvironmentSettings"""
    configure_logging(settings.log_level)
