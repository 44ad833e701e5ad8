"""structlog setup for the command-line front-end."""

import logging
import sys

import structlog


def configure_logging(level: str = 'warning', console_colors: bool = True):
    """Route structlog output to stderr, filtered at `level`."""
    structlog.configure(
        processors=[
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt='%H:%M:%S'),
            structlog.dev.ConsoleRenderer(colors=console_colors),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(
            logging.getLevelName(level.upper())
        ),
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=False,
    )
