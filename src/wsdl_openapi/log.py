"""structlog setup shared by the CLI and the batch runner."""

import logging
import sys

import structlog


def _stderr_logger_factory(*args) -> structlog.PrintLogger:
    # Looked up per logger so redirected streams (CliRunner, pytest) are honored.
    return structlog.PrintLogger(file=sys.stderr)


def configure_logging(level: str = "INFO", fmt: str = "console") -> None:
    """Configure structlog for the process.

    ``fmt`` is either ``console`` (human readable) or ``json``. Log lines go to
    stderr so that documents written to stdout stay parseable.
    """
    structlog.configure(
        processors=[
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.dev.ConsoleRenderer(colors=False) if fmt == "console"
            else structlog.processors.JSONRenderer(sort_keys=True),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(
            getattr(logging, level.upper(), logging.INFO)
        ),
        logger_factory=_stderr_logger_factory,
        cache_logger_on_first_use=False,
    )
