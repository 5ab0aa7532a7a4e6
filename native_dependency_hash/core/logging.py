"""Structured logging for the CLI: structlog events rendered by a stderr handler."""

from __future__ import annotations

import logging
import logging.config
import os

import structlog

_PACKAGE_LOGGER = "native_dependency_hash"


def setup_logging(verbose: bool = False) -> None:
    """Send structlog events from this package to stderr, so stdout stays pipeable.

    ``NATIVE_HASH_LOG_LEVEL`` overrides the level (WARNING, or DEBUG with
    ``--verbose``). ``NATIVE_HASH_LOG_FORMAT=json`` prints one JSON object per
    event instead of the console rendering.
    """
    level = os.environ.get("NATIVE_HASH_LOG_LEVEL") or ("DEBUG" if verbose else "WARNING")
    if os.environ.get("NATIVE_HASH_LOG_FORMAT", "console").lower() == "json":
        renderer: structlog.types.Processor = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(pad_event=0)

    pre_chain: list[structlog.types.Processor] = [
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
    ]

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            *pre_chain,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "events": {
                    "()": structlog.stdlib.ProcessorFormatter,
                    "foreign_pre_chain": pre_chain,
                    "processors": [
                        structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                        renderer,
                    ],
                },
            },
            "handlers": {
                "stderr": {
                    "class": "logging.StreamHandler",
                    "stream": "ext://sys.stderr",
                    "formatter": "events",
                },
            },
            "loggers": {
                _PACKAGE_LOGGER: {
                    "handlers": ["stderr"],
                    "level": level.upper(),
                    "propagate": False,
                },
            },
        }
    )
