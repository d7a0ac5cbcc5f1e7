"""Structlog-based logging for the legal research aggregator.

Library code logs; it never prints. Both structlog loggers and the stdlib
``logging`` loggers used by the source modules render the same JSON lines on
stderr, so stdout carries nothing but command output.
"""
from __future__ import annotations

from typing import Literal, TextIO

import logging
import sys

import structlog

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
_HANDLER_NAME = "legal_research"

_SHARED_PROCESSORS = [
    structlog.stdlib.add_logger_name,
    structlog.processors.add_log_level,
    structlog.processors.TimeStamper(fmt="ISO"),
]


def configure_logging(level: LogLevel = "WARNING", stream: TextIO | None = None) -> None:
    numeric = getattr(logging, level)

    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=_SHARED_PROCESSORS,
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                structlog.processors.JSONRenderer(),
            ],
        )
    )
    handler.set_name(_HANDLER_NAME)
    root = logging.getLogger()
    for old in [h for h in root.handlers if h.get_name() == _HANDLER_NAME]:
        root.removeHandler(old)
    root.addHandler(handler)
    root.setLevel(numeric)

    structlog.configure(
        processors=[
            *_SHARED_PROCESSORS,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(numeric),
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=False,
    )


def get_logger(name: str = "legal_research"):
    return structlog.get_logger(name)


# Initialize default config
configure_logging()
