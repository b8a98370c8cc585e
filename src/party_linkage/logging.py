"""Structlog-based logging for Party Linkage.

Library code logs through structlog event names; no print() in library code.
"""
from __future__ import annotations

from typing import Literal

import logging
import structlog

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


def configure_logging(level: LogLevel = "INFO", json: bool = True) -> None:
    logging.basicConfig(format="%(message)s", level=getattr(logging, level))
    renderer = (
        structlog.processors.JSONRenderer()
        if json
        else structlog.dev.ConsoleRenderer(colors=False)
    )
    structlog.configure(
        processors=[
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="ISO"),
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(getattr(logging, level)),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str = "party_linkage"):
    return structlog.get_logger(name)
