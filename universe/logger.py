from __future__ import annotations

import logging
from typing import Any

import structlog

from universe.settings import log_json, log_level


def setup_logger() -> Any:
    level = getattr(logging, log_level(), logging.INFO)
    logging.basicConfig(format="%(message)s", level=level)

    renderer: Any
    if log_json():
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer()

    structlog.configure(
        wrapper_class=structlog.make_filtering_bound_logger(level),
        processors=[
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.add_log_level,
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            renderer,
        ],
    )

    return structlog.get_logger()
