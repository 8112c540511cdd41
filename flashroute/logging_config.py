"""structlog setup shared by the CLI and the API server."""

from __future__ import annotations

import logging

import structlog


def configure_logging(level: int | str = logging.INFO, json: bool = False) -> None:
    """Configure structlog for an entry point.

    Args:
        level: Minimum level, as a logging constant or a name such as "debug"
        json: Render events as JSON lines instead of the console format
    """
    if isinstance(level, str):
        level = logging.getLevelNamesMapping().get(level.upper(), logging.INFO)

    renderer = (
        structlog.processors.JSONRenderer() if json else structlog.dev.ConsoleRenderer()
    )
    structlog.configure(
        processors=[
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
    )
