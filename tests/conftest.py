"""Shared pytest fixtures."""

from __future__ import annotations

import sys

import pytest
import structlog


@pytest.fixture(autouse=True)
def configure_structlog_for_tests() -> None:
    """Send structlog output to stdout so capsys can capture it."""
    structlog.configure(
        processors=[
            structlog.stdlib.add_log_level,
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.dev.ConsoleRenderer(colors=False),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stdout),
        cache_logger_on_first_use=False,
    )
