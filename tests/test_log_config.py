"""Tests for logging configuration."""

import structlog

from storefront.infrastructure.log_config import configure_logging


def test_configure_logging_sets_processors() -> None:
    """structlog renders JSON through the stdlib logger factory."""
    try:
        configure_logging("debug")

        config = structlog.get_config()
        assert isinstance(config["processors"][-1], structlog.processors.JSONRenderer)
        assert structlog.contextvars.merge_contextvars in config["processors"]
        assert isinstance(config["logger_factory"], structlog.stdlib.LoggerFactory)
    finally:
        structlog.reset_defaults()
