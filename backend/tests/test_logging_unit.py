"""
Unit tests for logging configuration.
"""
import pytest
from loguru import logger

from dominant_colors.utils.logging import configure_logging, request_logger


@pytest.fixture
def restore_logging():
    """Reattach the stdout sink once capture has ended."""
    yield
    configure_logging("INFO")


def test_configure_logging_with_explicit_level(restore_logging, capsys):
    configure_logging("DEBUG")
    logger.debug("debug line visible")
    configure_logging("WARNING")
    logger.info("info line hidden")

    out = capsys.readouterr().out
    assert "debug line visible" in out
    assert "info line hidden" not in out


def test_request_logger_binds_request_id(restore_logging, capsys):
    configure_logging("INFO")
    request_logger("dc-test-1234").info("bound message")

    out = capsys.readouterr().out
    assert "bound message" in out
    assert "dc-test-1234" in out
