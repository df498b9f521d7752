"""Tests for logging configuration."""

import logging

import pytest

from manifesto.logger import get_logger, resolve_level, setup_logger


@pytest.fixture
def restore_level():
    """Put the manifesto logger back to INFO after a test changes it."""
    yield
    setup_logger("run_analysis", logging.INFO)


class TestResolveLevel:
    """Test level names from configuration."""

    def test_level_names(self):
        """Test names are case-insensitive."""
        assert resolve_level("debug") == logging.DEBUG
        assert resolve_level(" WARNING ") == logging.WARNING

    def test_integer_passthrough(self):
        """Test integer levels are kept."""
        assert resolve_level(logging.ERROR) == logging.ERROR

    def test_unknown_name(self):
        """Test unknown names fall back to INFO."""
        assert resolve_level("VERBOSE") == logging.INFO


class TestLoggerHierarchy:
    """Test stage and job loggers share the manifesto root."""

    def test_stage_logger_name(self):
        """Test stage loggers are children of the root logger."""
        assert get_logger("stages.corpus").name == "manifesto.stages.corpus"
        assert get_logger("manifesto.stages.corpus").name == "manifesto.stages.corpus"

    def test_setup_applies_level_after_stage_import(self, restore_level):
        """Test the job level applies even when stage loggers already exist."""
        stage_logger = get_logger("stages.keyness")
        setup_logger("run_analysis", "DEBUG")

        root = logging.getLogger("manifesto")
        assert root.level == logging.DEBUG
        assert all(handler.level == logging.DEBUG for handler in root.handlers)
        assert stage_logger.isEnabledFor(logging.DEBUG)
