#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Tests for CLI logging configuration."""

import logging

import pytest

from mdattrs.logging_utils import PACKAGE_LOGGER, configure_logging, resolve_log_level


@pytest.fixture(autouse=True)
def restore_logging():
    """Put back the logger state configure_logging replaces."""
    root, package = logging.getLogger(), logging.getLogger(PACKAGE_LOGGER)
    handlers, level, package_level = root.handlers[:], root.level, package.level
    yield
    for handler in root.handlers:
        if handler not in handlers:
            handler.close()
    root.handlers[:] = handlers
    root.setLevel(level)
    package.setLevel(package_level)


@pytest.mark.unit
class TestResolveLogLevel:
    """Test level name handling."""

    @pytest.mark.parametrize(
        "value, expected",
        [("debug", logging.DEBUG), ("INFO", logging.INFO), (logging.ERROR, logging.ERROR), ("loud", logging.WARNING)],
    )
    def test_levels(self, value, expected) -> None:
        """Test names, numbers and unknown names."""
        assert resolve_log_level(value) == expected


@pytest.mark.unit
class TestConfigureLogging:
    """Test handler installation."""

    def test_package_level_only(self) -> None:
        """Test debug applies to mdattrs while the root stays at WARNING."""
        logger = configure_logging("DEBUG")

        assert logger.name == PACKAGE_LOGGER
        assert logger.level == logging.DEBUG
        assert logging.getLogger().level == logging.WARNING
        assert len(logging.getLogger().handlers) == 1

    def test_trace_mode_opens_root(self) -> None:
        """Test trace mode lowers the root level and adds timestamps."""
        configure_logging(logging.DEBUG, trace_mode=True)
        root = logging.getLogger()

        assert root.level == logging.DEBUG
        assert "%(asctime)s" in root.handlers[0].formatter._fmt

    def test_log_file(self, tmp_path) -> None:
        """Test records are copied to the log file."""
        path = tmp_path / "run.log"
        configure_logging("INFO", log_file=str(path))

        logging.getLogger("mdattrs.test").info("hello file")
        for handler in logging.getLogger().handlers:
            handler.flush()
        assert "INFO: hello file" in path.read_text(encoding="utf-8")

    def test_unopenable_log_file(self, tmp_path, capsys) -> None:
        """Test a bad log path is reported and the console handler kept."""
        configure_logging("INFO", log_file=str(tmp_path / "missing" / "run.log"))

        assert len(logging.getLogger().handlers) == 1
        assert "Could not open log file" in capsys.readouterr().err
