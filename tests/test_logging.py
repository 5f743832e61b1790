"""Tests for logging utilities."""

import json
import sys
import logging

import pytest
from sfv_verify.config import LoggingConfig
from sfv_verify.logging import (
    PACKAGE_LOGGER, DetailedFormatter, LogContext, SimpleFormatter, StructuredFormatter,
    setup_logging
)


@pytest.fixture
def package_logger():
    """Restore the sfv_verify logger's handlers, level and propagation after a test."""
    logger = logging.getLogger(PACKAGE_LOGGER)
    handlers = logger.handlers[:]
    level = logger.level
    propagate = logger.propagate
    yield logger
    for handler in logger.handlers:
        if handler not in handlers:
            handler.close()
    logger.handlers[:] = handlers
    logger.setLevel(level)
    logger.propagate = propagate


def make_record(msg="hello", level=logging.INFO):
    return logging.LogRecord(
        name="sfv_verify.test",
        level=level,
        pathname=__file__,
        lineno=10,
        msg=msg,
        args=(),
        exc_info=None,
    )


class TestFormatters:
    """Tests for log formatters."""

    def test_structured_formatter(self):
        """Test JSON output fields."""
        data = json.loads(StructuredFormatter().format(make_record()))

        assert data["level"] == "INFO"
        assert data["logger"] == "sfv_verify.test"
        assert data["message"] == "hello"
        assert data["line"] == 10
        assert data["thread"] == "MainThread"

    def test_structured_formatter_extra_fields(self):
        """Test extra fields are merged into JSON output."""
        record = make_record()
        record.extra_fields = {"command": "verify"}

        data = json.loads(StructuredFormatter().format(record))

        assert data["command"] == "verify"

    def test_structured_formatter_exception(self):
        """Test exception info is included."""
        try:
            raise ValueError("bad")
        except ValueError:
            record = make_record()
            record.exc_info = sys.exc_info()

        data = json.loads(StructuredFormatter().format(record))

        assert data["exception"]["type"] == "ValueError"
        assert data["exception"]["message"] == "bad"

    def test_simple_formatter(self):
        """Test simple format layout."""
        assert SimpleFormatter().format(make_record()) == "INFO     | hello"

    def test_detailed_formatter(self):
        """Test detailed format includes thread and location."""
        output = DetailedFormatter().format(make_record())

        assert "| MainThread |" in output
        assert "sfv_verify.test:10 | hello" in output


class TestSetupLogging:
    """Tests for setup_logging function."""

    def test_configures_package_logger(self, package_logger):
        """Test level and console formatter land on the package logger."""
        root_handlers = logging.getLogger().handlers[:]

        returned = setup_logging(LoggingConfig(level="debug", format="json"))

        assert returned is package_logger
        assert package_logger.level == logging.DEBUG
        assert package_logger.propagate is False
        installed = [h for h in package_logger.handlers if h.formatter is not None]
        assert any(isinstance(h.formatter, StructuredFormatter) for h in installed)
        assert logging.getLogger().handlers == root_handlers

    def test_repeated_setup_replaces_handlers(self, package_logger):
        """Test a second call does not stack console handlers."""
        before = len(package_logger.handlers)

        setup_logging(LoggingConfig(format="simple"))
        setup_logging(LoggingConfig(format="detailed"))

        assert len(package_logger.handlers) == before + 1
        assert isinstance(package_logger.handlers[-1].formatter, DetailedFormatter)

    def test_file_handler(self, package_logger, tmp_path):
        """Test log file receives JSON records from package modules."""
        log_file = tmp_path / "logs" / "sfv.log"

        setup_logging(LoggingConfig(level="INFO", format="simple", file=str(log_file)))
        logging.getLogger("sfv_verify.verifier").info("written")
        for handler in package_logger.handlers:
            handler.flush()

        lines = log_file.read_text(encoding="utf-8").splitlines()
        record = json.loads(lines[-1])
        assert record["message"] == "written"
        assert record["logger"] == "sfv_verify.verifier"


class TestLogContext:
    """Tests for LogContext."""

    def test_fields_added_and_removed(self):
        """Test fields only apply inside the context."""
        logger = logging.getLogger(PACKAGE_LOGGER)
        factory = logging.getLogRecordFactory()

        with LogContext(logger, command="verify"):
            record = logging.getLogRecordFactory()(
                "sfv_verify.manifest", logging.INFO, __file__, 1, "msg", (), None
            )
            assert record.extra_fields == {"command": "verify"}

        assert logging.getLogRecordFactory() is factory

    def test_other_loggers_untouched(self):
        """Test records outside the logger tree get no fields."""
        logger = logging.getLogger(PACKAGE_LOGGER)

        with LogContext(logger, command="create"):
            record = logging.getLogRecordFactory()(
                "sfv_verify_other", logging.INFO, __file__, 1, "msg", (), None
            )

        assert not hasattr(record, "extra_fields")
