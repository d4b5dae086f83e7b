# tests/test_core/test_logging.py
"""Tests for A_core/A00_logging.py."""

import logging

import pytest

from compose_bom.A_core.A00_logging import (
    ROOT_LOGGER_NAME,
    ColoredFormatter,
    LogContext,
    configure_logging,
    current_run_id,
    get_logger,
    timed,
)


class TestGetLogger:
    def test_prefixes_package_namespace(self):
        assert get_logger("tests.sample").name == f"{ROOT_LOGGER_NAME}.tests.sample"

    def test_keeps_package_names(self):
        assert get_logger("compose_bom.H_pipeline").name == "compose_bom.H_pipeline"


class TestLogContext:
    def test_logs_start_and_completion(self, caplog):
        logger = get_logger("tests.context")
        with caplog.at_level(logging.INFO, logger=ROOT_LOGGER_NAME):
            with LogContext(logger, "BOM extraction"):
                pass
        messages = [r.getMessage() for r in caplog.records]
        assert messages[0] == "Starting: BOM extraction"
        assert messages[1].startswith("Completed: BOM extraction")

    def test_logs_failure_and_reraises(self, caplog):
        logger = get_logger("tests.context")
        with caplog.at_level(logging.INFO, logger=ROOT_LOGGER_NAME):
            with pytest.raises(RuntimeError):
                with LogContext(logger, "BOM extraction"):
                    raise RuntimeError("boom")
        assert any(r.levelno == logging.ERROR and "RuntimeError: boom" in r.getMessage() for r in caplog.records)


class TestTimed:
    def test_returns_result(self, caplog):
        @timed(level=logging.INFO)
        def add(a, b):
            return a + b

        with caplog.at_level(logging.INFO, logger=ROOT_LOGGER_NAME):
            assert add(1, 2) == 3
        assert any("add completed" in r.getMessage() for r in caplog.records)


class TestColoredFormatter:
    def test_does_not_mutate_record(self):
        record = logging.LogRecord("compose_bom.x", logging.WARNING, __file__, 1, "msg", None, None)
        ColoredFormatter(fmt="%(levelname)s | %(message)s").format(record)
        assert record.levelname == "WARNING"


class TestConfigureLogging:
    def test_file_handler_per_run(self, tmp_path):
        configure_logging(log_dir=tmp_path, run_id="run1", enable_file_logging=True, enable_console_logging=False)
        try:
            get_logger("tests.file").info("written to file")
            package_logger = logging.getLogger(ROOT_LOGGER_NAME)
            for handler in package_logger.handlers:
                handler.flush()
            assert current_run_id() == "run1"
            assert "written to file" in (tmp_path / "compose_bom_run1.log").read_text(encoding="utf-8")
        finally:
            configure_logging(enable_console_logging=False)

    def test_reconfigure_replaces_handlers(self):
        configure_logging()
        configure_logging()
        assert len(logging.getLogger(ROOT_LOGGER_NAME).handlers) == 1
        configure_logging(enable_console_logging=False)
        assert logging.getLogger(ROOT_LOGGER_NAME).handlers == []
